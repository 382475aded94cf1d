"""coltable: column layout for terminal tables."""

# Layout engine
from coltable.table import Cell, Row, Table

# Options and terminal detection
from coltable.config import (
    DEFAULT_LINE_LENGTH,
    DEFAULT_SEPARATOR_SPACES,
    TableOptions,
    terminal_width,
)

# Record rendering
from coltable.fields import (
    Field,
    FieldRenderError,
    TableFormatter,
    build_table,
    format_name,
    infer_fields,
    render_records,
)

# Formatter helpers
from coltable.formatters import Formatter, compose, preserve_padding

# Width utilities
from coltable.utils import (
    AnsiCodeTracker,
    WidthMeasurer,
    extract_ansi_code,
    pad_to_width,
    truncate_to_width,
    visible_width,
    wrap_to_width,
)

__all__ = [
    # Layout engine
    "Cell",
    "Row",
    "Table",
    # Options
    "DEFAULT_LINE_LENGTH",
    "DEFAULT_SEPARATOR_SPACES",
    "TableOptions",
    "terminal_width",
    # Records
    "Field",
    "FieldRenderError",
    "TableFormatter",
    "format_name",
    "infer_fields",
    "build_table",
    "render_records",
    # Formatters
    "Formatter",
    "compose",
    "preserve_padding",
    # Utilities
    "AnsiCodeTracker",
    "WidthMeasurer",
    "extract_ansi_code",
    "pad_to_width",
    "truncate_to_width",
    "visible_width",
    "wrap_to_width",
]
