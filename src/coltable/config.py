"""Table layout options and terminal width detection."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Any

from coltable.formatters import Formatter
from coltable.table import Table

DEFAULT_LINE_LENGTH = 80
DEFAULT_SEPARATOR_SPACES = 2


def terminal_width(fallback: int = DEFAULT_LINE_LENGTH) -> int:
    """Return the column count of the terminal attached to stdout.

    Falls back to *fallback* when stdout is not a terminal.
    """
    try:
        columns = os.get_terminal_size(sys.stdout.fileno()).columns
    except (AttributeError, ValueError, OSError):
        return fallback
    return columns if columns > 0 else fallback


@dataclass
class TableOptions:
    """Layout settings shared by every table an output layer builds."""

    line_length: int = 0
    wrap: bool = True
    separator_spaces: int = DEFAULT_SEPARATOR_SPACES
    header_formatter: Formatter | None = None
    first_column_formatter: Formatter | None = None
    ellipsis: str = "..."

    @classmethod
    def for_terminal(cls, **overrides: Any) -> TableOptions:
        """Options sized to the current terminal, with *overrides* applied."""
        overrides.setdefault("line_length", terminal_width())
        return cls(**overrides)

    def new_table(self) -> Table:
        return Table(
            line_length=self.line_length,
            wrap=self.wrap,
            separator_spaces=self.separator_spaces,
            header_formatter=self.header_formatter,
            first_column_formatter=self.first_column_formatter,
            ellipsis=self.ellipsis,
        )
