"""Column layout engine.

A :class:`Table` collects rows of arbitrary values and renders them as
aligned text columns no wider than ``line_length``. Column widths are
allocated in two phases: every column is first clamped to a uniform cap of
``(line_length - separators) // columns``, then any width left over is handed
back greedily, in column order, to columns that were clamped below their
natural width. Cells that still do not fit are hard-wrapped or truncated with
an ellipsis.

Widths are computed into a fresh list on every render; rows and cells are
never mutated, so repeated renders are identical.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from coltable.formatters import Formatter
from coltable.utils import (
    WidthMeasurer,
    pad_to_width,
    truncate_to_width,
    visible_width,
    wrap_to_width,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cell:
    """One value within a row."""

    value: Any = None

    @property
    def text(self) -> str:
        if self.value is None:
            return ""
        return str(self.value)

    @property
    def lines(self) -> list[str]:
        return self.text.split("\n")

    def line_width(self, measure: WidthMeasurer = visible_width) -> int:
        """Return the width of the widest line in the cell."""
        return max(measure(line) for line in self.lines)


_BLANK = Cell()


@dataclass(frozen=True)
class Row:
    """An ordered group of cells."""

    cells: tuple[Cell, ...] = ()

    @classmethod
    def of(cls, *values: Any) -> Row:
        return cls(tuple(Cell(value) for value in values))

    def __len__(self) -> int:
        return len(self.cells)

    def cell(self, index: int) -> Cell:
        """Return the cell at *index*, or a blank cell past the end of the row."""
        if index < len(self.cells):
            return self.cells[index]
        return _BLANK


@dataclass
class Table:
    """Rows of values laid out as text columns.

    Attributes:
        line_length: Maximum width of a rendered line; ``0`` means columns
            take their natural width.
        wrap: Wrap oversized cells onto extra lines instead of truncating.
        separator_spaces: Number of spaces between adjacent columns.
        header_formatter: Applied to every cell of the first row after layout.
        first_column_formatter: Applied to the first cell of every other row.
        measure: Display width function used for layout.
        ellipsis: Marker appended to truncated cells.
    """

    line_length: int = 0
    wrap: bool = False
    separator_spaces: int = 2
    header_formatter: Formatter | None = None
    first_column_formatter: Formatter | None = None
    measure: WidthMeasurer = visible_width
    ellipsis: str = "..."
    _rows: list[Row] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.line_length < 0:
            raise ValueError(f"line_length must not be negative, got {self.line_length}")
        if self.separator_spaces < 0:
            raise ValueError(
                f"separator_spaces must not be negative, got {self.separator_spaces}"
            )

    # -- building -----------------------------------------------------------

    def add_row(self, *values: Any) -> Table:
        """Append a row of values. Rows may have differing lengths."""
        self._rows.append(Row.of(*values))
        return self

    def add_rows(self, rows: Iterable[Iterable[Any]]) -> Table:
        for values in rows:
            self.add_row(*values)
        return self

    @property
    def rows(self) -> tuple[Row, ...]:
        return tuple(self._rows)

    @property
    def column_count(self) -> int:
        return max((len(row) for row in self._rows), default=0)

    def __len__(self) -> int:
        return len(self._rows)

    # -- layout -------------------------------------------------------------

    def column_widths(self) -> list[int]:
        """Return the width allocated to each column for the current rows."""
        _raw, widths = self._allocate()
        return widths

    def _allocate(self) -> tuple[list[int], list[int]]:
        count = self.column_count
        raw = [0] * count
        for row in self._rows:
            for i, cell in enumerate(row.cells):
                raw[i] = max(raw[i], cell.line_width(self.measure))

        if self.line_length == 0 or count == 0:
            return raw, list(raw)

        separator_budget = (count - 1) * self.separator_spaces
        # A budget smaller than the separators still leaves one cell per column
        cap = max((self.line_length - separator_budget) // count, 1)
        widths = [min(width, cap) for width in raw]

        slack = self.line_length - separator_budget - sum(widths)
        for i, desired in enumerate(raw):
            if slack <= 0:
                break
            add = min(desired - widths[i], slack)
            if add > 0:
                widths[i] += add
                slack -= add

        return raw, widths

    # -- rendering ----------------------------------------------------------

    def render(self) -> str:
        """Render all rows, joined by newlines, without a trailing newline."""
        if not self._rows:
            return ""

        raw, widths = self._allocate()
        logger.debug(
            "Rendering %d rows in %d columns: raw widths %s, allocated %s",
            len(self._rows),
            len(widths),
            raw,
            widths,
        )

        separator = " " * self.separator_spaces
        lines: list[str] = []
        for index, row in enumerate(self._rows):
            lines.extend(self._render_row(row, widths, separator, header=index == 0))
        return "\n".join(lines)

    __str__ = render

    def _render_row(
        self,
        row: Row,
        widths: list[int],
        separator: str,
        header: bool,
    ) -> list[str]:
        columns = [self._render_cell(row.cell(i), width) for i, width in enumerate(widths)]
        height = max((len(column) for column in columns), default=1)

        lines: list[str] = []
        for line_index in range(height):
            parts: list[str] = []
            for col, (column, width) in enumerate(zip(columns, widths)):
                text = column[line_index] if line_index < len(column) else " " * width
                parts.append(self._format(text, col, header))
            lines.append(separator.join(parts))
        return lines

    def _render_cell(self, cell: Cell, width: int) -> list[str]:
        """Lay out one cell as a list of lines, each *width* columns wide."""
        if width <= 0:
            return cell.lines

        rendered: list[str] = []
        for line in cell.lines:
            if self.measure(line) <= width:
                rendered.append(pad_to_width(line, width, self.measure))
            elif self.wrap:
                rendered.extend(
                    pad_to_width(part, width, self.measure)
                    for part in wrap_to_width(line, width, self.measure)
                )
            else:
                truncated = truncate_to_width(line, width, self.ellipsis, self.measure)
                rendered.append(pad_to_width(truncated, width, self.measure))
        return rendered

    def _format(self, text: str, col: int, header: bool) -> str:
        if header:
            if self.header_formatter is not None:
                return self.header_formatter(text)
        elif col == 0 and self.first_column_formatter is not None:
            return self.first_column_formatter(text)
        return text
