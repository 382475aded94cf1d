"""Render records into tables through named field templates.

Each :class:`Field` pairs a column header with a :meth:`str.format` template.
The template receives the record as positional argument ``{0}``; mapping
records also expose their string keys as named arguments::

    Field("ID", "{0.id}")          # attribute access
    Field("Name", "{name}")        # mapping key
    Field("Zone", "{0[location][zone]}")

When no fields are given, :func:`infer_fields` derives them from the first
record's dataclass fields, mapping keys or public attributes.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Protocol, Sequence, runtime_checkable

from coltable.config import TableOptions
from coltable.table import Table

logger = logging.getLogger(__name__)

_SCALARS = (str, bytes, int, float, complex, bool, type(None))
# Characters that cannot appear inside a str.format field name
_UNSAFE_KEY_CHARS = set("[]{}!:.")


class FieldRenderError(Exception):
    """A field template could not be rendered against a record."""

    def __init__(self, field_name: str, cause: Exception) -> None:
        super().__init__(f"Failed to render field {field_name!r}: {cause}")
        self.field_name = field_name
        self.cause = cause


@runtime_checkable
class TableFormatter(Protocol):
    """A payload that styles its own header row and first column."""

    def header_formatter(self, text: str) -> str: ...

    def first_column_formatter(self, text: str) -> str: ...


@dataclass(frozen=True)
class Field:
    """A table column: header *name* and a template for its values."""

    name: str
    value_format: str

    def render(self, record: Any) -> str:
        kwargs: dict[str, Any] = {}
        if isinstance(record, Mapping):
            kwargs = {k: v for k, v in record.items() if isinstance(k, str)}
        try:
            return self.value_format.format(record, **kwargs)
        except (KeyError, AttributeError, IndexError, ValueError) as e:
            raise FieldRenderError(self.name, e) from e


# ---------------------------------------------------------------------------
# Field inference
# ---------------------------------------------------------------------------


def format_name(name: str) -> str:
    """Turn an attribute name into a column header.

    Underscores separate words and CamelCase humps are split, so both
    ``created_at`` and ``CreatedAt`` become ``Created At``. Runs of capitals
    such as ``ID`` stay together.
    """
    words: list[str] = []
    for part in name.split("_"):
        if not part:
            continue
        chars = [part[0]]
        spaced = True
        for ch in part[1:]:
            if not spaced and ch.isupper():
                chars.append(" ")
                spaced = True
            else:
                spaced = False
            chars.append(ch)
        word = "".join(chars)
        words.append(word[0].upper() + word[1:])
    return " ".join(words)


def _members(value: Any, top_level: bool) -> list[tuple[str, Any, bool]] | None:
    """Return ``(name, child, is_key)`` triples for a record-like *value*.

    Returns ``None`` for values that should be shown as a single cell.
    Arbitrary objects are only expanded at the top level.
    """
    if isinstance(value, _SCALARS):
        return None
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return [(f.name, getattr(value, f.name), False) for f in dataclasses.fields(value)]
    if isinstance(value, Mapping):
        return [
            (key, child, True)
            for key, child in value.items()
            if isinstance(key, str)
            and key
            and not key.isdigit()
            and not _UNSAFE_KEY_CHARS & set(key)
        ]
    if top_level and hasattr(value, "__dict__"):
        return [
            (name, child, False)
            for name, child in vars(value).items()
            if not name.startswith("_")
        ]
    return None


def _collect(
    value: Any,
    path: list[tuple[str, bool]],
    out: list[tuple[str, Field]],
) -> None:
    members = _members(value, top_level=not path)
    if members is None:
        return

    before = len(out)
    for name, child, is_key in members:
        if name.startswith("_") and not is_key:
            continue
        child_path = [*path, (name, is_key)]
        if _members(child, top_level=False) is not None:
            _collect(child, child_path, out)
        else:
            out.append(_leaf(child_path))

    # Nested records without public members are shown whole
    if path and len(out) == before:
        out.append(_leaf(path))


def _leaf(path: list[tuple[str, bool]]) -> tuple[str, Field]:
    dotted = ".".join(name for name, _ in path)
    header = " ".join(format_name(name) for name, _ in path)
    template = "{0" + "".join(f"[{n}]" if key else f".{n}" for n, key in path) + "}"
    return dotted, Field(header, template)


def infer_fields(payload: Any, names: Sequence[str] = ()) -> list[Field]:
    """Derive fields from the shape of *payload*.

    *payload* may be a record or a list of records; the first record decides
    the columns. Nested dataclasses and mappings are flattened, with dotted
    *names* (``"metadata.zone"``) selecting nested members. When *names* is
    given, only those fields are returned, in that order. Scalars produce a
    single ``Value`` column.
    """
    sample = payload
    if isinstance(payload, Sequence) and not isinstance(payload, (str, bytes)):
        if not payload:
            return []
        sample = payload[0]

    if _members(sample, top_level=True) is None:
        return [Field("Value", "{0}")]

    found: list[tuple[str, Field]] = []
    _collect(sample, [], found)
    if not names:
        return [f for _, f in found]

    by_name = dict(found)
    return [by_name[name] for name in names if name in by_name]


# ---------------------------------------------------------------------------
# Tables from records
# ---------------------------------------------------------------------------


def _as_records(records: Any) -> list[Any]:
    if isinstance(records, (str, bytes, Mapping)) or not isinstance(records, Iterable):
        return [records]
    return list(records)


def build_table(
    records: Any,
    fields: Sequence[Field] | None = None,
    options: TableOptions | None = None,
    formatter: TableFormatter | None = None,
) -> Table:
    """Build a table with a header row of field names and a row per record.

    *records* may be a single record or an iterable of them. Without
    *fields*, they are inferred from the records. A *formatter*, or records
    that implement :class:`TableFormatter` themselves, override the header
    and first column formatters of *options*.
    """
    items = _as_records(records)
    if fields is None:
        fields = infer_fields(items)
    logger.debug("Building table of %d records with %d fields", len(items), len(fields))

    options = options or TableOptions()
    if formatter is None and isinstance(records, TableFormatter):
        formatter = records
    if formatter is not None:
        options = dataclasses.replace(
            options,
            header_formatter=formatter.header_formatter,
            first_column_formatter=formatter.first_column_formatter,
        )

    table = options.new_table()
    if not fields:
        return table

    table.add_row(*(f.name for f in fields))
    for record in items:
        table.add_row(*(f.render(record) for f in fields))
    return table


def render_records(
    records: Any,
    fields: Sequence[Field] | None = None,
    options: TableOptions | None = None,
    formatter: TableFormatter | None = None,
) -> str:
    return build_table(records, fields, options, formatter).render()
