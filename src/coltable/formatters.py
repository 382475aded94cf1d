"""Width-preserving formatter helpers for table styling hooks."""

from __future__ import annotations

from typing import Callable

Formatter = Callable[[str], str]


def preserve_padding(fn: Formatter) -> Formatter:
    """Apply *fn* to the text of a padded cell, leaving its trailing spaces bare.

    Styles such as underline or background colour would otherwise stretch over
    the column padding.
    """

    def formatter(text: str) -> str:
        content = text.rstrip(" ")
        if not content:
            return text
        return fn(content) + text[len(content):]

    return formatter


def compose(*fns: Formatter) -> Formatter:
    """Chain formatters, applying them left to right."""

    def formatter(text: str) -> str:
        for fn in fns:
            text = fn(text)
        return text

    return formatter
