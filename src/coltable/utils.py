"""Terminal text utilities: ANSI handling, width measurement, wrapping.

Provides functions for measuring visible terminal widths, tracking ANSI SGR
state, hard-wrapping and truncating text with ANSI codes preserved, and
padding text to a fixed number of columns.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Iterator, Protocol

import grapheme
import wcwidth as _wcwidth


class WidthMeasurer(Protocol):
    """Anything that maps a string to its display width in terminal cells."""

    def __call__(self, text: str) -> int: ...


# ---------------------------------------------------------------------------
# Regex patterns for ANSI / OSC / APC sequences
# ---------------------------------------------------------------------------

_STRIP_RE = re.compile(
    r"\x1b\[[0-9;]*[mGKHJ]"        # CSI
    r"|\x1b\]8;;[^\x07]*\x07"       # OSC 8
    r"|\x1b_[^\x07\x1b]*(?:\x07|\x1b\\)"  # APC
)

_RESET = "\x1b[0m"
_TAB_WIDTH = 3
_CSI_PARAMS = "0123456789;"

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------

def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Rules:
    1. Zero-width characters (control, combining marks, etc.) -> 0
    2. Emoji (multi-codepoint, contains VS16 U+FE0F, ZWJ sequences, etc.) -> 2
    3. Otherwise delegate to wcwidth for the first meaningful codepoint.
    """
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):  # VS16, ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF:  # Skin tone modifiers
            return 2
        if 0x1F1E6 <= cp <= 0x1F1FF:  # Regional indicators
            return 2

    first = g[0]
    first_cp = ord(first)
    if first_cp >= 0x1F000 or 0x2600 <= first_cp <= 0x27BF:
        return 2

    cat = unicodedata.category(first)
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(first), 0)


# ---------------------------------------------------------------------------
# visible_width
# ---------------------------------------------------------------------------

def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*.

    * Strips ANSI escape sequences.
    * Treats tabs as 3 spaces.
    * Uses a fast ASCII path when possible.
    * Caches results for non-ASCII strings.
    """
    if not text:
        return 0

    stripped = _STRIP_RE.sub("", text)
    if not stripped:
        return 0

    stripped = stripped.replace("\t", " " * _TAB_WIDTH)

    if all(0x20 <= ord(ch) <= 0x7E for ch in stripped):
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))
    return _cache_width(stripped, total)


# ---------------------------------------------------------------------------
# extract_ansi_code
# ---------------------------------------------------------------------------

def extract_ansi_code(text: str, pos: int) -> tuple[str, int] | None:
    """Extract an ANSI escape sequence starting at *pos* in *text*.

    Returns ``(code, length)`` where *code* is the full escape sequence string
    and *length* is the number of characters consumed, or ``None`` if there is
    no escape sequence at *pos*.

    Handles:
    * CSI sequences: ``ESC[`` ... ``m`` / ``G`` / ``K`` / ``H`` / ``J``
    * OSC sequences: ``ESC]`` ... ``BEL`` / ``ST``
    * APC sequences: ``ESC_`` ... ``BEL`` / ``ST``
    """
    if pos + 1 >= len(text) or text[pos] != "\x1b":
        return None

    next_ch = text[pos + 1]

    if next_ch == "[":
        i = pos + 2
        while i < len(text):
            ch = text[i]
            if ch in "mGKHJ":
                code = text[pos : i + 1]
                return (code, len(code))
            if ch in _CSI_PARAMS:
                i += 1
                continue
            break
        return None

    if next_ch in "]_":
        i = pos + 2
        while i < len(text):
            ch = text[i]
            if ch == "\x07":  # BEL
                code = text[pos : i + 1]
                return (code, len(code))
            if ch == "\x1b" and i + 1 < len(text) and text[i + 1] == "\\":
                code = text[pos : i + 2]
                return (code, len(code))
            i += 1
        return None

    return None


# ---------------------------------------------------------------------------
# AnsiCodeTracker
# ---------------------------------------------------------------------------

def _sgr_param(param: str) -> int | None:
    """Parse one SGR parameter; empty means 0, anything non-numeric is ``None``."""
    if not param:
        return 0
    if any(ch not in "0123456789" for ch in param):
        return None
    return int(param)


class AnsiCodeTracker:
    """Track active ANSI SGR (Select Graphic Rendition) state.

    Processes CSI SGR sequences (``ESC[...m``) so that styling opened on one
    wrapped line can be closed at its end and re-opened on the next.
    """

    _ATTRIBUTES = {
        1: "bold",
        2: "dim",
        3: "italic",
        4: "underline",
        5: "blink",
        7: "inverse",
        8: "hidden",
        9: "strikethrough",
    }
    _RESETS = {
        22: ("bold", "dim"),
        23: ("italic",),
        24: ("underline",),
        25: ("blink",),
        27: ("inverse",),
        28: ("hidden",),
        29: ("strikethrough",),
    }

    def __init__(self) -> None:
        self._active: dict[str, str] = {}

    def process(self, code: str) -> None:
        """Update tracked state from an SGR sequence like ``\\x1b[1;31m``."""
        if not code.startswith("\x1b[") or not code.endswith("m"):
            return

        params_str = code[2:-1]
        if not params_str:
            self.clear()
            return

        params = params_str.split(";")
        i = 0
        while i < len(params):
            val = _sgr_param(params[i])

            if val is None:
                pass
            elif val == 0:
                self.clear()
            elif val in self._ATTRIBUTES:
                self._active[self._ATTRIBUTES[val]] = f"\x1b[{val}m"
            elif val in self._RESETS:
                for name in self._RESETS[val]:
                    self._active.pop(name, None)
            elif 30 <= val <= 37 or 90 <= val <= 97:
                self._active["fg"] = f"\x1b[{val}m"
            elif 40 <= val <= 47 or 100 <= val <= 107:
                self._active["bg"] = f"\x1b[{val}m"
            elif val == 39:
                self._active.pop("fg", None)
            elif val == 49:
                self._active.pop("bg", None)
            elif val in (38, 48):
                i += self._process_extended_color(val, params, i)

            i += 1

    def _process_extended_color(self, val: int, params: list[str], i: int) -> int:
        """Handle ``38;5;N`` / ``38;2;R;G;B`` (and 48 for background).

        Returns the number of extra parameters consumed.
        """
        slot = "fg" if val == 38 else "bg"
        if i + 1 >= len(params):
            return 0
        mode = _sgr_param(params[i + 1])
        if mode == 5 and i + 2 < len(params):
            self._active[slot] = f"\x1b[{val};5;{params[i + 2]}m"
            return 2
        if mode == 2 and i + 4 < len(params):
            rgb = ";".join(params[i + 2 : i + 5])
            self._active[slot] = f"\x1b[{val};2;{rgb}m"
            return 4
        return 1

    def clear(self) -> None:
        """Reset all tracked attributes to off."""
        self._active.clear()

    def get_active_codes(self) -> str:
        """Return a string of ANSI codes that reactivate the current state."""
        return "".join(self._active.values())

    def get_line_end_reset(self) -> str:
        """Return a reset sequence if any attribute is active, else empty."""
        return _RESET if self._active else ""


# ---------------------------------------------------------------------------
# Tokenizing: escape codes and grapheme clusters
# ---------------------------------------------------------------------------

def _tokens(text: str) -> Iterator[tuple[bool, str]]:
    """Split *text* into ``(is_code, token)`` pairs.

    Escape sequences come out whole; everything between them is yielded one
    grapheme cluster at a time so wide and combined characters are never
    split.
    """
    i = 0
    while i < len(text):
        extracted = extract_ansi_code(text, i)
        if extracted is not None:
            code, length = extracted
            yield True, code
            i += length
            continue

        # A lone ESC that does not start a sequence is plain text
        end = text.find("\x1b", i + 1)
        if end == -1:
            end = len(text)
        for cluster in grapheme.graphemes(text[i:end]):
            yield False, cluster
        i = end


# ---------------------------------------------------------------------------
# wrap_to_width
# ---------------------------------------------------------------------------

def wrap_to_width(
    text: str,
    width: int,
    measure: WidthMeasurer = visible_width,
) -> list[str]:
    """Hard-wrap *text* at *width* columns, preserving ANSI escape codes.

    Each physical line (split on ``\\n``) is broken as soon as the next
    grapheme cluster would exceed *width*, as sized by *measure*. Spaces that
    would begin a continuation line are dropped. A cluster wider than *width*
    gets a line of its own. ANSI state is tracked across lines so that
    colours/attributes persist correctly after wrapping.

    Returns a list of wrapped lines (without trailing newlines).
    """
    if width <= 0:
        return text.split("\n")

    result: list[str] = []
    tracker = AnsiCodeTracker()
    for physical_line in text.split("\n"):
        result.extend(_wrap_single_line(physical_line, width, tracker, measure))
    return result


def _wrap_single_line(
    line: str,
    width: int,
    tracker: AnsiCodeTracker,
    measure: WidthMeasurer,
) -> list[str]:
    """Wrap a single line (no embedded newlines) to *width* columns."""
    if not line:
        return [""]

    result_lines: list[str] = []
    current_line: list[str] = []
    current_width = 0
    continuation = False

    prefix = tracker.get_active_codes()
    if prefix:
        current_line.append(prefix)

    for is_code, token in _tokens(line):
        if is_code:
            tracker.process(token)
            current_line.append(token)
            continue

        token_width = measure(token)

        if current_width + token_width > width and current_width > 0:
            result_lines.append("".join(current_line) + tracker.get_line_end_reset())
            current_line = []
            active = tracker.get_active_codes()
            if active:
                current_line.append(active)
            current_width = 0
            continuation = True

        if continuation and current_width == 0 and token == " ":
            continue

        current_line.append(token)
        current_width += token_width

    # Trailing spaces dropped after a break leave nothing visible to flush
    if current_width > 0 or not result_lines:
        result_lines.append("".join(current_line) + tracker.get_line_end_reset())
    return result_lines


# ---------------------------------------------------------------------------
# truncate_to_width / pad_to_width
# ---------------------------------------------------------------------------

def truncate_to_width(
    text: str,
    max_width: int,
    ellipsis: str = "...",
    measure: WidthMeasurer = visible_width,
) -> str:
    """Truncate *text* to fit within *max_width* visible columns.

    If the text is wider than *max_width*, it is truncated and *ellipsis* is
    appended (the ellipsis counts towards the width).
    """
    if max_width <= 0:
        return ""

    if measure(text) <= max_width:
        return text

    target_width = max_width - measure(ellipsis)
    if target_width <= 0:
        # Ellipsis alone exceeds max_width -- just truncate ellipsis
        return _take_columns(ellipsis, max_width, measure)

    return _take_columns(text, target_width, measure) + ellipsis


def _take_columns(text: str, max_cols: int, measure: WidthMeasurer) -> str:
    """Return a prefix of *text* that fits within *max_cols* visible columns.

    ANSI codes are preserved and closed with a reset if still active at the
    cut point.
    """
    result: list[str] = []
    tracker = AnsiCodeTracker()
    cols = 0

    for is_code, token in _tokens(text):
        if is_code:
            tracker.process(token)
            result.append(token)
            continue

        w = measure(token)
        if cols + w > max_cols:
            break
        result.append(token)
        cols += w

    return "".join(result) + tracker.get_line_end_reset()


def pad_to_width(
    text: str,
    width: int,
    measure: WidthMeasurer = visible_width,
) -> str:
    """Right-pad *text* with spaces to *width* visible columns."""
    gap = width - measure(text)
    if gap <= 0:
        return text
    return text + " " * gap
