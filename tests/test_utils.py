"""Tests for coltable.utils -- terminal text utilities."""

from __future__ import annotations

from coltable.utils import (
    AnsiCodeTracker,
    extract_ansi_code,
    pad_to_width,
    truncate_to_width,
    visible_width,
    wrap_to_width,
)


# ---------------------------------------------------------------------------
# visible_width
# ---------------------------------------------------------------------------


class TestVisibleWidth:
    """Measure the visible terminal width of text."""

    def test_plain_ascii(self) -> None:
        assert visible_width("hello") == 5

    def test_empty_string(self) -> None:
        assert visible_width("") == 0

    def test_ansi_codes_do_not_count(self) -> None:
        assert visible_width("\x1b[1mhi\x1b[0m") == 2

    def test_multiple_ansi_codes(self) -> None:
        assert visible_width("\x1b[1m\x1b[31mabc\x1b[0m") == 3

    def test_wide_cjk_characters_count_as_two(self) -> None:
        assert visible_width("世") == 2

    def test_mixed_ascii_and_wide(self) -> None:
        # "A" (1) + U+4E16 (2) + "B" (1) = 4
        assert visible_width("A世B") == 4

    def test_combining_mark_adds_no_width(self) -> None:
        assert visible_width("é") == 1

    def test_tab_counts_as_three_spaces(self) -> None:
        assert visible_width("\t") == 3

    def test_osc8_hyperlink_does_not_count(self) -> None:
        text = "\x1b]8;;https://example.com\x07link\x1b]8;;\x07"
        assert visible_width(text) == 4

    def test_apc_sequence_does_not_count(self) -> None:
        assert visible_width("\x1b_payload\x07visible") == 7


# ---------------------------------------------------------------------------
# extract_ansi_code / AnsiCodeTracker
# ---------------------------------------------------------------------------


class TestExtractAnsiCode:
    def test_csi_sequence(self) -> None:
        assert extract_ansi_code("a\x1b[31mb", 1) == ("\x1b[31m", 5)

    def test_no_sequence_at_position(self) -> None:
        assert extract_ansi_code("abc", 0) is None

    def test_lone_escape(self) -> None:
        assert extract_ansi_code("\x1b", 0) is None

    def test_osc_terminated_by_string_terminator(self) -> None:
        text = "\x1b]8;;url\x1b\\"
        assert extract_ansi_code(text, 0) == (text, len(text))

    def test_non_ascii_digits_are_not_parameters(self) -> None:
        assert extract_ansi_code("\x1b[²m", 0) is None


class TestAnsiCodeTracker:
    def test_tracks_bold_and_color(self) -> None:
        tracker = AnsiCodeTracker()
        tracker.process("\x1b[1;31m")
        assert tracker.get_active_codes() == "\x1b[1m\x1b[31m"
        assert tracker.get_line_end_reset() == "\x1b[0m"

    def test_reset_clears_state(self) -> None:
        tracker = AnsiCodeTracker()
        tracker.process("\x1b[4m")
        tracker.process("\x1b[0m")
        assert tracker.get_active_codes() == ""
        assert tracker.get_line_end_reset() == ""

    def test_256_color(self) -> None:
        tracker = AnsiCodeTracker()
        tracker.process("\x1b[38;5;200m")
        assert tracker.get_active_codes() == "\x1b[38;5;200m"

    def test_rgb_background_then_default(self) -> None:
        tracker = AnsiCodeTracker()
        tracker.process("\x1b[48;2;1;2;3m")
        assert tracker.get_active_codes() == "\x1b[48;2;1;2;3m"
        tracker.process("\x1b[49m")
        assert tracker.get_active_codes() == ""

    def test_non_sgr_code_ignored(self) -> None:
        tracker = AnsiCodeTracker()
        tracker.process("\x1b[2K")
        assert tracker.get_active_codes() == ""

    def test_unparsable_parameters_skipped(self) -> None:
        tracker = AnsiCodeTracker()
        tracker.process("\x1b[1;x;31m")
        assert tracker.get_active_codes() == "\x1b[1m\x1b[31m"


# ---------------------------------------------------------------------------
# truncate_to_width
# ---------------------------------------------------------------------------


class TestTruncateToWidth:
    """Truncate text to a maximum visible width."""

    def test_short_text_unchanged(self) -> None:
        assert truncate_to_width("hi", 10) == "hi"

    def test_exact_width_unchanged(self) -> None:
        assert truncate_to_width("hello", 5) == "hello"

    def test_truncates_with_ellipsis(self) -> None:
        assert truncate_to_width("foo bar", 5) == "fo..."

    def test_truncate_with_custom_ellipsis(self) -> None:
        assert truncate_to_width("hello world", 6, ellipsis="..") == "hell.."

    def test_ellipsis_wider_than_budget_is_cut(self) -> None:
        assert truncate_to_width("hello", 2) == ".."

    def test_truncate_zero_width_returns_empty(self) -> None:
        assert truncate_to_width("hello", 0) == ""

    def test_wide_characters_are_not_split(self) -> None:
        result = truncate_to_width("世界世界", 5)
        assert result == "世..."
        assert visible_width(result) == 5

    def test_truncate_with_ansi_closes_style(self) -> None:
        text = "\x1b[31mhello world\x1b[0m"
        assert truncate_to_width(text, 8) == "\x1b[31mhello\x1b[0m..."

    def test_emoji_cluster_kept_whole(self) -> None:
        # U+263A + VS16 is one cluster, two columns wide
        result = truncate_to_width("a\u263a\ufe0f\u263a\ufe0fbcdef", 5)
        assert result == "a..."
        assert visible_width(result) <= 5

    def test_custom_measure(self) -> None:
        assert truncate_to_width("你好世界", 4, measure=len) == "你..."


# ---------------------------------------------------------------------------
# wrap_to_width
# ---------------------------------------------------------------------------


class TestWrapToWidth:
    """Hard wrapping at an exact column count."""

    def test_short_text_no_wrap(self) -> None:
        assert wrap_to_width("hello", 80) == ["hello"]

    def test_breaks_inside_words(self) -> None:
        assert wrap_to_width("foo bar", 5) == ["foo b", "ar"]

    def test_drops_space_at_start_of_continuation(self) -> None:
        assert wrap_to_width("bar baz", 3) == ["bar", "baz"]

    def test_long_word(self) -> None:
        assert wrap_to_width("alongervalue", 8) == ["alongerv", "alue"]

    def test_trailing_space_does_not_add_blank_line(self) -> None:
        assert wrap_to_width("abc ", 3) == ["abc"]

    def test_preserves_embedded_newlines(self) -> None:
        assert wrap_to_width("line1\nline2", 80) == ["line1", "line2"]

    def test_wide_characters_move_to_next_line(self) -> None:
        assert wrap_to_width("世界世", 3) == ["世", "界", "世"]

    def test_character_wider_than_width_overflows(self) -> None:
        assert wrap_to_width("世a", 1) == ["世", "a"]

    def test_zero_width_returns_lines_as_is(self) -> None:
        assert wrap_to_width("hello\nworld", 0) == ["hello", "world"]

    def test_ansi_state_carried_across_lines(self) -> None:
        lines = wrap_to_width("\x1b[1mabcdef\x1b[0m", 3)
        assert lines == ["\x1b[1mabc\x1b[0m", "\x1b[1mdef\x1b[0m"]

    def test_empty_string(self) -> None:
        assert wrap_to_width("", 10) == [""]

    def test_emoji_cluster_measured_whole(self) -> None:
        lines = wrap_to_width("ab\u263a\ufe0fcd", 3)
        assert lines == ["ab", "\u263a\ufe0fc", "d"]
        assert all(visible_width(line) <= 3 for line in lines)

    def test_flag_sequence_not_split(self) -> None:
        flag = "\U0001f1ef\U0001f1f5"
        assert wrap_to_width(flag + flag, 3) == [flag, flag]

    def test_skin_tone_sequence_not_split(self) -> None:
        thumb = "\U0001f44d\U0001f3fd"
        assert wrap_to_width(thumb + thumb, 3) == [thumb, thumb]

    def test_custom_measure(self) -> None:
        assert wrap_to_width("你好世界", 3, measure=len) == ["你好世", "界"]

    def test_lone_escape_is_plain_text(self) -> None:
        assert wrap_to_width("\x1b[²mabcdef", 4) == ["\x1b[²ma", "bcde", "f"]


# ---------------------------------------------------------------------------
# pad_to_width
# ---------------------------------------------------------------------------


class TestPadToWidth:
    def test_pads_with_spaces(self) -> None:
        assert pad_to_width("ab", 4) == "ab  "

    def test_wider_text_unchanged(self) -> None:
        assert pad_to_width("abcdef", 4) == "abcdef"

    def test_counts_display_width(self) -> None:
        assert pad_to_width("世", 4) == "世  "

    def test_ignores_ansi_codes(self) -> None:
        assert pad_to_width("\x1b[1mab\x1b[0m", 3) == "\x1b[1mab\x1b[0m "
