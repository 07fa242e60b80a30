# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for Helvetica text metrics."""

import pytest

from pdfformkit.text_metrics import (
    HELVETICA_DEFAULT_WIDTH,
    MAX_FONT_SIZE,
    MIN_FONT_SIZE,
    baseline_offset,
    compute_auto_font_size,
    encode_for_content_stream,
    get_text_width,
    to_win_ansi,
)


class TestTextWidth:
    """Tests for get_text_width."""

    @pytest.mark.parametrize(
        "text, expected",
        [("A", 6.67), ("i", 2.22), ("W", 9.44), ("AB", 13.34), ("", 0.0)],
    )
    def test_widths_at_10pt(self, text, expected) -> None:
        assert get_text_width(text, 10) == pytest.approx(expected)

    def test_scales_with_size(self) -> None:
        assert get_text_width("Hello", 20) == pytest.approx(
            2 * get_text_width("Hello", 10)
        )

    def test_unmappable_uses_default(self) -> None:
        assert get_text_width("中", 1000) == HELVETICA_DEFAULT_WIDTH

    def test_win_ansi_high_codes(self) -> None:
        assert to_win_ansi("€") == 128
        assert to_win_ansi("é") == 0xE9
        assert to_win_ansi("中") is None
        assert get_text_width("€", 1000) == 556


class TestAutoFontSize:
    """Tests for compute_auto_font_size."""

    def test_short_text_uses_max(self) -> None:
        assert compute_auto_font_size("Hi", 200, 20) == MAX_FONT_SIZE

    def test_long_text_fits_width(self) -> None:
        text = "A fairly long value for a narrow field"
        size = compute_auto_font_size(text, 80, 20)
        assert MIN_FONT_SIZE <= size < MAX_FONT_SIZE
        assert get_text_width(text, size) <= 80

    def test_never_below_minimum(self) -> None:
        assert compute_auto_font_size("x" * 500, 10, 20) == MIN_FONT_SIZE

    def test_empty_text(self) -> None:
        assert compute_auto_font_size("", 100, 8) == 8


class TestBaseline:
    """Tests for baseline_offset."""

    def test_centered(self) -> None:
        # (20 - 7.18 - 2.07) / 2 + 2.07
        assert baseline_offset(20, 10, 2) == pytest.approx(7.445)

    def test_clamped_to_margin(self) -> None:
        assert baseline_offset(5, 12, 2) == 2


class TestEncode:
    """Tests for encode_for_content_stream."""

    def test_plain(self) -> None:
        assert encode_for_content_stream("abc") == b"abc"

    def test_escapes(self) -> None:
        assert encode_for_content_stream("a(b)\\") == b"a\\(b\\)\\\\"

    def test_win_ansi(self) -> None:
        assert encode_for_content_stream("€é") == b"\x80\xe9"

    def test_unmappable(self) -> None:
        assert encode_for_content_stream("中") == b"?"
