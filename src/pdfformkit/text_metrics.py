# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Helvetica metrics for default widget appearances.

Generated text appearances always use the built-in Helvetica resource
(/Helv in the AcroForm default resources), so a single width table is
enough. Widths are in 1/1000 of the font size, indexed by
WinAnsiEncoding code. Source: Adobe Font Metrics for Helvetica.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

HELVETICA_ASCENT = 718
HELVETICA_DESCENT = -207
HELVETICA_DEFAULT_WIDTH = 278

MIN_FONT_SIZE = 4.0
MAX_FONT_SIZE = 12.0

# fmt: off
# Codes 32..126
_ASCII_WIDTHS = (
    278, 278, 355, 556, 556, 889, 667, 191, 333, 333, 389, 584, 278, 333, 278, 278,
    556, 556, 556, 556, 556, 556, 556, 556, 556, 556, 278, 278, 584, 584, 584, 556,
    1015, 667, 667, 722, 722, 611, 556, 778, 722, 278, 500, 667, 556, 833, 722, 778,
    667, 778, 722, 667, 611, 722, 667, 944, 667, 667, 611, 278, 278, 278, 469, 556,
    333, 556, 556, 500, 556, 556, 278, 556, 556, 222, 222, 500, 222, 833, 556, 556,
    556, 556, 333, 500, 278, 556, 500, 722, 500, 500, 500, 334, 260, 334, 584,
)

# Codes 128..255 that have a glyph in WinAnsiEncoding
_HIGH_WIDTHS = {
    128: 556, 130: 222, 131: 556, 132: 333, 133: 1000, 134: 556, 135: 556,
    136: 333, 137: 1000, 138: 667, 139: 333, 140: 1000, 142: 611, 145: 222,
    146: 222, 147: 333, 148: 333, 149: 350, 150: 556, 151: 1000, 152: 333,
    153: 1000, 154: 500, 155: 333, 156: 944, 158: 500, 159: 667, 160: 278,
    161: 333, 162: 556, 163: 556, 164: 556, 165: 556, 166: 260, 167: 556,
    168: 333, 169: 737, 170: 370, 171: 556, 172: 584, 173: 333, 174: 737,
    175: 333, 176: 400, 177: 584, 178: 333, 179: 333, 180: 333, 181: 556,
    182: 537, 183: 278, 184: 333, 185: 333, 186: 365, 187: 556, 188: 834,
    189: 834, 190: 834, 191: 611, 192: 667, 193: 667, 194: 667, 195: 667,
    196: 667, 197: 667, 198: 1000, 199: 722, 200: 611, 201: 611, 202: 611,
    203: 611, 204: 278, 205: 278, 206: 278, 207: 278, 208: 722, 209: 722,
    210: 778, 211: 778, 212: 778, 213: 778, 214: 778, 215: 584, 216: 778,
    217: 722, 218: 722, 219: 722, 220: 722, 221: 667, 222: 667, 223: 611,
    224: 556, 225: 556, 226: 556, 227: 556, 228: 556, 229: 556, 230: 889,
    231: 500, 232: 556, 233: 556, 234: 556, 235: 556, 236: 278, 237: 278,
    238: 278, 239: 278, 240: 556, 241: 556, 242: 556, 243: 556, 244: 556,
    245: 556, 246: 556, 247: 584, 248: 611, 249: 556, 250: 556, 251: 556,
    252: 556, 253: 500, 254: 556, 255: 500,
}

# WinAnsi codes 128..159 that differ from Latin-1
_UNICODE_TO_WIN_ANSI = {
    0x20AC: 128, 0x201A: 130, 0x0192: 131, 0x201E: 132, 0x2026: 133,
    0x2020: 134, 0x2021: 135, 0x02C6: 136, 0x2030: 137, 0x0160: 138,
    0x2039: 139, 0x0152: 140, 0x017D: 142, 0x2018: 145, 0x2019: 146,
    0x201C: 147, 0x201D: 148, 0x2022: 149, 0x2013: 150, 0x2014: 151,
    0x02DC: 152, 0x2122: 153, 0x0161: 154, 0x203A: 155, 0x0153: 156,
    0x017E: 158, 0x0178: 159,
}
# fmt: on

_HELVETICA_WIDTHS: dict[int, int] = {
    code: width for code, width in enumerate(_ASCII_WIDTHS, start=32)
}
_HELVETICA_WIDTHS.update(_HIGH_WIDTHS)


def to_win_ansi(char: str) -> int | None:
    """Maps a character to its WinAnsiEncoding code (None if unmappable)."""
    cp = ord(char)
    if cp < 128 or 160 <= cp <= 255:
        return cp
    return _UNICODE_TO_WIN_ANSI.get(cp)


def get_text_width(text: str, font_size: float) -> float:
    """Calculates the width of a string set in Helvetica.

    Args:
        text: The text to measure.
        font_size: Font size in points.

    Returns:
        Width in points.
    """
    total = 0
    for ch in text:
        code = to_win_ansi(ch)
        total += _HELVETICA_WIDTHS.get(code, HELVETICA_DEFAULT_WIDTH)
    return total * font_size / 1000.0


def compute_auto_font_size(text: str, field_width: float, field_height: float) -> float:
    """Finds the largest font size at which ``text`` fits on one line.

    Args:
        text: The text to fit.
        field_width: Available width in points.
        field_height: Available height in points.

    Returns:
        Font size between MIN_FONT_SIZE and MAX_FONT_SIZE.
    """
    max_size = max(MIN_FONT_SIZE, min(MAX_FONT_SIZE, field_height))
    if not text:
        return max_size
    if field_width <= 0 or field_height <= 0:
        return MIN_FONT_SIZE

    lo, hi = MIN_FONT_SIZE, max_size
    if get_text_width(text, hi) <= field_width:
        return hi
    for _ in range(20):
        mid = (lo + hi) / 2.0
        if get_text_width(text, mid) <= field_width:
            lo = mid
        else:
            hi = mid
    return lo


def baseline_offset(field_height: float, font_size: float, margin: float) -> float:
    """Baseline y for text vertically centered in a box of ``field_height``."""
    asc_pt = HELVETICA_ASCENT * font_size / 1000.0
    desc_pt = abs(HELVETICA_DESCENT) * font_size / 1000.0
    ty = (field_height - asc_pt - desc_pt) / 2.0 + desc_pt
    return max(ty, margin)


def encode_for_content_stream(text: str) -> bytes:
    """Encodes text as a WinAnsi literal-string body for ``Tj``.

    Parentheses and backslashes are escaped; unmappable characters
    become ``?``.
    """
    out = bytearray()
    for ch in text:
        code = to_win_ansi(ch)
        if code is None:
            code = 0x3F
        if code in (0x5C, 0x28, 0x29):  # \ ( )
            out.append(0x5C)
        out.append(code)
    return bytes(out)
