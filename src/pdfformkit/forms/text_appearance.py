# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Default appearance for single-line text fields.

Text is set in Helvetica from the AcroForm default resources, clipped
to the field box and aligned according to /Q.
"""

import logging
import re

from pikepdf import Stream

from .. import text_metrics as _tm
from ..geometry import Rect
from ..store import DocumentStore
from ..utils import format_number, make_form_stream
from .acroform import DEFAULT_FONT_RESOURCE, default_font_resources
from .registry import FIELD_FLAG_PASSWORD

logger = logging.getLogger(__name__)

_DA_FONT_RE = re.compile(r"/(\S+)\s+([\d.]+)\s+Tf")
_DA_COLOR_RE = re.compile(
    r"((?:[\d.]+\s+){3}rg|[\d.]+\s+g|(?:[\d.]+\s+){4}k)(?:\s|$)"
)

TEXT_PADDING = 2.0
PASSWORD_MASK = "*"

QUADDING_LEFT = 0
QUADDING_CENTER = 1
QUADDING_RIGHT = 2


def parse_default_appearance(da: str | None) -> tuple[str | None, float, str]:
    """Splits a /DA string into font name, size and fill color operators.

    Args:
        da: DA string such as ``/Helv 10 Tf 0 g``.

    Returns:
        Tuple of (font_name, font_size, color_ops). font_name is None when
        the string has no Tf operator; color_ops defaults to ``0 g``.
    """
    if not da:
        return None, 0.0, "0 g"
    font_name = None
    font_size = 0.0
    match = _DA_FONT_RE.search(da)
    if match:
        font_name = match.group(1)
        try:
            font_size = float(match.group(2))
        except ValueError:
            font_size = 0.0
    color = _DA_COLOR_RE.search(da)
    color_ops = color.group(1).strip() if color else "0 g"
    return font_name, font_size, color_ops


def build_text_appearance(
    store: DocumentStore,
    rect: Rect,
    value: str,
    default_appearance: str | None,
    quadding: int = QUADDING_LEFT,
    flags: int = 0,
) -> Stream:
    """Builds the /AP /N stream of a single-line text field.

    Args:
        store: Document owning the field.
        rect: Field rectangle; only width and height are used.
        value: Text to show.
        default_appearance: The field's /DA string.
        quadding: 0 left, 1 centered, 2 right.
        flags: Field flags; passwords are masked.

    Returns:
        Form XObject stream sized to the rectangle.
    """
    w, h = rect.width, rect.height
    _, font_size, color_ops = parse_default_appearance(default_appearance)

    if flags & FIELD_FLAG_PASSWORD:
        value = PASSWORD_MASK * len(value)

    margin = TEXT_PADDING
    available_width = w - 2 * margin
    if font_size == 0:
        font_size = _tm.compute_auto_font_size(value, available_width, h - 2 * margin)

    text_width = _tm.get_text_width(value, font_size)
    if quadding == QUADDING_CENTER:
        tx = margin + max(0, (available_width - text_width) / 2)
    elif quadding == QUADDING_RIGHT:
        tx = margin + max(0, available_width - text_width)
    else:
        tx = margin
    ty = _tm.baseline_offset(h, font_size, margin)

    parts = [
        "/Tx BMC",
        "q",
        f"{format_number(margin)} {format_number(margin)} "
        f"{format_number(available_width)} {format_number(h - 2 * margin)} re W n",
    ]
    if value:
        parts += [
            "BT",
            color_ops,
            f"/{DEFAULT_FONT_RESOURCE} {format_number(font_size)} Tf",
            f"{format_number(tx)} {format_number(ty)} Td",
        ]
        content = "\n".join(parts).encode("latin-1")
        content += b"\n(" + _tm.encode_for_content_stream(value) + b") Tj\nET"
    else:
        content = "\n".join(parts).encode("latin-1")
    content += b"\nQ\nEMC"

    logger.debug("Built text appearance (%d chars, %.1fpt)", len(value), font_size)
    return make_form_stream(store.pdf, w, h, content, default_font_resources(store))
