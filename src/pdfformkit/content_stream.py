# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Serialization of stroke geometry into content-stream text.

The output is a self-contained fragment suitable for an annotation
appearance stream:

    q
    1 J
    1 j
    r g b RG
    w w
    ... path operators ...
    S
    Q

Numbers always carry four decimals, so identical input produces
byte-identical output.
"""

import logging
import math
from collections.abc import Iterable

from .exceptions import InvalidArgumentError
from .geometry import Close, CurveTo, LineTo, MoveTo, PathSegment, Point, Stroke
from .utils import format_number, require_finite

logger = logging.getLogger(__name__)

# Round cap / round join emulate a pen
_LINE_CAP_ROUND = 1
_LINE_JOIN_ROUND = 1


def _fmt_point(point: Point) -> str:
    return f"{format_number(point.x)} {format_number(point.y)}"


def _segment_operator(segment: PathSegment) -> str:
    """Returns the path-construction operator line for one segment."""
    if isinstance(segment, MoveTo):
        return f"{_fmt_point(segment.point)} m"
    if isinstance(segment, LineTo):
        return f"{_fmt_point(segment.point)} l"
    if isinstance(segment, CurveTo):
        return (
            f"{_fmt_point(segment.control1)} "
            f"{_fmt_point(segment.control2)} "
            f"{_fmt_point(segment.end)} c"
        )
    if isinstance(segment, Close):
        return "h"
    raise InvalidArgumentError(f"Unknown path segment: {segment!r}")


def _segment_points(segment: PathSegment) -> tuple[Point, ...]:
    if isinstance(segment, (MoveTo, LineTo)):
        return (segment.point,)
    if isinstance(segment, CurveTo):
        return (segment.control1, segment.control2, segment.end)
    return ()


def _validate_stroke(stroke: Stroke) -> None:
    """Rejects strokes that would produce invalid operands.

    Raises:
        InvalidArgumentError: On NaN/infinite coordinates or a
            non-positive line width.
    """
    if not math.isfinite(stroke.width) or stroke.width <= 0:
        raise InvalidArgumentError(
            f"Stroke width must be positive and finite: {stroke.width!r}"
        )
    for segment in stroke.segments:
        for point in _segment_points(segment):
            require_finite(point.x, point.y)


def build_stroke_stream(strokes: Iterable[Stroke]) -> str:
    """Renders strokes into a content-stream fragment.

    Strokes are painted in iteration order, so later strokes cover
    earlier ones. An empty collection yields a fragment that paints
    nothing.

    Args:
        strokes: Strokes to render.

    Returns:
        Fragment text starting with ``q`` and ending with ``Q``.

    Raises:
        InvalidArgumentError: If any coordinate is not finite or any
            width is not positive.
    """
    strokes = tuple(strokes)
    # Validate everything before emitting anything
    for stroke in strokes:
        _validate_stroke(stroke)

    lines = ["q", f"{_LINE_CAP_ROUND} J", f"{_LINE_JOIN_ROUND} j"]
    for stroke in strokes:
        red, green, blue = stroke.color.as_unit_floats()
        lines.append(
            f"{format_number(red)} {format_number(green)} {format_number(blue)} RG"
        )
        lines.append(f"{format_number(stroke.width)} w")
        lines.extend(_segment_operator(segment) for segment in stroke.segments)
        lines.append("S")
    lines.append("Q")

    logger.debug("Built stroke stream with %d stroke(s)", len(strokes))
    return "\n".join(lines)
