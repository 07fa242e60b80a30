# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Value types for stroke geometry.

Points, path segments, strokes and rectangles live in page user space
(origin bottom-left, y up, units of 1/72 inch). All types are immutable;
callers build them once and hand them to a single builder call.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .exceptions import InvalidArgumentError


@dataclass(frozen=True)
class Point:
    """A position in user space."""

    x: float
    y: float


@dataclass(frozen=True)
class Color:
    """An RGB color with 8-bit channels."""

    red: int
    green: int
    blue: int

    def __post_init__(self) -> None:
        for channel in (self.red, self.green, self.blue):
            if not 0 <= channel <= 255:
                raise InvalidArgumentError(
                    f"Color channel out of range 0..255: {channel!r}"
                )

    def as_unit_floats(self) -> tuple[float, float, float]:
        """Returns the channels scaled to 0.0..1.0."""
        return self.red / 255.0, self.green / 255.0, self.blue / 255.0

    @classmethod
    def from_unit_floats(cls, values: Iterable[float]) -> Color:
        """Builds a color from 0.0..1.0 components (e.g. an /C array)."""
        red, green, blue = (
            max(0, min(255, round(float(v) * 255))) for v in values
        )
        return cls(red, green, blue)


BLACK = Color(0, 0, 0)
DARK_BLUE = Color(0, 0, 139)


@dataclass(frozen=True)
class MoveTo:
    """Begins a new subpath at ``point``."""

    point: Point


@dataclass(frozen=True)
class LineTo:
    """Straight line from the current point to ``point``."""

    point: Point


@dataclass(frozen=True)
class CurveTo:
    """Cubic Bezier from the current point to ``end``."""

    control1: Point
    control2: Point
    end: Point


@dataclass(frozen=True)
class Close:
    """Closes the current subpath."""


PathSegment = MoveTo | LineTo | CurveTo | Close


@dataclass(frozen=True)
class Stroke:
    """One drawing pass: path segments painted with a single pen.

    A stroke should start with MoveTo. Without one, viewers start the
    path at the origin.
    """

    segments: tuple[PathSegment, ...]
    width: float = 1.0
    color: Color = BLACK

    @classmethod
    def through(
        cls,
        points: Iterable[Point],
        width: float = 1.0,
        color: Color = BLACK,
        closed: bool = False,
    ) -> Stroke:
        """Builds a polyline stroke through ``points``.

        Args:
            points: Vertices in drawing order.
            width: Line width in points.
            color: Stroke color.
            closed: If True, a Close segment ends the path.

        Returns:
            A Stroke with one MoveTo followed by LineTo segments.
        """
        segments: list[PathSegment] = []
        for point in points:
            segments.append(LineTo(point) if segments else MoveTo(point))
        if closed and segments:
            segments.append(Close())
        return cls(tuple(segments), width, color)


@dataclass(frozen=True)
class Rect:
    """A rectangle given as (left, bottom, right, top).

    Not normalized: an inverted rectangle has negative width or height.
    """

    left: float
    bottom: float
    right: float
    top: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.top - self.bottom

    @property
    def origin(self) -> Point:
        return Point(self.left, self.bottom)

    def as_list(self) -> list[float]:
        return [self.left, self.bottom, self.right, self.top]

    @classmethod
    def from_array(cls, values) -> Rect:
        """Builds a Rect from a 4-number PDF array."""
        left, bottom, right, top = (float(v) for v in values)
        return cls(left, bottom, right, top)
