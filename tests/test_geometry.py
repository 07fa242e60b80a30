# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for geometry value types."""

import dataclasses

import pytest

from pdfformkit.exceptions import InvalidArgumentError
from pdfformkit.geometry import (
    BLACK,
    Close,
    Color,
    LineTo,
    MoveTo,
    Point,
    Rect,
    Stroke,
)


class TestColor:
    """Tests for Color."""

    def test_unit_floats(self) -> None:
        assert Color(255, 0, 51).as_unit_floats() == (1.0, 0.0, 0.2)

    @pytest.mark.parametrize(
        "channels",
        [(-1, 0, 0), (0, 256, 0), (0, 0, 1000)],
        ids=["negative", "256", "large"],
    )
    def test_out_of_range_rejected(self, channels) -> None:
        with pytest.raises(InvalidArgumentError):
            Color(*channels)

    def test_from_unit_floats_rounds_and_clamps(self) -> None:
        assert Color.from_unit_floats([1.0, 0.5, 2.0]) == Color(255, 128, 255)

    def test_black_default(self) -> None:
        assert Stroke(()).color == BLACK == Color(0, 0, 0)


class TestStroke:
    """Tests for Stroke."""

    def test_defaults(self) -> None:
        stroke = Stroke((MoveTo(Point(0, 0)),))
        assert stroke.width == 1.0
        assert stroke.color == BLACK

    def test_through_builds_move_then_lines(self) -> None:
        points = [Point(0, 0), Point(1, 1), Point(2, 0)]
        stroke = Stroke.through(points, width=2.0)
        assert stroke.segments == (
            MoveTo(Point(0, 0)),
            LineTo(Point(1, 1)),
            LineTo(Point(2, 0)),
        )
        assert stroke.width == 2.0

    def test_through_closed(self) -> None:
        stroke = Stroke.through([Point(0, 0), Point(1, 0)], closed=True)
        assert stroke.segments[-1] == Close()

    def test_through_empty(self) -> None:
        """No points yields no segments, even when closed."""
        assert Stroke.through([], closed=True).segments == ()

    def test_immutable(self) -> None:
        stroke = Stroke(())
        with pytest.raises(dataclasses.FrozenInstanceError):
            stroke.width = 3.0


class TestRect:
    """Tests for Rect."""

    def test_dimensions(self) -> None:
        rect = Rect(10, 20, 110, 45)
        assert rect.width == 100
        assert rect.height == 25
        assert rect.origin == Point(10, 20)

    def test_inverted_not_normalized(self) -> None:
        rect = Rect(100, 50, 0, 0)
        assert rect.width == -100
        assert rect.height == -50
        assert rect.as_list() == [100, 50, 0, 0]

    def test_from_array(self) -> None:
        assert Rect.from_array([1, 2, 3, 4]) == Rect(1.0, 2.0, 3.0, 4.0)
