# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Annotation geometry and appearance streams."""

from .appearance import AppearanceMode, apply_appearance, apply_strokes, get_appearance
from .mutators import (
    add_ink_stroke,
    build_geometry_appearance,
    create_ink_annotation,
    create_line_annotation,
    create_polygon_annotation,
    create_polyline_annotation,
    get_ink_stroke,
    get_line,
    get_vertices,
    ink_stroke_count,
    refresh_geometry_appearance,
    remove_annotation,
    remove_ink_list,
    set_color,
    set_line,
    set_stroke_width,
    set_vertices,
    stroke_color,
    stroke_width,
)

__all__ = [
    "AppearanceMode",
    "apply_appearance",
    "apply_strokes",
    "get_appearance",
    "set_line",
    "get_line",
    "set_vertices",
    "get_vertices",
    "add_ink_stroke",
    "ink_stroke_count",
    "get_ink_stroke",
    "remove_ink_list",
    "stroke_width",
    "set_stroke_width",
    "stroke_color",
    "set_color",
    "create_line_annotation",
    "create_polygon_annotation",
    "create_polyline_annotation",
    "create_ink_annotation",
    "remove_annotation",
    "build_geometry_appearance",
    "refresh_geometry_appearance",
]
