# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Geometry of line, polygon, polyline and ink annotations.

Setters only edit dictionary entries (/L, /Vertices, /InkList, /C,
/BS). They never touch /AP, so after an edit the appearance is stale
until the caller rebuilds it with refresh_geometry_appearance(). This
lets several edits share one rebuild.
"""

import logging
import math
from collections.abc import Sequence

from pikepdf import Array, Dictionary, Name, String

from ..content_stream import build_stroke_stream
from ..exceptions import InvalidArgumentError, NotSupportedAnnotationTypeError
from ..geometry import BLACK, Color, Point, Rect, Stroke
from ..store import AnnotationHandle, DocumentStore
from ..utils import require_finite
from ..utils import resolve_indirect as _resolve
from .appearance import AppearanceMode, apply_appearance

logger = logging.getLogger(__name__)

LINE = "/Line"
POLYGON = "/Polygon"
POLYLINE = "/PolyLine"
INK = "/Ink"

DEFAULT_STROKE_WIDTH = 1.0

# Annotation flag Print (bit 3)
_ANNOT_FLAG_PRINT = 1 << 2


def _require_subtype(
    store: DocumentStore, handle: AnnotationHandle, *allowed: str
) -> Dictionary:
    annot = store.resolve(handle)
    subtype = annot.get(Name.Subtype)
    if subtype is None or str(subtype) not in allowed:
        raise NotSupportedAnnotationTypeError(
            f"Expected {' or '.join(allowed)} annotation, got {subtype}"
        )
    return annot


def _check_points(points: Sequence[Point]) -> None:
    for point in points:
        require_finite(point.x, point.y)


def _flatten(points: Sequence[Point]) -> Array:
    flat = []
    for point in points:
        flat.extend((point.x, point.y))
    return Array(flat)


def _unflatten(values) -> list[Point]:
    numbers = [float(v) for v in values]
    return [Point(numbers[i], numbers[i + 1]) for i in range(0, len(numbers) - 1, 2)]


# ---------------------------------------------------------------------------
# Line
# ---------------------------------------------------------------------------


def set_line(
    store: DocumentStore, handle: AnnotationHandle, start: Point, end: Point
) -> None:
    """Sets the endpoints (/L) of a line annotation.

    Raises:
        NotSupportedAnnotationTypeError: If the annotation is not a Line.
        InvalidArgumentError: If a coordinate is not finite.
    """
    with store.lease():
        _require_subtype(store, handle, LINE)
        _check_points((start, end))
        store.set_entry(handle, "/L", _flatten((start, end)))


def get_line(store: DocumentStore, handle: AnnotationHandle) -> tuple[Point, Point]:
    """Returns the (start, end) endpoints of a line annotation."""
    annot = _require_subtype(store, handle, LINE)
    line = annot.get(Name.L)
    line = _resolve(line) if line is not None else None
    if not isinstance(line, Array) or len(line) != 4:
        raise InvalidArgumentError("Line annotation has no valid /L entry")
    start, end = _unflatten(line)
    return start, end


# ---------------------------------------------------------------------------
# Polygon / polyline
# ---------------------------------------------------------------------------


def set_vertices(
    store: DocumentStore, handle: AnnotationHandle, vertices: Sequence[Point]
) -> int:
    """Replaces the /Vertices of a polygon or polyline annotation.

    Vertices are written in order, without de-duplication.

    Returns:
        Number of vertices written (always ``len(vertices)``).

    Raises:
        NotSupportedAnnotationTypeError: If the annotation is neither a
            Polygon nor a PolyLine.
        InvalidArgumentError: If ``vertices`` is empty or a coordinate
            is not finite.
    """
    vertices = list(vertices)
    with store.lease():
        _require_subtype(store, handle, POLYGON, POLYLINE)
        if not vertices:
            raise InvalidArgumentError("At least one vertex is required")
        _check_points(vertices)
        store.set_entry(handle, "/Vertices", _flatten(vertices))
    return len(vertices)


def get_vertices(store: DocumentStore, handle: AnnotationHandle) -> list[Point]:
    """Returns the vertices of a polygon or polyline annotation."""
    annot = _require_subtype(store, handle, POLYGON, POLYLINE)
    vertices = annot.get(Name.Vertices)
    if vertices is None:
        return []
    return _unflatten(_resolve(vertices))


# ---------------------------------------------------------------------------
# Ink
# ---------------------------------------------------------------------------


def add_ink_stroke(
    store: DocumentStore, handle: AnnotationHandle, points: Sequence[Point]
) -> int:
    """Appends one path to an ink annotation's /InkList.

    Returns:
        Index of the new path.

    Raises:
        NotSupportedAnnotationTypeError: If the annotation is not Ink.
        InvalidArgumentError: If ``points`` is empty or not finite.
    """
    points = list(points)
    with store.lease():
        annot = _require_subtype(store, handle, INK)
        if not points:
            raise InvalidArgumentError("An ink stroke needs at least one point")
        _check_points(points)
        ink_list = annot.get(Name.InkList)
        ink_list = _resolve(ink_list) if ink_list is not None else None
        if not isinstance(ink_list, Array):
            ink_list = Array()
            store.set_entry(handle, "/InkList", ink_list)
            ink_list = annot.InkList
        ink_list.append(_flatten(points))
        return len(ink_list) - 1


def ink_stroke_count(store: DocumentStore, handle: AnnotationHandle) -> int:
    """Number of paths in an ink annotation's /InkList."""
    annot = _require_subtype(store, handle, INK)
    ink_list = annot.get(Name.InkList)
    return len(_resolve(ink_list)) if ink_list is not None else 0


def get_ink_stroke(
    store: DocumentStore, handle: AnnotationHandle, index: int
) -> list[Point]:
    """Returns the points of path ``index``.

    Raises:
        InvalidArgumentError: If ``index`` is out of range.
    """
    annot = _require_subtype(store, handle, INK)
    ink_list = annot.get(Name.InkList)
    count = len(_resolve(ink_list)) if ink_list is not None else 0
    if not 0 <= index < count:
        raise InvalidArgumentError(f"Ink stroke index {index} out of range ({count})")
    return _unflatten(_resolve(_resolve(ink_list)[index]))


def remove_ink_list(store: DocumentStore, handle: AnnotationHandle) -> None:
    """Removes every path from an ink annotation."""
    with store.lease():
        _require_subtype(store, handle, INK)
        store.delete_entry(handle, "/InkList")


# ---------------------------------------------------------------------------
# Stroke style
# ---------------------------------------------------------------------------


def stroke_width(store: DocumentStore, handle: AnnotationHandle) -> float:
    """Border width from /BS /W (1.0 when absent)."""
    bs = store.get_entry(handle, "/BS")
    if isinstance(bs, Dictionary) and Name.W in bs:
        return float(bs.W)
    return DEFAULT_STROKE_WIDTH


def set_stroke_width(
    store: DocumentStore, handle: AnnotationHandle, width: float
) -> None:
    """Sets /BS /W.

    Raises:
        InvalidArgumentError: If ``width`` is not positive and finite.
    """
    if not math.isfinite(width) or width <= 0:
        raise InvalidArgumentError(f"Stroke width must be positive: {width!r}")
    with store.lease():
        bs = store.get_entry(handle, "/BS")
        if not isinstance(bs, Dictionary):
            bs = Dictionary(Type=Name.Border)
        bs[Name.W] = width
        store.set_entry(handle, "/BS", bs)


def stroke_color(store: DocumentStore, handle: AnnotationHandle) -> Color:
    """Stroke color from /C (black when absent or not RGB)."""
    c = store.get_entry(handle, "/C")
    if isinstance(c, Array) and len(c) == 3:
        return Color.from_unit_floats(c)
    return BLACK


def set_color(store: DocumentStore, handle: AnnotationHandle, color: Color) -> None:
    """Sets the stroke color (/C)."""
    store.set_entry(
        handle, "/C", Array([round(v, 4) for v in color.as_unit_floats()])
    )


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------


def _bounding_rect(points: Sequence[Point], width: float) -> Rect:
    pad = width / 2.0 + 1.0
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return Rect(min(xs) - pad, min(ys) - pad, max(xs) + pad, max(ys) + pad)


def _create_markup(
    store: DocumentStore,
    page_index: int,
    subtype: str,
    points: Sequence[Point],
    width: float,
    color: Color,
    contents: str | None,
    entries: dict,
) -> AnnotationHandle:
    if not points:
        raise InvalidArgumentError(f"{subtype} annotation needs at least one point")
    _check_points(points)
    if not math.isfinite(width) or width <= 0:
        raise InvalidArgumentError(f"Stroke width must be positive: {width!r}")

    with store.lease():
        page = store.page(page_index)
        annot = Dictionary(
            Type=Name.Annot,
            Subtype=Name(subtype),
            Rect=Array(_bounding_rect(points, width).as_list()),
            F=_ANNOT_FLAG_PRINT,
            P=page.obj,
            C=Array([round(v, 4) for v in color.as_unit_floats()]),
            BS=Dictionary(Type=Name.Border, W=width),
        )
        if contents is not None:
            annot[Name.Contents] = String(contents)
        for key, value in entries.items():
            annot[Name(key)] = value
        handle = store.allocate(annot)
        annot = store.resolve(handle)

        annots = page.obj.get(Name.Annots)
        annots = _resolve(annots) if annots is not None else None
        if not isinstance(annots, Array):
            annots = Array()
            page.obj[Name.Annots] = annots
            annots = page.obj.Annots
        annots.append(annot)

    logger.debug("Created %s annotation on page %d", subtype, page_index)
    store.notify_changed(page_index)
    return handle


def create_line_annotation(
    store: DocumentStore,
    page_index: int,
    start: Point,
    end: Point,
    width: float = DEFAULT_STROKE_WIDTH,
    color: Color = BLACK,
    contents: str | None = None,
) -> AnnotationHandle:
    """Adds a line annotation to a page."""
    return _create_markup(
        store,
        page_index,
        LINE,
        (start, end),
        width,
        color,
        contents,
        {"/L": _flatten((start, end))},
    )


def create_polygon_annotation(
    store: DocumentStore,
    page_index: int,
    vertices: Sequence[Point],
    width: float = DEFAULT_STROKE_WIDTH,
    color: Color = BLACK,
    contents: str | None = None,
) -> AnnotationHandle:
    """Adds a closed polygon annotation to a page."""
    vertices = list(vertices)
    return _create_markup(
        store,
        page_index,
        POLYGON,
        vertices,
        width,
        color,
        contents,
        {"/Vertices": _flatten(vertices)},
    )


def create_polyline_annotation(
    store: DocumentStore,
    page_index: int,
    vertices: Sequence[Point],
    width: float = DEFAULT_STROKE_WIDTH,
    color: Color = BLACK,
    contents: str | None = None,
) -> AnnotationHandle:
    """Adds an open polyline annotation to a page."""
    vertices = list(vertices)
    return _create_markup(
        store,
        page_index,
        POLYLINE,
        vertices,
        width,
        color,
        contents,
        {"/Vertices": _flatten(vertices)},
    )


def create_ink_annotation(
    store: DocumentStore,
    page_index: int,
    paths: Sequence[Sequence[Point]],
    width: float = DEFAULT_STROKE_WIDTH,
    color: Color = BLACK,
    contents: str | None = None,
) -> AnnotationHandle:
    """Adds an ink annotation with one /InkList entry per path."""
    paths = [list(path) for path in paths]
    if any(not path for path in paths):
        raise InvalidArgumentError("Ink paths must not be empty")
    points = [point for path in paths for point in path]
    return _create_markup(
        store,
        page_index,
        INK,
        points,
        width,
        color,
        contents,
        {"/InkList": Array([_flatten(path) for path in paths])},
    )


def remove_annotation(store: DocumentStore, handle: AnnotationHandle) -> None:
    """Removes an annotation from its page; the handle becomes stale."""
    store.remove_annotation(handle)


# ---------------------------------------------------------------------------
# Appearance rebuild
# ---------------------------------------------------------------------------


def build_geometry_appearance(store: DocumentStore, handle: AnnotationHandle) -> str:
    """Builds a stroke fragment from the annotation's current geometry.

    Coordinates are made relative to the lower-left corner of /Rect,
    matching the appearance stream's bounding box. Color and width come
    from /C and /BS.

    Raises:
        NotSupportedAnnotationTypeError: For subtypes without geometry.
    """
    annot = _require_subtype(store, handle, LINE, POLYGON, POLYLINE, INK)
    subtype = str(annot.Subtype)
    origin = Rect.from_array(annot.Rect).origin
    width = stroke_width(store, handle)
    color = stroke_color(store, handle)

    def shift(points):
        return [Point(p.x - origin.x, p.y - origin.y) for p in points]

    if subtype == LINE:
        paths = [(shift(get_line(store, handle)), False)]
    elif subtype == INK:
        paths = [
            (shift(get_ink_stroke(store, handle, i)), False)
            for i in range(ink_stroke_count(store, handle))
        ]
    else:
        vertices = shift(get_vertices(store, handle))
        paths = [(vertices, subtype == POLYGON)] if vertices else []

    strokes = [
        Stroke.through(points, width=width, color=color, closed=closed)
        for points, closed in paths
    ]
    return build_stroke_stream(strokes)


def refresh_geometry_appearance(
    store: DocumentStore,
    handle: AnnotationHandle,
    mode: AppearanceMode = AppearanceMode.NORMAL,
) -> str:
    """Rebuilds and applies the appearance after geometry edits."""
    fragment = build_geometry_appearance(store, handle)
    apply_appearance(store, handle, fragment, mode)
    return fragment
