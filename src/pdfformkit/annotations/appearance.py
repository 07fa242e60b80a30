# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Writing content-stream fragments into annotation appearances."""

import logging
from collections.abc import Iterable
from enum import Enum

import pikepdf
from pikepdf import Dictionary, Name, Stream

from ..content_stream import build_stroke_stream
from ..exceptions import InternalFailureError
from ..geometry import Rect, Stroke
from ..store import AnnotationHandle, DocumentStore
from ..utils import make_form_stream
from ..utils import resolve_indirect as _resolve

logger = logging.getLogger(__name__)

_STORE_ERRORS = (pikepdf.PdfError, KeyError, TypeError, ValueError, AttributeError)


class AppearanceMode(Enum):
    """Entry of the appearance dictionary (/AP) to write."""

    NORMAL = "/N"
    ROLL_OVER = "/R"
    DOWN = "/D"


def apply_appearance(
    store: DocumentStore,
    handle: AnnotationHandle,
    fragment: str,
    mode: AppearanceMode = AppearanceMode.NORMAL,
) -> None:
    """Stores ``fragment`` as the annotation's appearance for ``mode``.

    The fragment becomes a Form XObject whose bounding box matches the
    annotation rectangle. Only the selected /AP entry is replaced. When
    the page's regeneration policy is automatic, the page is
    regenerated after the write.

    Args:
        store: Document owning the annotation.
        handle: Target annotation.
        fragment: Content-stream text, e.g. from build_stroke_stream().
        mode: Which appearance to write.

    Raises:
        InternalFailureError: If the handle is stale or the store
            rejects the write.
    """
    with store.lease():
        annot = store.resolve(handle)
        try:
            rect = Rect.from_array(annot.Rect)
            stream = make_form_stream(
                store.pdf,
                abs(rect.width),
                abs(rect.height),
                fragment.encode("latin-1"),
            )
            ap = annot.get(Name.AP)
            ap = _resolve(ap) if ap is not None else None
            if not isinstance(ap, Dictionary):
                ap = Dictionary()
                annot[Name.AP] = ap
            ap[Name(mode.value)] = stream
        except _STORE_ERRORS as e:
            raise InternalFailureError(f"Cannot write appearance: {e}") from e
        page_index = store.page_index_of(handle)

    logger.debug("Wrote %s appearance (%d bytes)", mode.value, len(fragment))
    if page_index is not None:
        store.notify_changed(page_index)


def apply_strokes(
    store: DocumentStore,
    handle: AnnotationHandle,
    strokes: Iterable[Stroke],
    mode: AppearanceMode = AppearanceMode.NORMAL,
) -> str:
    """Builds a stroke fragment and applies it. Returns the fragment."""
    fragment = build_stroke_stream(strokes)
    apply_appearance(store, handle, fragment, mode)
    return fragment


def get_appearance(
    store: DocumentStore,
    handle: AnnotationHandle,
    mode: AppearanceMode = AppearanceMode.NORMAL,
) -> str | None:
    """Returns the content of a single-stream appearance, if any.

    State dictionaries (checkbox and radio appearances) yield None.
    """
    annot = store.resolve(handle)
    ap = annot.get(Name.AP)
    if ap is None:
        return None
    entry = _resolve(ap).get(Name(mode.value))
    if entry is None:
        return None
    entry = _resolve(entry)
    if not isinstance(entry, Stream):
        return None
    return entry.read_bytes().decode("latin-1")
