# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Document object store with generation-checked handles.

DocumentStore wraps an open pikepdf.Pdf. Dictionaries that callers may
refer to later are registered in an arena and addressed through Handle
values: an (index, generation) pair. Removing an object bumps the slot's
generation, so handles issued earlier fail to resolve instead of
silently reaching a different object.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pikepdf
from pikepdf import Array, Dictionary, Name, Page, Pdf

from .exceptions import InternalFailureError, InvalidArgumentError
from .regeneration import (
    CoalescingRegenerator,
    ContentRegenerator,
    RegenerationPolicy,
)
from .utils import resolve_indirect as _resolve

logger = logging.getLogger(__name__)

# Letter size, used for pages created without explicit dimensions
DEFAULT_PAGE_SIZE = (612, 792)

# Errors pikepdf raises for rejected reads/writes
_STORE_ERRORS = (pikepdf.PdfError, KeyError, TypeError, ValueError, AttributeError)


@dataclass(frozen=True)
class Handle:
    """Opaque reference to a dictionary owned by a DocumentStore."""

    index: int
    generation: int


AnnotationHandle = Handle
FieldHandle = Handle


class _Slot:
    __slots__ = ("obj", "generation")

    def __init__(self, obj: Dictionary | None) -> None:
        self.obj = obj
        self.generation = 0


def same_object(a: Any, b: Any) -> bool:
    """True if both values are the same indirect PDF object."""
    try:
        return a.objgen == b.objgen and a.objgen != (0, 0)
    except AttributeError:
        return False


class DocumentStore:
    """Owns a PDF document and the arena of handle-addressable objects.

    Args:
        pdf: Open pikepdf document. The store takes ownership and closes
            it in close().
        regenerator: Page content regenerator. Defaults to
            CoalescingRegenerator.
    """

    def __init__(
        self,
        pdf: Pdf,
        regenerator: ContentRegenerator | None = None,
    ) -> None:
        self._pdf = pdf
        self._regenerator = regenerator or CoalescingRegenerator()
        self._slots: list[_Slot] = []
        self._free: list[int] = []
        self._by_objgen: dict[tuple[int, int], int] = {}
        self._policies: dict[tuple[int, int], RegenerationPolicy] = {}
        self._lock = threading.RLock()
        self._closed = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @classmethod
    def new(cls, regenerator: ContentRegenerator | None = None) -> DocumentStore:
        """Creates a store around a new, empty document."""
        return cls(Pdf.new(), regenerator)

    @classmethod
    def open(
        cls,
        path: str | Path,
        regenerator: ContentRegenerator | None = None,
    ) -> DocumentStore:
        """Opens a document from disk.

        Raises:
            FileNotFoundError: If the file does not exist.
            pikepdf.PdfError: If the file is not a readable PDF.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        return cls(Pdf.open(path), regenerator)

    @property
    def pdf(self) -> Pdf:
        return self._pdf

    @property
    def closed(self) -> bool:
        return self._closed

    def save(self, path: str | Path) -> None:
        """Writes the document to ``path``."""
        with self.lease():
            self._pdf.save(path)
        logger.info("Saved document to %s", path)

    def close(self) -> None:
        """Closes the document and invalidates every handle."""
        with self.lease():
            if self._closed:
                return
            for slot in self._slots:
                slot.obj = None
                slot.generation += 1
            self._by_objgen.clear()
            self._pdf.close()
            self._closed = True

    def __enter__(self) -> DocumentStore:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @contextmanager
    def lease(self) -> Generator[DocumentStore, None, None]:
        """Holds exclusive access to the document for one operation."""
        with self._lock:
            yield self

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    @property
    def page_count(self) -> int:
        return len(self._pdf.pages)

    def page(self, page_index: int) -> Page:
        """Returns the page at ``page_index``.

        Raises:
            InvalidArgumentError: If the index is out of range.
        """
        if not 0 <= page_index < len(self._pdf.pages):
            raise InvalidArgumentError(
                f"Page index {page_index} out of range "
                f"(document has {len(self._pdf.pages)} page(s))"
            )
        return self._pdf.pages[page_index]

    def add_page(
        self, width: float = DEFAULT_PAGE_SIZE[0], height: float = DEFAULT_PAGE_SIZE[1]
    ) -> int:
        """Appends a blank page and returns its index."""
        with self.lease():
            page = Page(
                Dictionary(
                    Type=Name.Page,
                    MediaBox=Array([0, 0, width, height]),
                    Resources=Dictionary(),
                )
            )
            self._pdf.pages.append(page)
            return len(self._pdf.pages) - 1

    def page_index_of(self, handle: Handle) -> int | None:
        """Finds the page whose /Annots lists the annotation.

        Uses /P when it points at a page of this document, otherwise
        scans every page's /Annots.
        """
        annot = self.resolve(handle)
        p = annot.get(Name.P)
        if p is not None:
            for index, page in enumerate(self._pdf.pages):
                if same_object(page.obj, p):
                    return index
        for index, page in enumerate(self._pdf.pages):
            annots = page.obj.get(Name.Annots)
            if annots is None:
                continue
            if any(same_object(a, annot) for a in _resolve(annots)):
                return index
        return None

    # ------------------------------------------------------------------
    # Arena
    # ------------------------------------------------------------------

    def register(self, obj: Dictionary) -> Handle:
        """Returns the handle for an indirect dictionary.

        Registering the same object twice yields the same handle.

        Raises:
            InternalFailureError: If the object is not indirect.
        """
        with self.lease():
            self._check_open()
            objgen = getattr(obj, "objgen", (0, 0))
            if objgen == (0, 0):
                raise InternalFailureError("Only indirect objects can be registered")
            index = self._by_objgen.get(objgen)
            if index is not None:
                return Handle(index, self._slots[index].generation)

            if self._free:
                index = self._free.pop()
                self._slots[index].obj = obj
            else:
                index = len(self._slots)
                self._slots.append(_Slot(obj))
            self._by_objgen[objgen] = index
            return Handle(index, self._slots[index].generation)

    def allocate(self, dictionary: Dictionary) -> Handle:
        """Makes ``dictionary`` an indirect object and registers it.

        Raises:
            InternalFailureError: If pikepdf rejects the allocation.
        """
        with self.lease():
            self._check_open()
            try:
                obj = self._pdf.make_indirect(dictionary)
            except _STORE_ERRORS as e:
                raise InternalFailureError(f"Object allocation failed: {e}") from e
            return self.register(obj)

    def is_valid(self, handle: Handle) -> bool:
        """True while the handle still refers to a live object."""
        if self._closed or not 0 <= handle.index < len(self._slots):
            return False
        slot = self._slots[handle.index]
        return slot.obj is not None and slot.generation == handle.generation

    def resolve(self, handle: Handle) -> Dictionary:
        """Returns the dictionary behind ``handle``.

        Raises:
            InternalFailureError: If the handle is stale or invalid.
        """
        if not self.is_valid(handle):
            raise InternalFailureError(f"Stale or invalid handle: {handle}")
        return self._slots[handle.index].obj

    def release(self, handle: Handle) -> None:
        """Invalidates ``handle`` without touching the document."""
        with self.lease():
            obj = self.resolve(handle)
            slot = self._slots[handle.index]
            self._by_objgen.pop(obj.objgen, None)
            slot.obj = None
            slot.generation += 1
            self._free.append(handle.index)

    def get_entry(self, handle: Handle, key: str, default: Any = None) -> Any:
        """Reads ``key`` from the dictionary behind ``handle``."""
        obj = self.resolve(handle)
        value = obj.get(Name(key), default)
        return _resolve(value) if value is not None else default

    def set_entry(self, handle: Handle, key: str, value: Any) -> None:
        """Writes ``key`` on the dictionary behind ``handle``.

        Raises:
            InternalFailureError: If the handle is stale or pikepdf
                rejects the value.
        """
        with self.lease():
            obj = self.resolve(handle)
            try:
                obj[Name(key)] = value
            except _STORE_ERRORS as e:
                raise InternalFailureError(f"Cannot write {key}: {e}") from e

    def delete_entry(self, handle: Handle, key: str) -> None:
        """Removes ``key`` if present."""
        with self.lease():
            obj = self.resolve(handle)
            name = Name(key)
            if name in obj:
                del obj[name]

    # ------------------------------------------------------------------
    # Annotations
    # ------------------------------------------------------------------

    def annotations(self, page_index: int) -> list[Handle]:
        """Returns handles for the indirect annotations of a page."""
        page = self.page(page_index)
        annots = page.obj.get(Name.Annots)
        if annots is None:
            return []
        handles = []
        for annot in _resolve(annots):
            if getattr(annot, "objgen", (0, 0)) == (0, 0):
                logger.debug("Skipping direct annotation on page %d", page_index)
                continue
            handles.append(self.register(annot))
        return handles

    def remove_annotation(self, handle: Handle) -> None:
        """Unlinks an annotation and invalidates its handle.

        The annotation leaves its page's /Annots. Widgets also leave
        /AcroForm /Fields or their parent's /Kids.
        """
        with self.lease():
            annot = self.resolve(handle)
            page_index = self.page_index_of(handle)
            if page_index is not None:
                page_dict = self._pdf.pages[page_index].obj
                remove_reference(page_dict, Name.Annots, annot)

            parent = annot.get(Name.Parent)
            if parent is not None:
                remove_reference(_resolve(parent), Name.Kids, annot)
            acroform = self._pdf.Root.get(Name.AcroForm)
            if acroform is not None:
                remove_reference(_resolve(acroform), Name.Fields, annot)

            self.release(handle)
            logger.debug("Removed annotation %s", annot.objgen)
            if page_index is not None:
                self.notify_changed(page_index)

    # ------------------------------------------------------------------
    # Regeneration
    # ------------------------------------------------------------------

    def set_regeneration_policy(
        self, page_index: int, policy: RegenerationPolicy
    ) -> None:
        """Sets when the page's content is rebuilt after mutations."""
        page = self.page(page_index)
        self._policies[page.obj.objgen] = policy

    def regeneration_policy(self, page_index: int) -> RegenerationPolicy:
        page = self.page(page_index)
        return self._policies.get(page.obj.objgen, RegenerationPolicy.MANUAL)

    def regenerate_page(self, page_index: int) -> None:
        """Runs the regenerator on one page regardless of policy."""
        with self.lease():
            page = self.page(page_index)
            self._regenerator.regenerate(self._pdf, page)
            logger.debug("Regenerated page %d", page_index)

    def notify_changed(self, page_index: int) -> bool:
        """Regenerates the page if its policy is automatic.

        Returns:
            True if the regenerator ran.
        """
        if self.regeneration_policy(page_index) is not (
            RegenerationPolicy.AUTOMATIC_ON_EVERY_CHANGE
        ):
            return False
        self.regenerate_page(page_index)
        return True

    def _check_open(self) -> None:
        if self._closed:
            raise InternalFailureError("Document is closed")


def remove_reference(container: Dictionary, key: Name, target: Any) -> bool:
    """Removes every reference to ``target`` from ``container[key]``."""
    arr = container.get(key)
    if arr is None:
        return False
    arr = _resolve(arr)
    if not isinstance(arr, Array):
        return False
    removed = False
    for i in range(len(arr) - 1, -1, -1):
        if same_object(arr[i], target):
            del arr[i]
            removed = True
    return removed
