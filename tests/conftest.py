# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Pytest fixtures for the pdfformkit test suite."""

from io import BytesIO
from pathlib import Path

import pikepdf
import pytest
from pikepdf import Array, Dictionary, Name, Pdf

from pdfformkit.forms import FormEnvironment, FormSession
from pdfformkit.regeneration import NullRegenerator
from pdfformkit.store import DocumentStore

# -- Global store tracker --

_tracked_stores: list[DocumentStore] = []


@pytest.fixture(autouse=True)
def _auto_close_stores():
    """Close all tracked stores after each test."""
    yield
    for store in reversed(_tracked_stores):
        try:
            store.close()
        except Exception:
            pass
    _tracked_stores.clear()


def new_store(pages: int = 1, regenerator=None) -> DocumentStore:
    """Create a tracked store with ``pages`` blank letter pages."""
    store = DocumentStore(Pdf.new(), regenerator)
    _tracked_stores.append(store)
    for _ in range(pages):
        store.add_page()
    return store


def reopen(store: DocumentStore) -> DocumentStore:
    """Save a store to bytes and reopen it (auto-tracked)."""
    buf = BytesIO()
    store.pdf.save(buf)
    store.close()
    buf.seek(0)
    reopened = DocumentStore(Pdf.open(buf), NullRegenerator())
    _tracked_stores.append(reopened)
    return reopened


def resolve(obj: object) -> object:
    """Safely resolve an indirect reference."""
    try:
        return obj.get_object()
    except (AttributeError, TypeError, ValueError):
        return obj


class RecordingRegenerator:
    """Regenerator that records which pages it was asked to rebuild."""

    def __init__(self) -> None:
        self.calls: list[int] = []

    def regenerate(self, pdf: Pdf, page: pikepdf.Page) -> None:
        self.calls.append(page.obj.objgen[0])


# -- Fixtures --


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Temporary directory for tests."""
    return tmp_path


@pytest.fixture
def store() -> DocumentStore:
    """Store with one blank page."""
    return new_store()


@pytest.fixture
def form_session(store: DocumentStore) -> FormSession:
    """Active form session for ``store``."""
    return FormEnvironment().init_session(store)


@pytest.fixture
def sample_pdf(tmp_dir: Path) -> Path:
    """Minimal one-page PDF on disk.

    Returns:
        Path to the PDF file.
    """
    pdf = Pdf.new()
    pdf.pages.append(
        pikepdf.Page(Dictionary(Type=Name.Page, MediaBox=Array([0, 0, 612, 792])))
    )
    pdf_path = tmp_dir / "sample.pdf"
    pdf.save(pdf_path)
    pdf.close()
    return pdf_path


@pytest.fixture
def pdf_with_square_annotation(tmp_dir: Path) -> Path:
    """One-page PDF with a single Square annotation at (100, 100, 200, 150).

    Returns:
        Path to the PDF file.
    """
    pdf = Pdf.new()
    pdf.pages.append(
        pikepdf.Page(Dictionary(Type=Name.Page, MediaBox=Array([0, 0, 612, 792])))
    )
    annot = pdf.make_indirect(
        Dictionary(
            Type=Name.Annot,
            Subtype=Name.Square,
            Rect=Array([100, 100, 200, 150]),
        )
    )
    pdf.pages[0].obj[Name.Annots] = Array([annot])
    pdf_path = tmp_dir / "annotated.pdf"
    pdf.save(pdf_path)
    pdf.close()
    return pdf_path
