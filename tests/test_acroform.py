# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for AcroForm setup."""

from pikepdf import Array, Dictionary, Name, String

from pdfformkit.forms.acroform import (
    DEFAULT_ACROFORM_DA,
    acroform_fields,
    default_font_resources,
    ensure_acroform,
    get_acroform,
)


def _snapshot(store) -> tuple:
    acroform = store.pdf.Root.AcroForm
    fonts = acroform.DR.Font
    return (
        sorted(str(k) for k in acroform.keys()),
        len(acroform.Fields),
        str(acroform.DA),
        sorted(str(k) for k in fonts.keys()),
        len(store.pdf.objects),
    )


class TestEnsureAcroForm:
    """Tests for ensure_acroform()."""

    def test_creates_acroform(self, store) -> None:
        assert get_acroform(store) is None
        acroform = ensure_acroform(store)
        assert len(acroform.Fields) == 0
        assert str(acroform.DA) == DEFAULT_ACROFORM_DA
        helv = acroform.DR.Font.Helv
        assert helv.BaseFont == Name.Helvetica
        assert helv.Encoding == Name.WinAnsiEncoding
        assert acroform.DR.Font.ZaDb.BaseFont == Name.ZapfDingbats

    def test_idempotent(self, store) -> None:
        """A second call leaves the document exactly as after the first."""
        ensure_acroform(store)
        first = _snapshot(store)
        ensure_acroform(store)
        assert _snapshot(store) == first

    def test_existing_entries_preserved(self, store) -> None:
        field = store.pdf.make_indirect(Dictionary(T=String("x")))
        store.pdf.Root.AcroForm = Dictionary(
            Fields=Array([field]), DA=String("/Cour 9 Tf 0 g")
        )
        acroform = ensure_acroform(store)
        assert len(acroform.Fields) == 1
        assert str(acroform.DA) == "/Cour 9 Tf 0 g"
        assert Name.Helv in acroform.DR.Font

    def test_existing_font_not_replaced(self, store) -> None:
        custom = store.pdf.make_indirect(
            Dictionary(Type=Name.Font, Subtype=Name.Type1, BaseFont=Name.Courier)
        )
        store.pdf.Root.AcroForm = Dictionary(
            Fields=Array(), DR=Dictionary(Font=Dictionary(Helv=custom))
        )
        ensure_acroform(store)
        assert store.pdf.Root.AcroForm.DR.Font.Helv.BaseFont == Name.Courier

    def test_malformed_fields_replaced(self, store) -> None:
        store.pdf.Root.AcroForm = Dictionary(Fields=Name.Bogus)
        acroform = ensure_acroform(store)
        assert isinstance(acroform.Fields, Array)


class TestHelpers:
    """acroform_fields and default_font_resources."""

    def test_fields_without_form(self, store) -> None:
        assert len(acroform_fields(store)) == 0

    def test_default_font_resources(self, store) -> None:
        resources = default_font_resources(store)
        assert list(resources.Font.keys()) == ["/Helv"]
