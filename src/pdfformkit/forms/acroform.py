# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""AcroForm root dictionary setup."""

import logging

from pikepdf import Array, Dictionary, Name, String

from ..store import DocumentStore
from ..utils import resolve_indirect as _resolve

logger = logging.getLogger(__name__)

DEFAULT_FONT_RESOURCE = "Helv"
SYMBOL_FONT_RESOURCE = "ZaDb"
DEFAULT_ACROFORM_DA = f"/{DEFAULT_FONT_RESOURCE} 0 Tf 0 g"

# Resource name -> (BaseFont, Encoding)
_DEFAULT_FONTS = {
    DEFAULT_FONT_RESOURCE: ("/Helvetica", "/WinAnsiEncoding"),
    SYMBOL_FONT_RESOURCE: ("/ZapfDingbats", None),
}


def get_acroform(store: DocumentStore) -> Dictionary | None:
    """Returns the document's /AcroForm dictionary, if any."""
    acroform = store.pdf.Root.get(Name.AcroForm)
    if acroform is None:
        return None
    acroform = _resolve(acroform)
    return acroform if isinstance(acroform, Dictionary) else None


def ensure_acroform(store: DocumentStore) -> Dictionary:
    """Makes sure the document has a usable /AcroForm.

    Creates the dictionary with an empty /Fields array when it is
    missing, and adds /DA and the default font resources when absent.
    Existing entries are never overwritten, so repeated calls leave the
    document unchanged.

    Args:
        store: Document to prepare.

    Returns:
        The /AcroForm dictionary.
    """
    pdf = store.pdf
    with store.lease():
        acroform = get_acroform(store)
        if acroform is None:
            acroform = pdf.make_indirect(Dictionary(Fields=Array()))
            pdf.Root[Name.AcroForm] = acroform
            logger.info("Created AcroForm dictionary")

        fields = acroform.get(Name.Fields)
        if fields is None or not isinstance(_resolve(fields), Array):
            acroform[Name.Fields] = Array()

        if Name.DA not in acroform:
            acroform[Name.DA] = String(DEFAULT_ACROFORM_DA)

        dr = acroform.get(Name.DR)
        if dr is None or not isinstance(_resolve(dr), Dictionary):
            dr = Dictionary()
            acroform[Name.DR] = dr
        dr = _resolve(dr)

        fonts = dr.get(Name.Font)
        if fonts is None or not isinstance(_resolve(fonts), Dictionary):
            fonts = Dictionary()
            dr[Name.Font] = fonts
        fonts = _resolve(fonts)

        for resource_name, (base_font, encoding) in _DEFAULT_FONTS.items():
            key = Name("/" + resource_name)
            if key in fonts:
                continue
            font = Dictionary(
                Type=Name.Font, Subtype=Name.Type1, BaseFont=Name(base_font)
            )
            if encoding is not None:
                font[Name.Encoding] = Name(encoding)
            fonts[key] = pdf.make_indirect(font)
            logger.debug("Added /%s to AcroForm default resources", resource_name)

        return acroform


def acroform_fields(store: DocumentStore) -> Array:
    """Returns /AcroForm /Fields, or an empty array when there is no form."""
    acroform = get_acroform(store)
    if acroform is None:
        return Array()
    fields = acroform.get(Name.Fields)
    fields = _resolve(fields) if fields is not None else None
    return fields if isinstance(fields, Array) else Array()


def default_font_resources(store: DocumentStore) -> Dictionary:
    """Resources dictionary exposing /Helv for appearance streams."""
    acroform = ensure_acroform(store)
    fonts = _resolve(_resolve(acroform.DR).Font)
    return Dictionary(
        Font=Dictionary({"/" + DEFAULT_FONT_RESOURCE: fonts["/" + DEFAULT_FONT_RESOURCE]})
    )
