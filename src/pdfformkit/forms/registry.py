# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Static description of the creatable form field types."""

from dataclasses import dataclass
from enum import Enum

from ..geometry import Rect
from ..text_metrics import MAX_FONT_SIZE, MIN_FONT_SIZE

# Field flags (/Ff), ISO 32000-1 Tables 221, 226, 228, 230
FIELD_FLAG_READ_ONLY = 1 << 0
FIELD_FLAG_REQUIRED = 1 << 1
FIELD_FLAG_NO_EXPORT = 1 << 2
# Text fields
FIELD_FLAG_MULTILINE = 1 << 12
FIELD_FLAG_PASSWORD = 1 << 13
FIELD_FLAG_FILE_SELECT = 1 << 20
FIELD_FLAG_DO_NOT_SPELL_CHECK = 1 << 22
FIELD_FLAG_DO_NOT_SCROLL = 1 << 23
FIELD_FLAG_COMB = 1 << 24
FIELD_FLAG_RICH_TEXT = 1 << 25
# Buttons
FIELD_FLAG_NO_TOGGLE_TO_OFF = 1 << 14
FIELD_FLAG_RADIO = 1 << 15
FIELD_FLAG_PUSHBUTTON = 1 << 16
FIELD_FLAG_RADIOS_IN_UNISON = 1 << 25
# Choice fields
FIELD_FLAG_COMBO = 1 << 17
FIELD_FLAG_EDIT = 1 << 18
FIELD_FLAG_SORT = 1 << 19
FIELD_FLAG_MULTI_SELECT = 1 << 21
FIELD_FLAG_COMMIT_ON_SEL_CHANGE = 1 << 26

# Annotation flag Print (bit 3)
ANNOT_FLAG_PRINT = 1 << 2

WIDGET_SUBTYPE = "/Widget"
TEXT_DA_TEMPLATE = "/Helv {size} Tf 0 g"
HELV_AUTO_DA = "/Helv 0 Tf 0 g"
ZADB_AUTO_DA = "/ZaDb 0 Tf 0 g"


class FieldType(Enum):
    """Form field kinds accepted by widget creation."""

    TEXT = "text"
    PUSH_BUTTON = "pushbutton"
    CHECKBOX = "checkbox"
    RADIO_BUTTON = "radio"
    COMBO_BOX = "combobox"
    LIST_BOX = "listbox"
    SIGNATURE = "signature"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class FieldTypeInfo:
    """Dictionary conventions for one field type."""

    pdf_type: str | None
    subtype_flags: int
    default_appearance_template: str | None
    annotation_subtype: str | None
    allowed: bool


_REGISTRY: dict[FieldType, FieldTypeInfo] = {
    FieldType.TEXT: FieldTypeInfo("/Tx", 0, TEXT_DA_TEMPLATE, WIDGET_SUBTYPE, True),
    FieldType.PUSH_BUTTON: FieldTypeInfo(
        "/Btn", FIELD_FLAG_PUSHBUTTON, HELV_AUTO_DA, WIDGET_SUBTYPE, True
    ),
    FieldType.CHECKBOX: FieldTypeInfo("/Btn", 0, ZADB_AUTO_DA, WIDGET_SUBTYPE, True),
    FieldType.RADIO_BUTTON: FieldTypeInfo(
        "/Btn",
        FIELD_FLAG_RADIO | FIELD_FLAG_NO_TOGGLE_TO_OFF,
        ZADB_AUTO_DA,
        WIDGET_SUBTYPE,
        True,
    ),
    FieldType.COMBO_BOX: FieldTypeInfo(
        "/Ch", FIELD_FLAG_COMBO, HELV_AUTO_DA, WIDGET_SUBTYPE, True
    ),
    FieldType.LIST_BOX: FieldTypeInfo("/Ch", 0, HELV_AUTO_DA, WIDGET_SUBTYPE, True),
    FieldType.SIGNATURE: FieldTypeInfo("/Sig", 0, None, WIDGET_SUBTYPE, True),
    FieldType.UNKNOWN: FieldTypeInfo(None, 0, None, None, False),
}


def describe(field_type: FieldType) -> FieldTypeInfo:
    """Looks up the conventions for ``field_type``.

    Unrecognized values describe as not allowed.
    """
    return _REGISTRY.get(field_type, _REGISTRY[FieldType.UNKNOWN])


def text_font_size_for(rect: Rect) -> float:
    """Default text size for a single-line field of this height."""
    size = (rect.height - 4) * 0.75
    return max(MIN_FONT_SIZE, min(MAX_FONT_SIZE, size))


def default_appearance_for(field_type: FieldType, rect: Rect) -> str | None:
    """Renders the /DA string a new field of this type receives.

    Returns:
        The DA string, or None for types without one.
    """
    template = describe(field_type).default_appearance_template
    if template is None:
        return None
    if "{size}" in template:
        return template.format(size=f"{text_font_size_for(rect):g}")
    return template
