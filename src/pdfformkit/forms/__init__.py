# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Interactive form fields: AcroForm setup, field types and widget creation."""

from .acroform import ensure_acroform, get_acroform
from .registry import (
    FIELD_FLAG_COMB,
    FIELD_FLAG_COMBO,
    FIELD_FLAG_COMMIT_ON_SEL_CHANGE,
    FIELD_FLAG_DO_NOT_SCROLL,
    FIELD_FLAG_DO_NOT_SPELL_CHECK,
    FIELD_FLAG_EDIT,
    FIELD_FLAG_FILE_SELECT,
    FIELD_FLAG_MULTI_SELECT,
    FIELD_FLAG_MULTILINE,
    FIELD_FLAG_NO_EXPORT,
    FIELD_FLAG_NO_TOGGLE_TO_OFF,
    FIELD_FLAG_PASSWORD,
    FIELD_FLAG_PUSHBUTTON,
    FIELD_FLAG_RADIO,
    FIELD_FLAG_RADIOS_IN_UNISON,
    FIELD_FLAG_READ_ONLY,
    FIELD_FLAG_REQUIRED,
    FIELD_FLAG_RICH_TEXT,
    FIELD_FLAG_SORT,
    FieldType,
    FieldTypeInfo,
    default_appearance_for,
    describe,
)
from .session import FormEnvironment, FormSession
from .values import (
    field_value,
    is_checked,
    set_button_state,
    set_checked,
    set_field_value,
)
from .widgets import (
    FieldDescriptor,
    WidgetHandle,
    create_widget,
    field_widgets,
    find_field,
)

__all__ = [
    # AcroForm
    "ensure_acroform",
    "get_acroform",
    # Registry
    "FieldType",
    "FieldTypeInfo",
    "describe",
    "default_appearance_for",
    "FIELD_FLAG_READ_ONLY",
    "FIELD_FLAG_REQUIRED",
    "FIELD_FLAG_NO_EXPORT",
    "FIELD_FLAG_MULTILINE",
    "FIELD_FLAG_PASSWORD",
    "FIELD_FLAG_FILE_SELECT",
    "FIELD_FLAG_DO_NOT_SPELL_CHECK",
    "FIELD_FLAG_DO_NOT_SCROLL",
    "FIELD_FLAG_COMB",
    "FIELD_FLAG_RICH_TEXT",
    "FIELD_FLAG_NO_TOGGLE_TO_OFF",
    "FIELD_FLAG_RADIO",
    "FIELD_FLAG_PUSHBUTTON",
    "FIELD_FLAG_RADIOS_IN_UNISON",
    "FIELD_FLAG_COMBO",
    "FIELD_FLAG_EDIT",
    "FIELD_FLAG_SORT",
    "FIELD_FLAG_MULTI_SELECT",
    "FIELD_FLAG_COMMIT_ON_SEL_CHANGE",
    # Sessions
    "FormEnvironment",
    "FormSession",
    # Widgets
    "FieldDescriptor",
    "WidgetHandle",
    "create_widget",
    "find_field",
    "field_widgets",
    # Values
    "field_value",
    "set_field_value",
    "set_checked",
    "is_checked",
    "set_button_state",
]
