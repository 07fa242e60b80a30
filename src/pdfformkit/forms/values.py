# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Reading and changing field values after creation.

Text values rebuild the normal appearance of every widget of the field.
Choice values are checked against /Opt. Checkboxes and radio buttons
only switch /AS between the states their widgets already carry.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import pikepdf
from pikepdf import Array, Dictionary, Name, String

from ..exceptions import (
    InternalFailureError,
    InvalidArgumentError,
    NotSupportedAnnotationTypeError,
    PDFFormKitError,
)
from ..geometry import Rect
from ..store import AnnotationHandle, DocumentStore, FieldHandle, same_object
from ..utils import resolve_indirect as _resolve
from .acroform import DEFAULT_ACROFORM_DA, get_acroform
from .button_appearance import CHECKBOX_ON_STATE, OFF_STATE, on_state_names
from .registry import (
    FIELD_FLAG_COMBO,
    FIELD_FLAG_EDIT,
    FIELD_FLAG_MULTI_SELECT,
    FIELD_FLAG_NO_TOGGLE_TO_OFF,
    FIELD_FLAG_PUSHBUTTON,
    FIELD_FLAG_RADIO,
    FIELD_FLAG_RADIOS_IN_UNISON,
)
from .text_appearance import build_text_appearance
from .undo import UndoLog
from .widgets import field_widgets

logger = logging.getLogger(__name__)

# Guards against /Parent cycles in damaged files
_MAX_PARENT_DEPTH = 32

_STORE_ERRORS = (pikepdf.PdfError, KeyError, TypeError, ValueError, AttributeError)


def _inherited(node: Dictionary, key: str):
    """Looks up an inheritable field attribute along the /Parent chain."""
    name = Name(key)
    for _ in range(_MAX_PARENT_DEPTH):
        if not isinstance(node, Dictionary):
            return None
        value = node.get(name)
        if value is not None:
            return _resolve(value)
        node = _resolve(node.get(Name.Parent))
    return None


def _flags(node: Dictionary) -> int:
    ff = _inherited(node, "/Ff")
    return int(ff) if ff is not None else 0


def _owning_field(widget: Dictionary) -> Dictionary:
    """The field a widget belongs to; a merged widget is its own field."""
    if Name.T in widget or Name.Parent not in widget:
        return widget
    return _resolve(widget.Parent)


def _option_values(field: Dictionary) -> list[str]:
    """Export values listed in /Opt."""
    opt = _inherited(field, "/Opt")
    if not isinstance(opt, Array):
        return []
    values = []
    for item in opt:
        item = _resolve(item)
        if isinstance(item, Array) and len(item) > 0:
            item = item[0]
        values.append(str(item))
    return values


def field_value(store: DocumentStore, field: FieldHandle) -> str | list[str] | None:
    """Returns the current value (/V) of a field.

    Button states are returned without the leading slash. Multi-select
    list boxes may return a list.
    """
    value = _inherited(store.resolve(field), "/V")
    if value is None:
        return None
    if isinstance(value, Name):
        return str(value)[1:]
    if isinstance(value, Array):
        return [str(_resolve(v)) for v in value]
    return str(value)


def _checked_text_value(field: Dictionary, value) -> str:
    if not isinstance(value, str):
        raise InvalidArgumentError("Text field value must be a string")
    max_len = _inherited(field, "/MaxLen")
    if max_len is not None and len(value) > int(max_len):
        raise InvalidArgumentError(
            f"Value has {len(value)} characters, field allows {int(max_len)}"
        )
    return value


def _checked_choice_values(field: Dictionary, flags: int, value) -> list[str]:
    values = [value] if isinstance(value, str) else list(value)
    if not values:
        raise InvalidArgumentError("At least one choice value is required")
    if len(values) > 1 and not flags & FIELD_FLAG_MULTI_SELECT:
        raise InvalidArgumentError("Field does not allow multiple selections")
    if flags & FIELD_FLAG_COMBO and flags & FIELD_FLAG_EDIT:
        return values

    options = _option_values(field)
    for item in values:
        if item not in options:
            raise InvalidArgumentError(f"'{item}' is not an option of this field")
    return values


def _text_widget_appearance(store: DocumentStore, widget: Dictionary, value: str):
    da = _inherited(widget, "/DA")
    if da is None:
        acroform = get_acroform(store)
        da = acroform.get(Name.DA) if acroform is not None else None
    quadding = _inherited(widget, "/Q")
    return build_text_appearance(
        store,
        Rect.from_array(widget.Rect),
        value,
        str(da) if da is not None else DEFAULT_ACROFORM_DA,
        int(quadding) if quadding is not None else 0,
        _flags(widget),
    )


def set_field_value(
    store: DocumentStore,
    field: FieldHandle,
    value: str | Sequence[str],
) -> None:
    """Changes the value of a text or choice field.

    Text fields get /V and a rebuilt /AP /N on each widget. Choice
    fields accept option export values only, unless they are editable
    combo boxes; multi-select list boxes also accept a sequence and get
    /I updated.

    Args:
        store: Document owning the field.
        field: Field whose value changes.
        value: New value.

    Raises:
        InvalidArgumentError: If the field is a button or signature, or
            the value does not fit the field.
        InternalFailureError: If the handle is stale or a write fails.
            The field is left unchanged.
    """
    with store.lease():
        root = store.resolve(field)
        field_type = _inherited(root, "/FT")
        flags = _flags(root)
        if field_type == Name.Tx:
            text = _checked_text_value(root, value)
            new_value = String(text)
        elif field_type == Name.Ch:
            values = _checked_choice_values(root, flags, value)
            if len(values) == 1:
                new_value = String(values[0])
            else:
                new_value = Array([String(v) for v in values])
        elif field_type == Name.Btn:
            raise InvalidArgumentError("Use set_checked() for button fields")
        else:
            raise InvalidArgumentError(f"Field type {field_type} has no settable value")

        widgets = field_widgets(store, field)
        undo = UndoLog()
        try:
            undo.set(root, "/V", new_value)
            if field_type == Name.Tx:
                for handle in widgets:
                    widget = store.resolve(handle)
                    appearance = _text_widget_appearance(store, widget, text)
                    undo.set(widget, "/AP", Dictionary(N=appearance))
            elif flags & FIELD_FLAG_MULTI_SELECT:
                options = _option_values(root)
                indices = sorted(options.index(v) for v in values if v in options)
                undo.set(root, "/I", Array(indices))
            else:
                undo.delete(root, "/I")
        except PDFFormKitError:
            undo.rollback()
            raise
        except _STORE_ERRORS as e:
            undo.rollback()
            raise InternalFailureError(f"Cannot set field value: {e}") from e
        pages = {store.page_index_of(handle) for handle in widgets} - {None}

    logger.debug("Set value of field %s", root.get(Name.T))
    for page_index in sorted(pages):
        store.notify_changed(page_index)


def _button_parts(store: DocumentStore, handle: AnnotationHandle):
    """Returns (widget, field, flags, on_state) of a checkbox or radio."""
    widget = store.resolve(handle)
    if widget.get(Name.Subtype) != Name.Widget:
        raise NotSupportedAnnotationTypeError(
            f"Expected a widget annotation, got {widget.get(Name.Subtype)}"
        )
    field = _owning_field(widget)
    flags = _flags(field)
    if _inherited(field, "/FT") != Name.Btn or flags & FIELD_FLAG_PUSHBUTTON:
        raise InvalidArgumentError("Only checkboxes and radio buttons can be checked")
    states = on_state_names(widget)
    on_state = states[0] if states else CHECKBOX_ON_STATE
    return widget, field, flags, on_state


def is_checked(store: DocumentStore, widget: AnnotationHandle) -> bool:
    """True if the field value selects this widget's on-state."""
    widget_dict, field, _, on_state = _button_parts(store, widget)
    value = _inherited(field, "/V")
    if value is None:
        state = widget_dict.get(Name.AS)
        return state is not None and str(state) == "/" + on_state
    return str(value) == "/" + on_state


def set_checked(
    store: DocumentStore, widget: AnnotationHandle, checked: bool = True
) -> None:
    """Checks or clears a checkbox or radio button widget.

    Checking sets the field value to the widget's on-state. Every other
    widget of the field shows /Off, except widgets with the same
    on-state in a checkbox group or a radios-in-unison group. Clearing
    a selected widget sets the value to /Off.

    Raises:
        NotSupportedAnnotationTypeError: If the annotation is not a
            widget.
        InvalidArgumentError: If the widget is not a checkbox or radio,
            or clearing would leave a radio group that requires a
            selection without one.
        InternalFailureError: If the handle is stale or a write fails.
    """
    with store.lease():
        widget_dict, field, flags, on_state = _button_parts(store, widget)
        radio = bool(flags & FIELD_FLAG_RADIO)
        selected = is_checked(store, widget)
        if not checked and selected and radio and flags & FIELD_FLAG_NO_TOGGLE_TO_OFF:
            raise InvalidArgumentError("Radio group requires one selected button")

        undo = UndoLog()
        try:
            if checked:
                undo.set(field, "/V", Name("/" + on_state))
                follow = not radio or flags & FIELD_FLAG_RADIOS_IN_UNISON
                for handle in field_widgets(store, store.register(field)):
                    sibling = store.resolve(handle)
                    shows_on = same_object(sibling, widget_dict) or (
                        follow and on_state in on_state_names(sibling)
                    )
                    state = on_state if shows_on else OFF_STATE
                    undo.set(sibling, "/AS", Name("/" + state))
            elif selected:
                undo.set(field, "/V", Name("/" + OFF_STATE))
                for handle in field_widgets(store, store.register(field)):
                    undo.set(store.resolve(handle), "/AS", Name("/" + OFF_STATE))
            else:
                undo.set(widget_dict, "/AS", Name("/" + OFF_STATE))
        except _STORE_ERRORS as e:
            undo.rollback()
            raise InternalFailureError(f"Cannot change button state: {e}") from e
        page_index = store.page_index_of(widget)

    logger.debug("Set %s to %s", on_state, "on" if checked else "off")
    if page_index is not None:
        store.notify_changed(page_index)


def set_button_state(store: DocumentStore, field: FieldHandle, state: str) -> None:
    """Selects the widget of a button field whose on-state is ``state``.

    ``Off`` clears the field's current selection.

    Raises:
        InvalidArgumentError: If no widget of the field has that state.
    """
    with store.lease():
        widgets = field_widgets(store, field)
        if state == OFF_STATE:
            for handle in widgets:
                if is_checked(store, handle):
                    set_checked(store, handle, False)
            return
        for handle in widgets:
            if state in on_state_names(store.resolve(handle)):
                set_checked(store, handle, True)
                return
    raise InvalidArgumentError(f"No widget of this field has state '{state}'")
