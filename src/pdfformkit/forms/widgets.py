# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Widget and form field creation.

create_widget allocates one merged field/widget dictionary, links it
into /AcroForm /Fields and the page's /Annots, and attaches a default
appearance. Checkboxes and radio buttons that share a name with an
existing top-level field of the same kind join that field as kids; a
merged single-widget field is split into a parent field and its first
kid when the second widget arrives.

Every change to objects that already existed is recorded in an undo
log, so a failed creation leaves the document as it was.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

import pikepdf
from pikepdf import Array, Dictionary, Name, String

from ..exceptions import (
    InternalFailureError,
    InvalidArgumentError,
    PDFFormKitError,
    ResourceUnavailableError,
)
from ..geometry import Rect
from ..store import (
    AnnotationHandle,
    DocumentStore,
    FieldHandle,
    same_object,
)
from ..utils import require_finite
from ..utils import resolve_indirect as _resolve
from .acroform import acroform_fields, ensure_acroform
from .button_appearance import (
    CHECKBOX_ON_STATE,
    OFF_STATE,
    build_checkbox_states,
    build_radio_states,
    on_state_names,
    radio_on_state,
)
from .registry import (
    ANNOT_FLAG_PRINT,
    FIELD_FLAG_RADIO,
    FieldType,
    FieldTypeInfo,
    default_appearance_for,
    describe,
)
from .session import FormSession
from .text_appearance import build_text_appearance
from .undo import UndoLog

logger = logging.getLogger(__name__)

_GROUPABLE = frozenset({FieldType.CHECKBOX, FieldType.RADIO_BUTTON})
_BUTTONS = _GROUPABLE | {FieldType.PUSH_BUTTON}

# Keys that live on the parent once a field has more than one widget
_FIELD_KEYS = ("/FT", "/T", "/Ff", "/V", "/DV")

_STORE_ERRORS = (pikepdf.PdfError, KeyError, TypeError, ValueError, AttributeError)


@dataclass(frozen=True)
class FieldDescriptor:
    """Everything needed to create one widget.

    Attributes:
        name: Partial field name (/T).
        field_type: Kind of field; UNKNOWN is rejected.
        rect: Widget rectangle in page space. Not normalized.
        options: Choice entries (/Opt) for combo and list boxes.
        max_length: Maximum text length (/MaxLen).
        quadding: Text alignment (/Q): 0 left, 1 centered, 2 right.
        default_appearance: /DA string. Defaults to the type's template.
        default_value: Initial value, written as /V and /DV. For buttons
            this is a state name.
        extra_flags: Field flags OR'd with the type's own flags.
    """

    name: str
    field_type: FieldType
    rect: Rect
    options: tuple[str, ...] = ()
    max_length: int | None = None
    quadding: int | None = None
    default_appearance: str | None = None
    default_value: str | None = None
    extra_flags: int = 0


@dataclass(frozen=True)
class WidgetHandle:
    """Handles of a created widget and of the field that owns it.

    For a single-widget field both handles name the same merged
    dictionary.
    """

    annotation: AnnotationHandle
    field: FieldHandle


def _validate_descriptor(descriptor: FieldDescriptor) -> None:
    """Rejects descriptors that cannot produce a valid field.

    Raises:
        InvalidArgumentError: On an empty or NUL-containing name, a
            non-finite or degenerate rectangle, an out-of-range
            max_length or quadding, or an empty button value.
    """
    name = descriptor.name
    if not isinstance(name, str) or not name:
        raise InvalidArgumentError("Field name must be a non-empty string")
    if "\x00" in name:
        raise InvalidArgumentError("Field name must not contain NUL characters")

    rect = descriptor.rect
    require_finite(rect.left, rect.bottom, rect.right, rect.top)
    if rect.width <= 0 or rect.height <= 0:
        raise InvalidArgumentError(f"Degenerate field rectangle: {rect}")

    if descriptor.max_length is not None and descriptor.max_length < 0:
        raise InvalidArgumentError(f"Negative max_length: {descriptor.max_length}")
    if descriptor.quadding is not None and descriptor.quadding not in (0, 1, 2):
        raise InvalidArgumentError(f"Quadding must be 0, 1 or 2: {descriptor.quadding}")
    if descriptor.default_value == "" and descriptor.field_type in _BUTTONS:
        raise InvalidArgumentError("Button value must be a non-empty state name")


def _check_session(store: DocumentStore, form_session: FormSession | None) -> None:
    if form_session is None or not form_session.active:
        raise ResourceUnavailableError("No active form session for this document")
    if not form_session.belongs_to(store):
        raise ResourceUnavailableError("Form session belongs to another document")


def _build_field_dict(
    descriptor: FieldDescriptor, info: FieldTypeInfo, page_obj: Dictionary
) -> Dictionary:
    """Builds the merged field/widget dictionary (not yet indirect)."""
    rect = descriptor.rect
    widget = Dictionary(
        Type=Name.Annot,
        Subtype=Name(info.annotation_subtype),
        FT=Name(info.pdf_type),
        T=String(descriptor.name),
        Rect=Array(rect.as_list()),
        F=ANNOT_FLAG_PRINT,
        P=page_obj,
        Ff=info.subtype_flags | descriptor.extra_flags,
    )

    da = descriptor.default_appearance
    if da is None:
        da = default_appearance_for(descriptor.field_type, rect)
    if da is not None:
        widget[Name.DA] = String(da)
    if descriptor.max_length is not None:
        widget[Name.MaxLen] = descriptor.max_length
    if descriptor.quadding is not None:
        widget[Name.Q] = descriptor.quadding
    if descriptor.default_value is not None:
        value = _field_value(descriptor)
        widget[Name.V] = value
        widget[Name.DV] = value
    if descriptor.options:
        widget[Name.Opt] = Array([String(opt) for opt in descriptor.options])
    return widget


def _field_value(descriptor: FieldDescriptor) -> Any:
    if descriptor.field_type in _BUTTONS:
        return Name("/" + descriptor.default_value)
    return String(descriptor.default_value)


def _find_group(fields: Array, descriptor: FieldDescriptor, flags: int):
    """Returns (index, field) of a top-level field this widget joins."""
    radio = bool(flags & FIELD_FLAG_RADIO)
    for index, candidate in enumerate(fields):
        field = _resolve(candidate)
        if not isinstance(field, Dictionary):
            continue
        if str(field.get(Name.T, "")) != descriptor.name:
            continue
        if field.get(Name.FT) != Name.Btn:
            continue
        ff = field.get(Name.Ff)
        field_radio = bool(int(ff) & FIELD_FLAG_RADIO) if ff is not None else False
        if field_radio != radio:
            continue
        return index, field
    return None


def _split_merged_field(
    store: DocumentStore, fields: Array, index: int, merged: Dictionary, undo: UndoLog
) -> Dictionary:
    """Turns a merged field/widget into a parent field with one kid."""
    parent = store.pdf.make_indirect(Dictionary(Kids=Array([merged])))
    for key in _FIELD_KEYS:
        if key in merged:
            parent[Name(key)] = merged[Name(key)]
            undo.delete(merged, key)
    undo.set(merged, "/Parent", parent)
    undo.replace(fields, index, parent)
    logger.debug("Split field '%s' into parent and kid", parent.get(Name.T))
    return parent


def _attach_to_group(
    store: DocumentStore,
    fields: Array,
    group: tuple[int, Dictionary],
    widget: Dictionary,
    undo: UndoLog,
) -> Dictionary:
    """Makes ``widget`` a kid of the grouped field and returns the parent."""
    index, parent = group
    if Name.Kids not in parent:
        parent = _split_merged_field(store, fields, index, parent, undo)

    for key in _FIELD_KEYS:
        if key in widget:
            if key in ("/V", "/DV") and key not in parent:
                undo.set(parent, key, widget[Name(key)])
            del widget[Name(key)]
    widget[Name.Parent] = parent
    undo.append(parent, "/Kids", widget)
    return parent


def _next_radio_state(field: Dictionary, widget: Dictionary) -> str:
    """Smallest Choice<n> on-state not used by another widget of ``field``."""
    used = set()
    kids = field.get(Name.Kids)
    for kid in _resolve(kids) if kids is not None else ():
        kid = _resolve(kid)
        if not isinstance(kid, Dictionary) or same_object(kid, widget):
            continue
        used.update(on_state_names(kid))
    position = 1
    while radio_on_state(position) in used:
        position += 1
    return radio_on_state(position)


def _attach_button_states(
    store: DocumentStore,
    widget: Dictionary,
    field: Dictionary,
    descriptor: FieldDescriptor,
) -> None:
    if descriptor.field_type is FieldType.RADIO_BUTTON:
        on_state = _next_radio_state(field, widget)
        states = build_radio_states(store, descriptor.rect, on_state)
    else:
        on_state = CHECKBOX_ON_STATE
        states = build_checkbox_states(store, descriptor.rect)
    widget[Name.AP] = Dictionary(N=states)

    value = field.get(Name.V)
    selected = value is not None and str(value) == "/" + on_state
    widget[Name.AS] = Name("/" + (on_state if selected else OFF_STATE))


def create_widget(
    store: DocumentStore,
    page_index: int,
    form_session: FormSession | None,
    descriptor: FieldDescriptor,
) -> WidgetHandle:
    """Creates a form field widget on a page.

    Args:
        store: Document to modify.
        page_index: Zero-based index of the page receiving the widget.
        form_session: Active form session of ``store``.
        descriptor: The field to create.

    Returns:
        Handles of the new widget annotation and its field.

    Raises:
        InvalidArgumentError: If the field type is not creatable, the
            descriptor is malformed, or the page index is out of range.
        ResourceUnavailableError: If ``form_session`` is not active for
            ``store``.
        InternalFailureError: If the store rejects an allocation or
            write. The document is left unchanged.
    """
    info = describe(descriptor.field_type)
    if not info.allowed:
        raise InvalidArgumentError(
            f"Field type {descriptor.field_type.name} cannot be created"
        )
    _check_session(store, form_session)
    _validate_descriptor(descriptor)

    with store.lease():
        page = store.page(page_index)
        acroform = ensure_acroform(store)
        fields = acroform_fields(store)

        undo = UndoLog()
        annotation_handle = None
        try:
            widget_dict = _build_field_dict(descriptor, info, page.obj)
            annotation_handle = store.allocate(widget_dict)
            widget = store.resolve(annotation_handle)

            field = widget
            group = None
            if descriptor.field_type in _GROUPABLE:
                group = _find_group(fields, descriptor, int(widget.Ff))
            if group is not None:
                field = _attach_to_group(store, fields, group, widget, undo)
            else:
                undo.append(acroform, "/Fields", widget)
            undo.append(page.obj, "/Annots", widget)

            if descriptor.field_type is FieldType.TEXT:
                widget[Name.AP] = Dictionary(
                    N=build_text_appearance(
                        store,
                        descriptor.rect,
                        descriptor.default_value or "",
                        str(widget.get(Name.DA, "")),
                        descriptor.quadding or 0,
                        int(widget.Ff),
                    )
                )
            elif descriptor.field_type in _GROUPABLE:
                _attach_button_states(store, widget, field, descriptor)

            field_handle = store.register(field)
        except PDFFormKitError:
            undo.rollback()
            if annotation_handle is not None and store.is_valid(annotation_handle):
                store.release(annotation_handle)
            raise
        except _STORE_ERRORS as e:
            undo.rollback()
            if annotation_handle is not None and store.is_valid(annotation_handle):
                store.release(annotation_handle)
            raise InternalFailureError(f"Widget creation failed: {e}") from e

    logger.info(
        "Created %s field '%s' on page %d",
        descriptor.field_type.name.lower(),
        descriptor.name,
        page_index,
    )
    store.notify_changed(page_index)
    return WidgetHandle(annotation=annotation_handle, field=field_handle)


def _iter_fields(
    fields, prefix: str, visited: set
) -> Iterator[tuple[str, Dictionary]]:
    """Yields (fully qualified name, field) for every named field."""
    for item in fields:
        field = _resolve(item)
        if not isinstance(field, Dictionary):
            continue
        objgen = field.objgen
        if objgen != (0, 0):
            if objgen in visited:
                continue
            visited.add(objgen)
        partial = field.get(Name.T)
        name = prefix
        if partial is not None:
            name = f"{prefix}.{partial}" if prefix else str(partial)
            yield name, field
        kids = field.get(Name.Kids)
        if kids is not None:
            yield from _iter_fields(_resolve(kids), name, visited)


def find_field(store: DocumentStore, name: str) -> FieldHandle | None:
    """Looks up a field by its fully qualified name.

    Returns:
        Handle of the field, or None when no field has that name.
    """
    for qualified, field in _iter_fields(acroform_fields(store), "", set()):
        if qualified == name:
            return store.register(field)
    return None


def field_widgets(store: DocumentStore, field: FieldHandle) -> list[AnnotationHandle]:
    """Returns the widget annotations that belong to a field."""
    root = store.resolve(field)
    kids = root.get(Name.Kids)
    if kids is None:
        return [field] if root.get(Name.Subtype) == Name.Widget else []

    widgets = []
    for kid in _resolve(kids):
        kid = _resolve(kid)
        if not isinstance(kid, Dictionary) or same_object(kid, root):
            continue
        if Name.T in kid:
            # Named kids are child fields, not widgets of this field
            continue
        if kid.get(Name.Subtype) == Name.Widget:
            widgets.append(store.register(kid))
    return widgets
