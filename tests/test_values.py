# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for changing field values after creation."""

import pytest
from conftest import RecordingRegenerator, new_store, reopen
from pikepdf import Name

from pdfformkit.annotations import create_line_annotation, get_appearance
from pdfformkit.exceptions import (
    InternalFailureError,
    InvalidArgumentError,
    NotSupportedAnnotationTypeError,
)
from pdfformkit.forms import (
    FIELD_FLAG_EDIT,
    FIELD_FLAG_MULTI_SELECT,
    FieldDescriptor,
    FieldType,
    FormEnvironment,
    create_widget,
    field_value,
    find_field,
    is_checked,
    set_button_state,
    set_checked,
    set_field_value,
)
from pdfformkit.geometry import Point, Rect
from pdfformkit.regeneration import RegenerationPolicy

RECT = Rect(72, 700, 272, 720)
COLORS = ("Red", "Green", "Blue")


def _create(store, session, name, field_type, rect=RECT, **kwargs):
    return create_widget(
        store, 0, session, FieldDescriptor(name, field_type, rect, **kwargs)
    )


def _radio(store, session, x):
    return _create(
        store, session, "Gender", FieldType.RADIO_BUTTON, Rect(x, 600, x + 12, 612)
    )


def _text(store, session, **kwargs):
    return _create(store, session, "Name", FieldType.TEXT, **kwargs)


def _list(store, session):
    return _create(store, session, "Colors", FieldType.LIST_BOX, options=COLORS)


def _checkbox(store, session, name="Agree"):
    return _create(store, session, name, FieldType.CHECKBOX, Rect(72, 500, 84, 512))


def _as(store, handle):
    return store.resolve(handle.annotation).AS


# =========================================================================
# Text and choice values
# =========================================================================


class TestSetTextValue:
    """set_field_value() on text fields."""

    def test_value_and_appearance(self, store, form_session) -> None:
        handle = _text(store, form_session, default_value="Ada")
        set_field_value(store, handle.field, "Grace")

        assert field_value(store, handle.field) == "Grace"
        content = get_appearance(store, handle.annotation)
        assert "(Grace) Tj" in content
        assert "Ada" not in content

    def test_empty_value_clears_text(self, store, form_session) -> None:
        handle = _text(store, form_session, default_value="Ada")
        set_field_value(store, handle.field, "")

        assert field_value(store, handle.field) == ""
        assert "BT" not in get_appearance(store, handle.annotation).split("\n")

    def test_max_length(self, store, form_session) -> None:
        handle = _create(
            store,
            form_session,
            "Code",
            FieldType.TEXT,
            max_length=3,
            default_value="ab",
        )
        with pytest.raises(InvalidArgumentError):
            set_field_value(store, handle.field, "abcd")
        assert field_value(store, handle.field) == "ab"

    def test_failed_appearance_keeps_value(
        self, store, form_session, monkeypatch
    ) -> None:
        handle = _text(store, form_session, default_value="Ada")
        before = get_appearance(store, handle.annotation)

        def fail(*args, **kwargs):
            raise InternalFailureError("appearance failed")

        monkeypatch.setattr("pdfformkit.forms.values.build_text_appearance", fail)
        with pytest.raises(InternalFailureError):
            set_field_value(store, handle.field, "Grace")
        assert field_value(store, handle.field) == "Ada"
        assert get_appearance(store, handle.annotation) == before

    def test_stale_handle(self, store, form_session) -> None:
        handle = _create(store, form_session, "Name", FieldType.TEXT)
        store.remove_annotation(handle.annotation)
        with pytest.raises(InternalFailureError):
            set_field_value(store, handle.field, "x")

    def test_automatic_regeneration(self) -> None:
        regenerator = RecordingRegenerator()
        store = new_store(regenerator=regenerator)
        session = FormEnvironment().init_session(store)
        handle = _create(store, session, "Name", FieldType.TEXT)
        store.set_regeneration_policy(0, RegenerationPolicy.AUTOMATIC_ON_EVERY_CHANGE)

        set_field_value(store, handle.field, "x")
        assert len(regenerator.calls) == 1


class TestSetChoiceValue:
    """set_field_value() on combo and list boxes."""

    def test_combo_option(self, store, form_session) -> None:
        handle = _create(
            store, form_session, "Color", FieldType.COMBO_BOX, options=COLORS
        )
        set_field_value(store, handle.field, "Green")
        assert field_value(store, handle.field) == "Green"

    def test_combo_rejects_unknown(self, store, form_session) -> None:
        handle = _create(
            store,
            form_session,
            "Color",
            FieldType.COMBO_BOX,
            options=COLORS,
            default_value="Red",
        )
        with pytest.raises(InvalidArgumentError):
            set_field_value(store, handle.field, "Purple")
        assert field_value(store, handle.field) == "Red"

    def test_editable_combo_accepts_text(self, store, form_session) -> None:
        handle = _create(
            store,
            form_session,
            "Color",
            FieldType.COMBO_BOX,
            options=COLORS,
            extra_flags=FIELD_FLAG_EDIT,
        )
        set_field_value(store, handle.field, "Purple")
        assert field_value(store, handle.field) == "Purple"

    def test_multi_select_list(self, store, form_session) -> None:
        handle = _create(
            store,
            form_session,
            "Colors",
            FieldType.LIST_BOX,
            options=COLORS,
            extra_flags=FIELD_FLAG_MULTI_SELECT,
        )
        set_field_value(store, handle.field, ["Blue", "Red"])

        assert field_value(store, handle.field) == ["Blue", "Red"]
        assert [int(i) for i in store.resolve(handle.field).I] == [0, 2]

    def test_single_select_rejects_many(self, store, form_session) -> None:
        handle = _list(store, form_session)
        with pytest.raises(InvalidArgumentError):
            set_field_value(store, handle.field, ["Blue", "Red"])

    def test_empty_sequence_rejected(self, store, form_session) -> None:
        handle = _list(store, form_session)
        with pytest.raises(InvalidArgumentError):
            set_field_value(store, handle.field, [])

    @pytest.mark.parametrize(
        "field_type",
        [FieldType.CHECKBOX, FieldType.SIGNATURE],
        ids=["checkbox", "signature"],
    )
    def test_other_types_rejected(self, store, form_session, field_type) -> None:
        handle = _create(store, form_session, "F", field_type, Rect(0, 0, 12, 12))
        with pytest.raises(InvalidArgumentError):
            set_field_value(store, handle.field, "x")


# =========================================================================
# Checkboxes and radio buttons
# =========================================================================


class TestSetCheckedRadio:
    """Radio groups keep exactly one widget selected."""

    def test_select_switches_siblings(self, store, form_session) -> None:
        male = _radio(store, form_session, 72)
        female = _radio(store, form_session, 100)

        set_checked(store, male.annotation)
        assert field_value(store, female.field) == "Choice1"
        assert _as(store, male) == Name("/Choice1")
        assert _as(store, female) == Name.Off

        set_checked(store, female.annotation)
        assert field_value(store, female.field) == "Choice2"
        assert _as(store, male) == Name.Off
        assert _as(store, female) == Name("/Choice2")
        assert not is_checked(store, male.annotation)
        assert is_checked(store, female.annotation)

    def test_clearing_selected_radio_rejected(self, store, form_session) -> None:
        male = _radio(store, form_session, 72)
        _radio(store, form_session, 100)
        set_checked(store, male.annotation)

        with pytest.raises(InvalidArgumentError):
            set_checked(store, male.annotation, False)
        assert is_checked(store, male.annotation)

    def test_single_radio(self, store, form_session) -> None:
        only = _radio(store, form_session, 72)
        set_checked(store, only.annotation)
        assert field_value(store, only.field) == "Choice1"
        assert _as(store, only) == Name("/Choice1")

    def test_survives_save(self, store, form_session) -> None:
        _radio(store, form_session, 72)
        female = _radio(store, form_session, 100)
        set_checked(store, female.annotation)

        reopened = reopen(store)
        field = find_field(reopened, "Gender")
        assert field_value(reopened, field) == "Choice2"


class TestSetCheckedCheckbox:
    """Checkbox toggling."""

    def test_check_and_clear(self, store, form_session) -> None:
        box = _checkbox(store, form_session)

        set_checked(store, box.annotation)
        assert field_value(store, box.field) == "Yes"
        assert _as(store, box) == Name.Yes
        assert is_checked(store, box.annotation)

        set_checked(store, box.annotation, False)
        assert field_value(store, box.field) == "Off"
        assert _as(store, box) == Name.Off
        assert not is_checked(store, box.annotation)

    def test_clear_unselected_keeps_value(self, store, form_session) -> None:
        box = _checkbox(store, form_session)
        set_checked(store, box.annotation, False)
        assert field_value(store, box.field) is None
        assert _as(store, box) == Name.Off

    def test_text_widget_rejected(self, store, form_session) -> None:
        text = _create(store, form_session, "Name", FieldType.TEXT)
        with pytest.raises(InvalidArgumentError):
            set_checked(store, text.annotation)

    def test_markup_annotation_rejected(self, store) -> None:
        line = create_line_annotation(store, 0, Point(0, 0), Point(10, 10))
        with pytest.raises(NotSupportedAnnotationTypeError):
            set_checked(store, line)


class TestSetButtonState:
    """Selecting button widgets by state name."""

    def test_select_radio_by_state(self, store, form_session) -> None:
        _radio(store, form_session, 72)
        female = _radio(store, form_session, 100)
        set_button_state(store, female.field, "Choice2")
        assert is_checked(store, female.annotation)

    def test_off_clears_checkbox(self, store, form_session) -> None:
        box = _checkbox(store, form_session)
        set_checked(store, box.annotation)
        set_button_state(store, box.field, "Off")
        assert not is_checked(store, box.annotation)

    def test_unknown_state(self, store, form_session) -> None:
        male = _radio(store, form_session, 72)
        with pytest.raises(InvalidArgumentError):
            set_button_state(store, male.field, "Choice9")
