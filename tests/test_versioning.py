import pytest

from fieldform.fields import fields_from_payload
from fieldform.versioning import (
    breaking_changes,
    create_form_snapshot,
    is_incompatible_type_change,
)


def _fields(*raw):
    return fields_from_payload(list(raw))


BASE = {"id": "q", "label": "Qty", "type": "number", "minValue": 1, "maxValue": 10}


class TestBreakingChanges:
    def test_identical_is_compatible(self):
        assert breaking_changes(_fields(BASE), _fields(BASE)) == []

    def test_adding_optional_field_is_compatible(self):
        added = {"id": "n", "label": "Note", "type": "text"}
        assert breaking_changes(_fields(BASE), _fields(BASE, added)) == []

    def test_removed_field(self):
        assert breaking_changes(_fields(BASE), _fields()) == ["Qty: field removed"]

    @pytest.mark.parametrize(
        "old, new, incompatible",
        [
            ("text", "textarea", False),
            ("number", "range", False),
            ("text", "number", True),
            ("checkbox", "checkbox-group", True),
        ],
    )
    def test_type_changes(self, old, new, incompatible):
        assert is_incompatible_type_change(old, new) is incompatible

    def test_became_required(self):
        reasons = breaking_changes(_fields(BASE), _fields({**BASE, "required": True}))
        assert reasons == ["Qty: became required"]

    def test_pattern_added_or_changed(self):
        with_pattern = {**BASE, "regexPattern": "^\\d+$"}
        assert breaking_changes(_fields(BASE), _fields(with_pattern))
        assert breaking_changes(_fields(with_pattern), _fields(BASE)) == []

    @pytest.mark.parametrize(
        "change, breaking",
        [
            ({"minValue": 2}, True),
            ({"maxValue": 9}, True),
            ({"minValue": 0, "maxValue": 20}, False),
        ],
    )
    def test_bounds(self, change, breaking):
        assert bool(breaking_changes(_fields(BASE), _fields({**BASE, **change}))) is breaking

    def test_bounds_ignored_for_text(self):
        text = {"id": "t", "label": "T", "type": "text"}
        assert breaking_changes(_fields(text), _fields({**text, "minValue": 3})) == []


def test_snapshot_holds_canonical_fields():
    snapshot = create_form_snapshot({"name": "Order", "description": "d"}, _fields(BASE))
    assert snapshot["name"] == "Order"
    assert snapshot["fields"][0]["id"] == "q"
    assert snapshot["fields"][0]["minValue"] == 1
