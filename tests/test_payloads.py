import pytest

from fieldform.payloads import (
    FORM_PAYLOAD_SCHEMA,
    FORM_UPDATE_SCHEMA,
    SUBMISSION_PAYLOAD_SCHEMA,
    field_definition_errors,
    payload_errors,
)


class TestFormPayload:
    def test_valid(self, signup_form):
        assert payload_errors(FORM_PAYLOAD_SCHEMA, signup_form) == []

    def test_name_required(self):
        errors = payload_errors(FORM_PAYLOAD_SCHEMA, {"fields": []})
        assert errors == ["'name' is a required property"]

    def test_update_allows_partial(self):
        assert payload_errors(FORM_UPDATE_SCHEMA, {"status": "archived"}) == []

    def test_bad_status_and_field_location(self):
        errors = payload_errors(
            FORM_PAYLOAD_SCHEMA,
            {"name": "x", "status": "live", "fields": [{"label": "A", "type": "text", "selectionLimit": -1}]},
        )
        assert any(error.startswith("status:") for error in errors)
        assert any(error.startswith("fields.0.selectionLimit:") for error in errors)


class TestFieldDefinitions:
    def test_duplicate_ids(self):
        errors = field_definition_errors([{"id": "a"}, {"id": "a"}, {"id": ""}, {}])
        assert errors == ["fields.2: duplicate field id (a)"]

    def test_min_above_max(self):
        assert field_definition_errors([{"minValue": 5, "maxValue": "1"}]) == [
            "fields.1: minValue is greater than maxValue"
        ]
        assert field_definition_errors([{"minValue": "x", "maxValue": 1}]) == [
            "fields.1: minValue/maxValue must be finite numbers"
        ]

    @pytest.mark.parametrize("bound", ["inf", "-Infinity", "nan", float("inf")])
    def test_non_finite_bounds(self, bound):
        assert field_definition_errors([{"minValue": bound}, {"maxValue": bound}]) == [
            "fields.1: minValue/maxValue must be finite numbers",
            "fields.2: minValue/maxValue must be finite numbers",
        ]


class TestSubmissionPayload:
    def test_values_required(self):
        assert payload_errors(SUBMISSION_PAYLOAD_SCHEMA, {}) == ["'values' is a required property"]

    def test_rating_range(self):
        errors = payload_errors(SUBMISSION_PAYLOAD_SCHEMA, {"values": {}, "rating": 6})
        assert len(errors) == 1
        assert errors[0].startswith("rating:")
        assert payload_errors(SUBMISSION_PAYLOAD_SCHEMA, {"values": {"a": ["x"]}, "rating": None}) == []
