import logging

from fieldform.fields import fields_from_payload
from fieldform.submissions import (
    check_submission,
    encode_values,
    review_response,
    typed_values_from_client,
)
from fieldform.values import FlagValue, ListValue, ScalarValue

FIELDS = fields_from_payload(
    [
        {"id": "name", "type": "text", "label": "Name", "required": True},
        {"id": "size", "type": "select", "label": "Size", "options": ["S", "M", "L"]},
        {"id": "extras", "type": "checkbox-group", "label": "Extras", "options": ["Cheese", "Ham"]},
        {"id": "gift", "type": "checkbox", "label": "Gift wrap"},
        {"id": "qty", "type": "number", "label": "Quantity", "minValue": 1, "maxValue": 5},
    ]
)


class TestTypedValues:
    def test_shapes_follow_fields(self, caplog):
        caplog.set_level(logging.DEBUG, logger="fieldform.submissions")
        values = typed_values_from_client(
            FIELDS, {"name": "Ada", "extras": ["Ham"], "gift": True, "qty": 2, "stray": "x"}
        )
        assert values == {
            "name": ScalarValue("Ada"),
            "size": None,
            "extras": ListValue(("Ham",)),
            "gift": FlagValue(True),
            "qty": ScalarValue("2"),
        }
        assert "stray" in caplog.text


class TestCheckSubmission:
    def test_accepted_values_are_encoded(self):
        values = typed_values_from_client(
            FIELDS, {"name": "Ada", "size": "M", "extras": ["Cheese", "Ham"], "gift": False, "qty": "3"}
        )
        result = check_submission(FIELDS, values)
        assert result.ok
        assert result.wire_values == {
            "name": "Ada",
            "size": "M",
            "extras": '["Cheese","Ham"]',
            "gift": "No",
            "qty": "3",
        }

    def test_errors_block_encoding(self):
        values = typed_values_from_client(FIELDS, {"name": " ", "qty": "9", "size": "XXL"})
        result = check_submission(FIELDS, values)
        assert not result.ok
        assert result.wire_values == {}
        assert result.errors == {
            "name": "Name is required",
            "qty": "Quantity must be at most 5",
            "size": "Invalid option selected for Size",
        }

    def test_several_answers_to_single_choice(self):
        values = typed_values_from_client(FIELDS, {"name": "Ada", "size": ["S", "XL"]})
        result = check_submission(FIELDS, values)
        assert result.errors == {"size": "Invalid option selected for Size"}
        assert result.wire_values == {}

    def test_encode_values_skips_missing(self):
        assert encode_values(FIELDS, {"gift": FlagValue(True)}) == {"gift": "Yes"}


class TestReviewResponse:
    def test_display_and_revalidation(self):
        review = review_response(
            FIELDS, {"name": "Ada", "extras": '["Ham"]', "gift": "Yes", "qty": "8"}
        )
        assert review["display"] == {"name": "Ada", "extras": "Ham", "gift": "Yes", "qty": "8"}
        assert review["errors"] == {"qty": "Quantity must be at most 5"}

    def test_missing_required_answer_is_reported(self):
        assert review_response(FIELDS, {})["errors"] == {"name": "Name is required"}
