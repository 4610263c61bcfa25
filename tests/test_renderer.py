from starlette.datastructures import FormData

from fieldform.renderer import (
    control_for,
    display_value,
    render_control,
    value_from_form,
    values_from_form,
)
from fieldform.values import FlagValue, ListValue, ScalarValue


class TestControlFor:
    def test_unknown_type_is_text_input(self, make_field):
        field = make_field(type="signature")
        assert control_for(field) == "input"
        assert render_control(field, None)["input_type"] == "text"

    def test_select_variants(self, make_field):
        assert control_for(make_field(type="select")) == "select"
        assert control_for(make_field(type="select", allowMultiple=True)) == "multi-select"
        assert control_for(make_field(type="checkbox-group")) == "checkbox-group"


class TestRenderControl:
    def test_options_keep_order_and_selection(self, make_field):
        field = make_field(id="c", type="checkbox-group", options=["Z", "A", "M"], selectionLimit=2)
        control = render_control(field, ListValue(("M",)), "Too many")
        assert [opt["label"] for opt in control["options"]] == ["Z", "A", "M"]
        assert [opt["selected"] for opt in control["options"]] == [False, False, True]
        assert control["options"][0]["id"] == "field-c-0"
        assert control["selection_limit"] == 2
        assert control["error"] == "Too many"

    def test_select_without_options(self, make_field):
        control = render_control(make_field(type="select", options="[broken"), ScalarValue(""))
        assert control["control"] == "select"
        assert control["options"] == []

    def test_range_bounds_and_value(self, make_field):
        field = make_field(type="range", minValue=1, maxValue=5)
        control = render_control(field, ScalarValue("3"))
        assert (control["min"], control["max"], control["step"], control["value"]) == ("1", "5", "1", "3")
        assert render_control(field, None)["value"] == "1"

    def test_number_bounds(self, make_field):
        control = render_control(make_field(type="number", maxValue=2.5), ScalarValue("1"))
        assert control["min"] is None
        assert control["max"] == "2.5"

    def test_checkbox_checked(self, make_field):
        control = render_control(make_field(type="checkbox"), FlagValue(True))
        assert control["checked"] is True
        assert control["value"] == ""


class TestValueFromForm:
    def test_control_output(self, make_field):
        fields = [
            make_field(id="name"),
            make_field(id="agree", type="checkbox"),
            make_field(id="tags", type="checkbox-group", options=["a", "b"]),
        ]
        data = FormData([("name", "Ada"), ("tags", "a"), ("tags", "b"), ("tags", "")])
        assert values_from_form(fields, data) == {
            "name": ScalarValue("Ada"),
            "agree": FlagValue(False),
            "tags": ListValue(("a", "b")),
        }

    def test_absent_scalar_is_none(self, make_field):
        assert value_from_form(make_field(), FormData([])) is None


class TestDisplayValue:
    def test_list_is_joined(self, make_field):
        field = make_field(type="checkbox-group")
        assert display_value(field, '["A","B"]') == "A, B"

    def test_flag(self, make_field):
        assert display_value(make_field(type="checkbox"), "Yes") == "Yes"
        assert display_value(make_field(type="checkbox"), None) == "No"

    def test_scalar(self, make_field):
        assert display_value(make_field(), "42") == "42"
