import pytest

from fieldform.defaults import initial_values, resolve_default
from fieldform.values import FlagValue, ListValue, ScalarValue


class TestResolveDefault:
    @pytest.mark.parametrize(
        "low, high, expected",
        [(0, 9, "4"), (0, 10, "5"), (None, None, "5"), (3, None, "6"), (-5, 0, "-3")],
    )
    def test_range_midpoint_floors(self, make_field, low, high, expected):
        field = make_field(type="range", minValue=low, maxValue=high)
        assert resolve_default(field) == ScalarValue(expected)

    def test_checkbox_default_literal(self, make_field):
        assert resolve_default(make_field(type="checkbox", defaultValue="true")) == FlagValue(True)
        assert resolve_default(make_field(type="checkbox", defaultValue="yes")) == FlagValue(False)
        assert resolve_default(make_field(type="checkbox")) == FlagValue(False)

    def test_default_value_used_verbatim(self, make_field):
        field = make_field(type="range", defaultValue="7", minValue=0, maxValue=10)
        assert resolve_default(field) == ScalarValue("7")

    def test_multi_select_collects_defaults_in_order(self, make_field):
        field = make_field(
            type="select",
            allowMultiple=True,
            options=[
                {"label": "C", "isDefault": True},
                {"label": "A"},
                {"label": "B", "isDefault": True},
            ],
        )
        assert resolve_default(field) == ListValue(("C", "B"))

    def test_checkbox_group_without_defaults_is_empty_list(self, make_field):
        field = make_field(type="checkbox-group", options=[{"label": "A"}])
        assert resolve_default(field) == ListValue()

    def test_first_default_option_wins(self, make_field):
        field = make_field(
            type="radio",
            options=[{"label": "No"}, {"label": "Yes", "isDefault": True}, {"label": "Maybe", "isDefault": True}],
        )
        assert resolve_default(field) == ScalarValue("Yes")

    def test_no_default(self, make_field):
        assert resolve_default(make_field(type="select", options=[{"label": "A"}])) is None
        assert resolve_default(make_field(type="text")) is None

    def test_initial_values_skip_absent(self, make_field):
        fields = [make_field(id="a"), make_field(id="b", type="checkbox")]
        assert initial_values(fields) == {"b": FlagValue(False)}

    @pytest.mark.parametrize("bound", ["inf", "-inf", "nan", float("nan")])
    def test_non_finite_bounds_fall_back(self, make_field, bound):
        field = make_field(type="range", minValue=bound, maxValue=bound)
        assert (field.min_value, field.max_value) == (None, None)
        assert resolve_default(field) == ScalarValue("5")
