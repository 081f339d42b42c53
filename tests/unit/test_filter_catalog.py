from erp_console.app.ui.filter_catalog import (
    DEFAULT_OPERATORS,
    FilterField,
    OperatorOption,
    SelectOption,
    build_predicate,
    describe_filter,
    operators_for,
)
from erp_console.app.ui.filters import FilterPredicate

FIELDS = [
    FilterField("name", "Name"),
    FilterField("age", "Age", type="number"),
    FilterField(
        "status",
        "Status",
        type="select",
        options=(SelectOption("Active", "active"), SelectOption("On leave", "on_leave")),
    ),
    FilterField("code", "Code", operators=(OperatorOption("equals", "Matches"),)),
]


def test_operators_default_per_type_and_allow_overrides() -> None:
    assert operators_for("age", FIELDS) == DEFAULT_OPERATORS["number"]
    assert [item.value for item in operators_for("status", FIELDS)] == ["equals", "notEquals", "in", "notIn"]
    assert operators_for("code", FIELDS) == (OperatorOption("equals", "Matches"),)
    assert operators_for("unknown", FIELDS) == ()


def test_empty_operators_do_not_require_a_value() -> None:
    text_ops = {item.value: item for item in DEFAULT_OPERATORS["text"]}

    assert text_ops["isEmpty"].value_required is False
    assert text_ops["contains"].value_required is True


def test_build_predicate_requires_field_and_operator() -> None:
    assert build_predicate(None, "equals", 1) is None
    assert build_predicate("age", "", 1) is None
    assert build_predicate("age", "greaterThan", 26) == FilterPredicate("age", "greaterThan", 26)


def test_describe_filter_uses_labels() -> None:
    assert describe_filter(FilterPredicate("age", "greaterThan", 26), FIELDS) == "Age Greater than 26"
    assert describe_filter(FilterPredicate("status", "equals", "on_leave"), FIELDS) == "Status Is On leave"
    assert describe_filter(FilterPredicate("name", "isEmpty"), FIELDS) == "Name Is empty"
    assert describe_filter(FilterPredicate("other", "weird", "x"), FIELDS) == "other weird x"
