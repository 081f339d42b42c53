from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from erp_console.app.ui.filters import FilterPredicate

FieldType = Literal["text", "number", "date", "select", "boolean"]


@dataclass(frozen=True)
class OperatorOption:
    value: str
    label: str
    value_required: bool = True


@dataclass(frozen=True)
class SelectOption:
    label: str
    value: Any


@dataclass(frozen=True)
class FilterField:
    id: str
    label: str
    type: FieldType = "text"
    options: tuple[SelectOption, ...] = ()
    operators: tuple[OperatorOption, ...] = field(default_factory=tuple)


DEFAULT_OPERATORS: dict[str, tuple[OperatorOption, ...]] = {
    "text": (
        OperatorOption("contains", "Contains"),
        OperatorOption("equals", "Equals"),
        OperatorOption("startsWith", "Starts with"),
        OperatorOption("endsWith", "Ends with"),
        OperatorOption("isEmpty", "Is empty", value_required=False),
        OperatorOption("isNotEmpty", "Is not empty", value_required=False),
    ),
    "number": (
        OperatorOption("equals", "Equals"),
        OperatorOption("greaterThan", "Greater than"),
        OperatorOption("lessThan", "Less than"),
        OperatorOption("greaterThanOrEqual", "Greater than or equal"),
        OperatorOption("lessThanOrEqual", "Less than or equal"),
        OperatorOption("between", "Between"),
    ),
    "date": (
        OperatorOption("equals", "On"),
        OperatorOption("greaterThan", "After"),
        OperatorOption("lessThan", "Before"),
        OperatorOption("between", "Between"),
    ),
    "select": (
        OperatorOption("equals", "Is"),
        OperatorOption("notEquals", "Is not"),
        OperatorOption("in", "Is one of"),
        OperatorOption("notIn", "Is not one of"),
    ),
    "boolean": (OperatorOption("equals", "Is"),),
}


def find_field(field_id: str, fields: list[FilterField]) -> FilterField | None:
    return next((item for item in fields if item.id == field_id), None)


def operators_for(field_id: str, fields: list[FilterField]) -> tuple[OperatorOption, ...]:
    filter_field = find_field(field_id, fields)
    if filter_field is None:
        return ()
    return filter_field.operators or DEFAULT_OPERATORS.get(filter_field.type, ())


def build_predicate(field_id: str | None, operator: str | None, value: Any = None) -> FilterPredicate | None:
    if not field_id or not operator:
        return None
    return FilterPredicate(field=field_id, operator=operator, value=value)


def describe_filter(predicate: FilterPredicate, fields: list[FilterField]) -> str:
    filter_field = find_field(predicate.field, fields)
    operator = next((item for item in operators_for(predicate.field, fields) if item.value == predicate.operator), None)

    value_label = predicate.value
    if filter_field is not None and filter_field.type == "select":
        option = next((item for item in filter_field.options if item.value == predicate.value), None)
        if option is not None:
            value_label = option.label

    field_label = filter_field.label if filter_field else predicate.field
    operator_label = operator.label if operator else predicate.operator
    value_text = "" if value_label in (None, "") else str(value_label)
    return f"{field_label} {operator_label} {value_text}".strip()
