from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from erp_console.app.ui.listing_view import ColumnDef

Record = dict[str, Any]

EQUALS = "equals"
CONTAINS = "contains"
STARTS_WITH = "startsWith"
ENDS_WITH = "endsWith"
GREATER_THAN = "greaterThan"
LESS_THAN = "lessThan"


@dataclass(frozen=True)
class FilterPredicate:
    field: str
    operator: str
    value: Any = None


def stringify(value: Any) -> str | None:
    """Text form used by search and the text operators; None stays None."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def to_number(value: Any) -> float:
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    if isinstance(value, datetime):
        return value.timestamp()
    if isinstance(value, date):
        return datetime.combine(value, time()).timestamp()
    if isinstance(value, str) and value.strip():
        try:
            return float(value.strip())
        except ValueError:
            return math.nan
    return math.nan


def strict_equals(left: Any, right: Any) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if _is_number(left) and _is_number(right):
        return left == right
    return type(left) is type(right) and left == right


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _text_test(test: Callable[[str, str], bool]) -> Callable[[Any, Any], bool]:
    def _operator(value: Any, expected: Any) -> bool:
        text = stringify(value)
        if text is None:
            return False
        return test(text.lower(), (stringify(expected) or "").lower())

    return _operator


def _numeric_test(test: Callable[[float, float], bool]) -> Callable[[Any, Any], bool]:
    def _operator(value: Any, expected: Any) -> bool:
        return test(to_number(value), to_number(expected))

    return _operator


def _as_members(expected: Any) -> list[Any]:
    if isinstance(expected, (str, bytes)) or not isinstance(expected, Iterable):
        return [expected]
    return list(expected)


def _between(value: Any, expected: Any) -> bool:
    bounds = _as_members(expected)
    if len(bounds) != 2:
        return False
    number = to_number(value)
    return to_number(bounds[0]) <= number <= to_number(bounds[1])


def _in(value: Any, expected: Any) -> bool:
    return any(strict_equals(value, member) for member in _as_members(expected))


def _is_empty(value: Any, _expected: Any) -> bool:
    text = stringify(value)
    return text is None or not text.strip()


OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    EQUALS: strict_equals,
    "notEquals": lambda value, expected: not strict_equals(value, expected),
    CONTAINS: _text_test(lambda text, needle: needle in text),
    STARTS_WITH: _text_test(lambda text, needle: text.startswith(needle)),
    ENDS_WITH: _text_test(lambda text, needle: text.endswith(needle)),
    GREATER_THAN: _numeric_test(lambda left, right: left > right),
    LESS_THAN: _numeric_test(lambda left, right: left < right),
    "greaterThanOrEqual": _numeric_test(lambda left, right: left >= right),
    "lessThanOrEqual": _numeric_test(lambda left, right: left <= right),
    "between": _between,
    "in": _in,
    "notIn": lambda value, expected: not _in(value, expected),
    "isEmpty": _is_empty,
    "isNotEmpty": lambda value, expected: not _is_empty(value, expected),
}


def evaluate_predicate(row: Record, predicate: FilterPredicate) -> bool:
    operator = OPERATORS.get(predicate.operator)
    if operator is None:
        # Unknown operators never exclude a row.
        return True
    return operator(row.get(predicate.field), predicate.value)


def apply_filters(rows: Iterable[Record], predicates: Iterable[FilterPredicate]) -> list[Record]:
    active = list(predicates)
    return [row for row in rows if all(evaluate_predicate(row, predicate) for predicate in active)]


def matches_search(row: Record, term: str, columns: Iterable[ColumnDef]) -> bool:
    if not term:
        return True
    needle = term.lower()
    for column in columns:
        if not column.filterable:
            continue
        text = stringify(row.get(column.id))
        if text is not None and needle in text.lower():
            return True
    return False


def apply_search(rows: Iterable[Record], term: str, columns: Iterable[ColumnDef]) -> list[Record]:
    searchable = list(columns)
    return [row for row in rows if matches_search(row, term, searchable)]
