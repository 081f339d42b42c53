from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Literal

EMPTY_VALUE = "—"
SENSITIVE_KEYS = {"token", "refresh_token", "secret", "password", "access_token"}
STATUS_VALUES = {"active", "inactive", "terminated", "on_leave", "pending", "paid", "overdue"}

Alignment = Literal["left", "center", "right"]


@dataclass(frozen=True)
class ColumnDef:
    id: str
    label: str
    sortable: bool = True
    filterable: bool = True
    width: int | None = None
    align: Alignment = "left"
    format: Callable[[Any], str] | None = None


def render_cell(column: ColumnDef, row: dict[str, Any]) -> str:
    value = row.get(column.id)
    if column.format is not None:
        return column.format(value)
    return normalize_value(value)


def render_row(row: dict[str, Any], columns: list[ColumnDef]) -> dict[str, str]:
    return {column.id: render_cell(column, row) for column in columns}


def normalize_value(value: Any) -> str:
    if value is None:
        return EMPTY_VALUE
    if isinstance(value, str):
        clean = value.strip()
        if not clean:
            return EMPTY_VALUE
        lower = clean.lower()
        if lower in STATUS_VALUES:
            return lower.upper()
        return clean
    if isinstance(value, bool):
        return "ACTIVE" if value else "INACTIVE"
    if isinstance(value, datetime):
        return value.astimezone().strftime("%Y-%m-%d %H:%M:%S %z")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def format_date(value: Any) -> str:
    if value is None or value == "":
        return EMPTY_VALUE
    if isinstance(value, (date, datetime)):
        return value.strftime("%b %d, %Y")
    try:
        return datetime.fromisoformat(str(value)).strftime("%b %d, %Y")
    except ValueError:
        return str(value)


def is_sensitive(key: str) -> bool:
    return any(token in key.lower() for token in SENSITIVE_KEYS)


def sanitize_row(row: dict[str, Any], columns: list[ColumnDef]) -> dict[str, str]:
    return {column.id: EMPTY_VALUE if is_sensitive(column.id) else render_cell(column, row) for column in columns}
