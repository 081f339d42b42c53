from datetime import date, datetime, timezone

from erp_console.app.ui.listing_view import (
    EMPTY_VALUE,
    ColumnDef,
    is_sensitive,
    normalize_value,
    render_row,
    sanitize_row,
)


def test_normalize_value_handles_empty_status_and_booleans() -> None:
    assert normalize_value(None) == EMPTY_VALUE
    assert normalize_value("   ") == EMPTY_VALUE
    assert normalize_value("paid") == "PAID"
    assert normalize_value(" Vendor ") == "Vendor"
    assert normalize_value(True) == "ACTIVE"
    assert normalize_value(False) == "INACTIVE"
    assert normalize_value(date(2024, 3, 5)) == "2024-03-05"
    assert normalize_value(12.5) == "12.5"


def test_normalize_value_renders_datetimes_in_local_time() -> None:
    moment = datetime(2024, 3, 5, 10, 0, tzinfo=timezone.utc)

    assert normalize_value(moment) == moment.astimezone().strftime("%Y-%m-%d %H:%M:%S %z")


def test_render_row_prefers_column_formatter() -> None:
    columns = [ColumnDef("name", "Name"), ColumnDef("amount", "Amount", align="right", format=lambda value: f"${value}")]

    assert render_row({"name": "Al", "amount": 3}, columns) == {"name": "Al", "amount": "$3"}


def test_sanitize_row_masks_sensitive_columns() -> None:
    row = {"email": "a@b.c", "access_token": "secret-value", "password_hint": "x"}
    columns = [ColumnDef("email", "Email"), ColumnDef("access_token", "Token"), ColumnDef("password_hint", "Hint")]

    assert is_sensitive("API_TOKEN") is True
    assert sanitize_row(row, columns) == {
        "email": "a@b.c",
        "access_token": EMPTY_VALUE,
        "password_hint": EMPTY_VALUE,
    }
