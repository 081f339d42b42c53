from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Iterable

from erp_console.app.error_presenter import build_error_payload, print_error_banner
from erp_console.app.export.csv_exporter import export_current_view
from erp_console.app.state import AuthSession
from erp_console.app.ui.components.permission_gate import PermissionGate
from erp_console.app.ui.filter_catalog import FilterField, SelectOption
from erp_console.app.ui.listing_view import EMPTY_VALUE, ColumnDef, format_date
from erp_console.app.ui.permission_map import ModuleType
from erp_console.app.ui.table_state import TableConfig, TableEngine
from erp_console.clients.backend_sdk.errors import ApiError
from erp_console.clients.backend_sdk.invoices_client import InvoicesClient
from erp_console.clients.backend_sdk.models import Invoice

CURRENCY_SYMBOL = "₹"
DEFAULT_STATUS = "Pending"

STATUS_COLORS = {"paid": "success", "pending": "warning", "overdue": "error"}


def format_currency(amount: Any) -> str:
    """en-IN grouping: the last three digits, then pairs (1,23,456.50)."""
    if amount is None or isinstance(amount, bool):
        return EMPTY_VALUE
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        return EMPTY_VALUE
    if not value.is_finite():
        return EMPTY_VALUE
    value = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, fraction = f"{abs(value):.2f}".split(".")
    head, tail = whole[:-3], whole[-3:]
    groups: list[str] = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    grouped = ",".join([*groups, tail])
    return f"{sign}{CURRENCY_SYMBOL}{grouped}.{fraction}"


def status_label(status: str | None) -> str:
    return status or DEFAULT_STATUS


def status_color(status: str | None) -> str:
    return STATUS_COLORS.get((status or "").lower(), "default")


INVOICE_COLUMNS: tuple[ColumnDef, ...] = (
    ColumnDef("vendor", "Vendor"),
    ColumnDef("product", "Product"),
    ColumnDef("amount", "Amount", align="right", format=format_currency),
    ColumnDef("date", "Date", format=format_date),
    ColumnDef("action", "Status", format=status_label),
)

INVOICE_FILTER_FIELDS: tuple[FilterField, ...] = (
    FilterField("vendor", "Vendor"),
    FilterField("product", "Product"),
    FilterField("amount", "Amount", type="number"),
    FilterField("date", "Date", type="date"),
    FilterField(
        "action",
        "Status",
        type="select",
        options=(
            SelectOption("Paid", "paid"),
            SelectOption("Pending", "pending"),
            SelectOption("Overdue", "overdue"),
        ),
    ),
)


@dataclass(frozen=True)
class InvoiceSummary:
    count: int
    total_amount: float

    @property
    def total_label(self) -> str:
        return format_currency(self.total_amount)


def summarize_invoices(invoices: Iterable[Invoice]) -> InvoiceSummary:
    items = list(invoices)
    return InvoiceSummary(count=len(items), total_amount=sum(item.amount or 0 for item in items))


def build_invoice_table(invoices: Iterable[Invoice], config: TableConfig | None = None) -> TableEngine:
    return TableEngine(
        [invoice.model_dump() for invoice in invoices],
        INVOICE_COLUMNS,
        row_key="id",
        config=config,
    )


class InvoicesView:
    def __init__(self, client: InvoicesClient, session: AuthSession, config: TableConfig | None = None) -> None:
        self.client = client
        self.session = session
        self.config = config
        self.table: TableEngine | None = None

    def load(self) -> TableEngine:
        invoices = self.client.list_invoices()
        if self.table is None:
            self.table = build_invoice_table(invoices, self.config)
        else:
            self.table.set_records(invoice.model_dump() for invoice in invoices)
        return self.table

    def render(self) -> None:
        gate = PermissionGate.require_module(self.session, ModuleType.INVOICE)
        if not gate.allowed:
            print(f"[denied] {gate.message or gate.outcome.value}")
            return
        print("[loading] loading invoices...")
        try:
            table = self.load()
        except ApiError as error:
            print_error_banner(build_error_payload(error))
            return

        summary = summarize_invoices(Invoice.model_validate(row) for row in table.records)
        if not summary.count:
            print("[empty] No invoices found")
            return

        view = table.view()
        print(f"[ready] -- Invoices -- total={summary.count} amount={summary.total_label}")
        for row in table.render_rows():
            print(" | ".join(row[column.id] for column in table.columns))
        print(f"page {view.page + 1}/{view.total_pages} ({view.total_filtered_count} rows)")

    def export(self, output_dir: str = "out/exports") -> Path | None:
        if self.table is None:
            print("[empty] Load invoices before exporting.")
            return None
        path = export_current_view(
            module=ModuleType.INVOICE.value,
            table=self.table,
            output_dir=output_dir,
            filter_fields=INVOICE_FILTER_FIELDS,
        )
        print(f"[export] {path}")
        return path
