from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable

from erp_console.app.error_presenter import build_error_payload, print_error_banner
from erp_console.app.export.csv_exporter import export_current_view
from erp_console.app.state import AuthSession
from erp_console.app.ui.components.permission_gate import PermissionGate
from erp_console.app.ui.filter_catalog import FilterField, SelectOption
from erp_console.app.ui.filters import FilterPredicate
from erp_console.app.ui.listing_view import EMPTY_VALUE, ColumnDef, format_date
from erp_console.app.ui.permission_map import ModuleType
from erp_console.app.ui.table_state import TableConfig, TableEngine
from erp_console.clients.backend_sdk.employees_client import EmployeesClient
from erp_console.clients.backend_sdk.errors import ApiError
from erp_console.clients.backend_sdk.models import Employee, EmployeeStatus

EMPLOYEE_WRITE_PERMISSION = "employee_write"

STATUS_COLORS = {
    EmployeeStatus.ACTIVE.value: "success",
    EmployeeStatus.INACTIVE.value: "warning",
    EmployeeStatus.TERMINATED.value: "error",
    EmployeeStatus.ON_LEAVE.value: "info",
}


def employee_status_label(status: Any) -> str:
    if not status:
        return EMPTY_VALUE
    return str(getattr(status, "value", status)).replace("_", " ")


def employee_status_color(status: Any) -> str:
    return STATUS_COLORS.get(str(getattr(status, "value", status) or "").upper(), "default")


EMPLOYEE_COLUMNS: tuple[ColumnDef, ...] = (
    ColumnDef("employee_id", "Employee ID"),
    ColumnDef("full_name", "Name"),
    ColumnDef("email", "Email"),
    ColumnDef("department_name", "Department"),
    ColumnDef("position", "Position"),
    ColumnDef("status", "Status", format=employee_status_label),
    ColumnDef("start_date", "Start Date", format=format_date),
)

EMPLOYEE_FILTER_FIELDS: tuple[FilterField, ...] = (
    FilterField("employee_id", "Employee ID"),
    FilterField("full_name", "Name"),
    FilterField("department_name", "Department"),
    FilterField("position", "Position"),
    FilterField(
        "status",
        "Status",
        type="select",
        options=tuple(SelectOption(employee_status_label(status), status.value) for status in EmployeeStatus),
    ),
    FilterField("start_date", "Start Date", type="date"),
)


def build_employee_table(employees: Iterable[Employee], config: TableConfig | None = None) -> TableEngine:
    table = TableEngine(
        [employee.model_dump(mode="json") for employee in employees],
        EMPLOYEE_COLUMNS,
        row_key="id",
        config=config,
    )
    table.set_sort("last_name")
    return table


class EmployeesView:
    """Employee directory on top of the shared table engine.

    Rows are fetched once per ``load`` and searched, filtered, sorted and paged
    locally. Mutations go to the employee service and are followed by a reload,
    which keeps the current selection for employees that still exist.
    """

    def __init__(self, client: EmployeesClient, session: AuthSession, config: TableConfig | None = None) -> None:
        self.client = client
        self.session = session
        self.config = config
        self.table: TableEngine | None = None

    def load(self) -> TableEngine:
        employees = self.client.list_employees()
        if self.table is None:
            self.table = build_employee_table(employees, self.config)
        else:
            self.table.set_records(employee.model_dump(mode="json") for employee in employees)
        return self.table

    def filter_status(self, status: EmployeeStatus | str | None) -> None:
        """Replace any status filter; ``None`` shows every status."""
        if self.table is None:
            return
        kept = [predicate for predicate in self.table.filters if predicate.field != "status"]
        self.table.clear_filters()
        for predicate in kept:
            self.table.add_filter(predicate)
        if status:
            self.table.add_filter(FilterPredicate("status", "equals", EmployeeStatus(status).value))

    def render(self) -> None:
        gate = PermissionGate.require_module(self.session, ModuleType.HRMS)
        if not gate.allowed:
            print(f"[denied] {gate.message or gate.outcome.value}")
            return
        print("[loading] loading employees...")
        try:
            table = self.load()
        except ApiError as error:
            print_error_banner(build_error_payload(error))
            return

        if not table.records:
            print("[empty] No employees found")
            return

        view = table.view()
        active = sum(1 for row in table.records if row.get("status") == EmployeeStatus.ACTIVE.value)
        print(f"[ready] -- Employees -- total={len(table.records)} active={active}")
        for row in table.render_rows():
            print(" | ".join(row[column.id] for column in table.columns))
        print(f"page {view.page + 1}/{view.total_pages} ({view.total_filtered_count} rows)")

    def _can_write(self) -> bool:
        gate = PermissionGate.check(self.session, EMPLOYEE_WRITE_PERMISSION)
        if not gate.allowed:
            print(f"[denied] {gate.message or gate.outcome.value}")
        return gate.allowed

    def delete(self, employee_id: int) -> bool:
        if not self._can_write():
            return False
        try:
            self.client.delete_employee(employee_id)
            self.load()
        except ApiError as error:
            print_error_banner(build_error_payload(error))
            return False
        return True

    def set_status(self, employee_id: int, status: EmployeeStatus | str) -> Employee | None:
        if not self._can_write():
            return None
        try:
            employee = self.client.update_status(employee_id, status)
            self.load()
        except ApiError as error:
            print_error_banner(build_error_payload(error))
            return None
        return employee

    def export(self, output_dir: str = "out/exports") -> Path | None:
        if self.table is None:
            print("[empty] Load employees before exporting.")
            return None
        path = export_current_view(
            module="employees",
            table=self.table,
            output_dir=output_dir,
            filter_fields=EMPLOYEE_FILTER_FIELDS,
        )
        print(f"[export] {path}")
        return path
