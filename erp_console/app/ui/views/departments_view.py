from __future__ import annotations

from typing import Any, Iterable

from erp_console.app.error_presenter import build_error_payload, print_error_banner
from erp_console.app.state import AuthSession
from erp_console.app.ui.components.permission_gate import PermissionGate
from erp_console.app.ui.listing_view import EMPTY_VALUE, ColumnDef
from erp_console.app.ui.permission_map import ModuleType
from erp_console.app.ui.table_state import TableConfig, TableEngine
from erp_console.clients.backend_sdk.employees_client import DepartmentsClient
from erp_console.clients.backend_sdk.errors import ApiError
from erp_console.clients.backend_sdk.models import Department

DEPARTMENT_WRITE_PERMISSION = "department_write"
DELETE_HINT = "Make sure there are no employees assigned to this department."


def format_headcount(value: Any) -> str:
    count = value or 0
    return f"{count} employee" if count == 1 else f"{count} employees"


def format_budget(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return EMPTY_VALUE
    return f"${value:,.0f}"


DEPARTMENT_COLUMNS: tuple[ColumnDef, ...] = (
    ColumnDef("name", "Department"),
    ColumnDef("description", "Description"),
    ColumnDef("employee_count", "Headcount", align="right", filterable=False, format=format_headcount),
    ColumnDef("manager_name", "Manager"),
    ColumnDef("budget", "Budget", align="right", filterable=False, format=format_budget),
)


def build_department_table(departments: Iterable[Department], config: TableConfig | None = None) -> TableEngine:
    table = TableEngine(
        [department.model_dump(mode="json") for department in departments],
        DEPARTMENT_COLUMNS,
        row_key="id",
        config=config,
    )
    table.set_sort("name")
    return table


class DepartmentsView:
    def __init__(self, client: DepartmentsClient, session: AuthSession, config: TableConfig | None = None) -> None:
        self.client = client
        self.session = session
        self.config = config
        self.table: TableEngine | None = None

    def load(self) -> TableEngine:
        departments = self.client.list_departments()
        if self.table is None:
            self.table = build_department_table(departments, self.config)
        else:
            self.table.set_records(department.model_dump(mode="json") for department in departments)
        return self.table

    def render(self) -> None:
        gate = PermissionGate.require_module(self.session, ModuleType.HRMS)
        if not gate.allowed:
            print(f"[denied] {gate.message or gate.outcome.value}")
            return
        print("[loading] loading departments...")
        try:
            table = self.load()
        except ApiError as error:
            print_error_banner(build_error_payload(error))
            return

        rows = table.render_rows()
        if not rows:
            print("[empty] No departments found")
            return
        print(f"[ready] -- Departments -- total={table.view().total_filtered_count}")
        for row in rows:
            print(" | ".join(row[column.id] for column in table.columns))

    def delete(self, department_id: int) -> bool:
        gate = PermissionGate.check(self.session, DEPARTMENT_WRITE_PERMISSION)
        if not gate.allowed:
            print(f"[denied] {gate.message or gate.outcome.value}")
            return False
        try:
            self.client.delete_department(department_id)
        except ApiError as error:
            print_error_banner(build_error_payload(error))
            print(f"[hint] {DELETE_HINT}")
            return False
        try:
            self.load()
        except ApiError as error:
            print_error_banner(build_error_payload(error))
        return True
