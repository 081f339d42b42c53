from __future__ import annotations

import logging

from erp_console.clients.backend_sdk.errors import ApiError
from erp_console.clients.backend_sdk.http_client import HttpClient
from erp_console.clients.backend_sdk.models import (
    Department,
    DepartmentCreate,
    Employee,
    EmployeeCreate,
    EmployeePage,
    EmployeeStatus,
)

logger = logging.getLogger(__name__)

EMPLOYEES_PATH = "/api/employees"
DEPARTMENTS_PATH = "/api/departments"


def _page_params(page: int, size: int, sort_by: str, sort_dir: str) -> dict[str, object]:
    return {"page": max(0, page), "size": max(1, size), "sortBy": sort_by, "sortDir": sort_dir}


class EmployeesClient:
    def __init__(self, http_client: HttpClient, access_token: str | None = None) -> None:
        self.http_client = http_client
        self.access_token = access_token

    def list_employees(self) -> list[Employee]:
        response = self.http_client.request("GET", EMPLOYEES_PATH, token=self.access_token)
        rows = response if isinstance(response, list) else []
        logger.info("employees_list_success", extra={"count": len(rows)})
        return [Employee.model_validate(row) for row in rows]

    def list_page(
        self, page: int = 0, size: int = 10, sort_by: str = "lastName", sort_dir: str = "asc"
    ) -> EmployeePage:
        response = self.http_client.request(
            "GET",
            f"{EMPLOYEES_PATH}/paginated",
            token=self.access_token,
            params=_page_params(page, size, sort_by, sort_dir),
        )
        return EmployeePage.model_validate(response or {})

    def search_employees(
        self, search_term: str, page: int = 0, size: int = 10, sort_by: str = "lastName", sort_dir: str = "asc"
    ) -> EmployeePage:
        params = {"searchTerm": search_term, **_page_params(page, size, sort_by, sort_dir)}
        response = self.http_client.request("GET", f"{EMPLOYEES_PATH}/search", token=self.access_token, params=params)
        return EmployeePage.model_validate(response or {})

    def get_employee(self, employee_id: int) -> Employee:
        response = self.http_client.request("GET", f"{EMPLOYEES_PATH}/{employee_id}", token=self.access_token)
        return Employee.model_validate(response)

    def create_employee(self, payload: EmployeeCreate) -> Employee:
        response = self.http_client.request(
            "POST",
            EMPLOYEES_PATH,
            token=self.access_token,
            json=payload.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        if not isinstance(response, dict):
            raise ApiError(code="EMPTY_INSERT_RESULT", message="Employee was not returned after insert")
        employee = Employee.model_validate(response)
        logger.info("employee_create_success", extra={"employee_id": employee.id})
        return employee

    def update_employee(self, employee_id: int, payload: EmployeeCreate) -> Employee:
        response = self.http_client.request(
            "PUT",
            f"{EMPLOYEES_PATH}/{employee_id}",
            token=self.access_token,
            json=payload.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        logger.info("employee_update_success", extra={"employee_id": employee_id})
        return Employee.model_validate(response)

    def update_status(self, employee_id: int, status: EmployeeStatus | str) -> Employee:
        value = EmployeeStatus(status).value
        response = self.http_client.request(
            "PATCH",
            f"{EMPLOYEES_PATH}/{employee_id}/status",
            token=self.access_token,
            params={"status": value},
        )
        logger.info("employee_status_success", extra={"employee_id": employee_id, "status": value})
        return Employee.model_validate(response)

    def delete_employee(self, employee_id: int) -> None:
        self.http_client.request("DELETE", f"{EMPLOYEES_PATH}/{employee_id}", token=self.access_token)
        logger.info("employee_delete_success", extra={"employee_id": employee_id})


class DepartmentsClient:
    def __init__(self, http_client: HttpClient, access_token: str | None = None) -> None:
        self.http_client = http_client
        self.access_token = access_token

    def list_departments(self) -> list[Department]:
        response = self.http_client.request("GET", DEPARTMENTS_PATH, token=self.access_token)
        rows = response if isinstance(response, list) else []
        logger.info("departments_list_success", extra={"count": len(rows)})
        return [Department.model_validate(row) for row in rows]

    def search_departments(self, search_term: str) -> list[Department]:
        response = self.http_client.request(
            "GET",
            f"{DEPARTMENTS_PATH}/search",
            token=self.access_token,
            params={"searchTerm": search_term},
        )
        rows = response if isinstance(response, list) else []
        return [Department.model_validate(row) for row in rows]

    def create_department(self, payload: DepartmentCreate) -> Department:
        response = self.http_client.request(
            "POST",
            DEPARTMENTS_PATH,
            token=self.access_token,
            json=payload.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        if not isinstance(response, dict):
            raise ApiError(code="EMPTY_INSERT_RESULT", message="Department was not returned after insert")
        return Department.model_validate(response)

    def delete_department(self, department_id: int) -> None:
        self.http_client.request("DELETE", f"{DEPARTMENTS_PATH}/{department_id}", token=self.access_token)
        logger.info("department_delete_success", extra={"department_id": department_id})
