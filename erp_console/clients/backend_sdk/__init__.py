from erp_console.clients.backend_sdk.auth_client import AuthClient
from erp_console.clients.backend_sdk.auth_store import AuthStore
from erp_console.clients.backend_sdk.employees_client import DepartmentsClient, EmployeesClient
from erp_console.clients.backend_sdk.errors import ApiError
from erp_console.clients.backend_sdk.http_client import HttpClient
from erp_console.clients.backend_sdk.invoices_client import InvoicesClient
from erp_console.clients.backend_sdk.models import (
    AuthTokens,
    Department,
    DepartmentCreate,
    Employee,
    EmployeeCreate,
    EmployeePage,
    EmployeeStatus,
    Invoice,
    InvoiceCreate,
    Permission,
    SessionData,
    UserProfile,
)

__all__ = [
    "ApiError",
    "AuthClient",
    "AuthStore",
    "AuthTokens",
    "Department",
    "DepartmentCreate",
    "DepartmentsClient",
    "Employee",
    "EmployeeCreate",
    "EmployeePage",
    "EmployeeStatus",
    "EmployeesClient",
    "HttpClient",
    "Invoice",
    "InvoiceCreate",
    "InvoicesClient",
    "Permission",
    "SessionData",
    "UserProfile",
]
