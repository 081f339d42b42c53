from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel


class AuthTokens(BaseModel):
    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    expires_in: int | None = None
    user_id: str | None = None


class Permission(BaseModel):
    name: str
    resource: str = ""
    action: str = ""
    id: str | None = None


class UserProfile(BaseModel):
    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: str | None = None
    permissions: list[Permission] = Field(default_factory=list)
    is_active: bool = True

    @property
    def display_name(self) -> str:
        full_name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return full_name or self.email or self.id

    @classmethod
    def from_auth_user(cls, payload: dict[str, Any]) -> "UserProfile":
        """Build a profile from an auth-service user object.

        Permissions and the active flag live in ``app_metadata`` (writable only
        by the service role); names live in ``user_metadata``.
        """
        app_metadata = payload.get("app_metadata") or {}
        user_metadata = payload.get("user_metadata") or {}
        raw_permissions = app_metadata.get("permissions") or []
        permissions = [
            Permission(name=entry) if isinstance(entry, str) else Permission.model_validate(entry)
            for entry in raw_permissions
        ]
        return cls(
            id=str(payload["id"]),
            email=payload.get("email"),
            first_name=user_metadata.get("first_name"),
            last_name=user_metadata.get("last_name"),
            role=app_metadata.get("role") or user_metadata.get("role"),
            permissions=permissions,
            is_active=bool(app_metadata.get("is_active", True)),
        )


class SessionData(BaseModel):
    access_token: str
    refresh_token: str | None = None
    user: UserProfile | None = None


class InvoiceCreate(BaseModel):
    vendor: str
    product: str
    amount: float
    date: str

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> float | None:
        if value is None or isinstance(value, bool):
            return value
        return float(value)


class Invoice(InvoiceCreate):
    id: int
    amount: float | None = None
    action: str | None = None


class EmployeeStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    TERMINATED = "TERMINATED"
    ON_LEAVE = "ON_LEAVE"


class _CamelModel(BaseModel):
    """The employee service speaks camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EmployeeCreate(_CamelModel):
    employee_id: str
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    address: str | None = None
    department_id: int
    position: str
    start_date: str
    end_date: str | None = None
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    salary: float | None = None
    manager_id: int | None = None


class Employee(EmployeeCreate):
    id: int
    department_id: int | None = None
    department_name: str | None = None
    manager_name: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @computed_field
    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class EmployeePage(_CamelModel):
    content: list[Employee] = Field(default_factory=list)
    total_elements: int = 0
    total_pages: int = 0
    size: int = 10
    number: int = 0


class DepartmentCreate(_CamelModel):
    name: str
    description: str | None = None
    manager_id: int | None = None
    budget: float | None = None


class Department(DepartmentCreate):
    id: int
    manager_name: str | None = None
    employee_count: int = 0
    created_at: str | None = None
    updated_at: str | None = None
