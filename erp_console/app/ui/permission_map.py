from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum

from erp_console.clients.backend_sdk.models import UserProfile

ADMIN_PERMISSION = "admin"
WILDCARD_RESOURCE = "*"


class ModuleType(str, Enum):
    DASHBOARD = "dashboard"
    HRMS = "hrms"
    INVOICE = "invoice"
    QUIZ = "quiz"
    JOBS = "jobs"
    CRUD = "crud"


DEFAULT_MODULE_PERMISSIONS: dict[ModuleType, tuple[str, ...]] = {
    ModuleType.DASHBOARD: ("dashboard_read",),
    ModuleType.HRMS: ("hrms_read", "employee_read"),
    ModuleType.INVOICE: ("invoice_read",),
    ModuleType.QUIZ: ("quiz_read", "training_read"),
    ModuleType.JOBS: ("jobs_read", "recruitment_read"),
    ModuleType.CRUD: ("crud_read", "admin"),
}


def has_permission(user: UserProfile | None, permission: str, *, admin_permission: str = ADMIN_PERMISSION) -> bool:
    if user is None:
        return False
    return any(
        item.name == permission or item.name == admin_permission or item.resource == WILDCARD_RESOURCE
        for item in user.permissions
    )


def has_permissions(
    user: UserProfile | None,
    permissions: Iterable[str],
    *,
    require_all: bool = False,
    admin_permission: str = ADMIN_PERMISSION,
) -> bool:
    required = list(permissions)
    if not required:
        return True
    check = all if require_all else any
    return check(has_permission(user, permission, admin_permission=admin_permission) for permission in required)


class ModuleAccessPolicy:
    """Module -> permission table, supplied by the caller.

    A module missing from the table is only reachable by admin users.
    """

    def __init__(
        self,
        table: Mapping[ModuleType, Iterable[str]],
        *,
        admin_permission: str = ADMIN_PERMISSION,
    ) -> None:
        self._table = {ModuleType(module): tuple(permissions) for module, permissions in table.items()}
        self.admin_permission = admin_permission

    @classmethod
    def default(cls) -> "ModuleAccessPolicy":
        return cls(DEFAULT_MODULE_PERMISSIONS)

    def permissions_for(self, module: ModuleType | str) -> tuple[str, ...]:
        return self._table.get(ModuleType(module), ())

    def is_admin(self, user: UserProfile | None) -> bool:
        if user is None:
            return False
        return any(item.name == self.admin_permission for item in user.permissions)

    def has_permission(self, user: UserProfile | None, permission: str) -> bool:
        return has_permission(user, permission, admin_permission=self.admin_permission)

    def has_permissions(
        self, user: UserProfile | None, permissions: Iterable[str], *, require_all: bool = False
    ) -> bool:
        return has_permissions(user, permissions, require_all=require_all, admin_permission=self.admin_permission)

    def has_module_access(self, user: UserProfile | None, module: ModuleType | str) -> bool:
        if user is None:
            return False
        if self.is_admin(user):
            return True
        return any(self.has_permission(user, permission) for permission in self.permissions_for(module))

    def accessible_modules(self, user: UserProfile | None) -> list[ModuleType]:
        return [module for module in ModuleType if self.has_module_access(user, module)]


__all__ = [
    "ADMIN_PERMISSION",
    "DEFAULT_MODULE_PERMISSIONS",
    "ModuleAccessPolicy",
    "ModuleType",
    "has_permission",
    "has_permissions",
]
