from __future__ import annotations

from dataclasses import dataclass

from erp_console.app.state import AuthSession
from erp_console.app.ui.permission_map import ModuleAccessPolicy, ModuleType
from erp_console.clients.backend_sdk.models import UserProfile


@dataclass(frozen=True)
class NavItem:
    id: str
    label: str
    icon: str
    path: str
    module: ModuleType
    required_permissions: tuple[str, ...] = ()
    children: tuple["NavItem", ...] = ()


def _item(id: str, label: str, icon: str, path: str, module: ModuleType, *permissions: str, children=()) -> NavItem:
    return NavItem(id, label, icon, path, module, tuple(permissions), tuple(children))


NAVIGATION: tuple[NavItem, ...] = (
    _item("dashboard", "Dashboard", "dashboard", "/dashboard", ModuleType.DASHBOARD, "dashboard_read"),
    _item(
        "hrms", "Human Resources", "people", "/hrms", ModuleType.HRMS, "hrms_read",
        children=(
            _item("employees", "Employees", "people", "/hrms/employees", ModuleType.HRMS, "employee_read"),
            _item("departments", "Departments", "business", "/hrms/departments", ModuleType.HRMS, "department_read"),
            _item("roles", "Roles & Permissions", "security", "/hrms/roles", ModuleType.HRMS, "role_read"),
        ),
    ),
    _item(
        "invoice", "Invoice Management", "receipt", "/invoice", ModuleType.INVOICE, "invoice_read",
        children=(
            _item("invoices", "All Invoices", "receipt", "/invoice/list", ModuleType.INVOICE, "invoice_read"),
            _item("create-invoice", "Create Invoice", "add", "/invoice/create", ModuleType.INVOICE, "invoice_write"),
            _item("invoice-reports", "Reports", "analytics", "/invoice/reports", ModuleType.INVOICE, "invoice_read"),
        ),
    ),
    _item(
        "training", "Training & Quizzes", "quiz", "/training", ModuleType.QUIZ, "training_read",
        children=(
            _item("quizzes", "All Quizzes", "quiz", "/training/quizzes", ModuleType.QUIZ, "quiz_read"),
            _item("training-assignments", "Assignments", "assignment", "/training/assignments", ModuleType.QUIZ, "training_read"),
            _item("training-progress", "Progress Tracking", "trending_up", "/training/progress", ModuleType.QUIZ, "training_read"),
        ),
    ),
    _item(
        "recruitment", "Recruitment", "work", "/recruitment", ModuleType.JOBS, "recruitment_read",
        children=(
            _item("job-board", "Job Board", "work", "/recruitment/jobs", ModuleType.JOBS, "jobs_read"),
            _item("applications", "Applications", "person_add", "/recruitment/applications", ModuleType.JOBS, "application_read"),
            _item("candidates", "Candidates", "people_outline", "/recruitment/candidates", ModuleType.JOBS, "candidate_read"),
        ),
    ),
    _item(
        "admin", "Administration", "storage", "/admin", ModuleType.CRUD, "admin",
        children=(
            _item("system-config", "System Configuration", "settings", "/admin/config", ModuleType.CRUD, "admin"),
            _item("data-management", "Data Management", "storage", "/admin/data", ModuleType.CRUD, "admin"),
            _item("audit-logs", "Audit Logs", "history", "/admin/logs", ModuleType.CRUD, "admin"),
        ),
    ),
)


def visible_navigation(
    user: UserProfile | None,
    policy: ModuleAccessPolicy,
    items: tuple[NavItem, ...] = NAVIGATION,
) -> list[NavItem]:
    """Items (and children) whose module the user can open; nothing else is filtered."""
    visible: list[NavItem] = []
    for item in items:
        if not policy.has_module_access(user, item.module):
            continue
        children = tuple(visible_navigation(user, policy, item.children))
        visible.append(NavItem(item.id, item.label, item.icon, item.path, item.module, item.required_permissions, children))
    return visible


def is_item_active(current_path: str, path: str) -> bool:
    return current_path == path or current_path.startswith(path + "/")


def find_item(path: str, items: tuple[NavItem, ...] = NAVIGATION) -> NavItem | None:
    for item in items:
        match = find_item(path, item.children)
        if match is not None:
            return match
        if is_item_active(path, item.path):
            return item
    return None


def resolve_route(path: str, session: AuthSession) -> tuple[bool, str]:
    item = find_item(path)
    if item is None:
        return False, f"Unknown route: {path}"
    if not session.has_module_access(item.module):
        return False, f"You don't have permission to access the {item.module.value} module."
    session.set_active_module(item.module)
    return True, ""


def render_shell(*, session: AuthSession, current_path: str = "/dashboard") -> None:
    user = session.user
    print("\n=== ERP Console ===")
    print(
        "Header | "
        f"user={user.display_name if user else 'N/A'} | "
        f"role={(user.role if user else None) or 'N/A'} | "
        f"module={session.active_module.value if session.active_module else 'N/A'}"
    )
    print("Sidebar:")
    for item in visible_navigation(user, session.policy):
        marker = "*" if is_item_active(current_path, item.path) else " "
        print(f" {marker} {item.label} ({item.path})")
        for child in item.children:
            child_marker = "*" if is_item_active(current_path, child.path) else " "
            print(f"   {child_marker} {child.label} ({child.path})")
