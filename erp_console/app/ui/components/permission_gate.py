from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from erp_console.app.state import AuthSession, SessionStatus
from erp_console.app.ui.permission_map import ModuleType

LOGIN_PATH = "/login"
DEFAULT_FALLBACK_PATH = "/dashboard"


class GuardOutcome(str, Enum):
    LOADING = "loading"
    AUTH_ERROR = "auth_error"
    REDIRECT_LOGIN = "redirect_login"
    ACCOUNT_SUSPENDED = "account_suspended"
    MODULE_DENIED = "module_denied"
    PERMISSION_DENIED = "permission_denied"
    ALLOWED = "allowed"


@dataclass(frozen=True)
class RouteRequirement:
    module: ModuleType | None = None
    permission: str | None = None
    permissions: tuple[str, ...] = ()
    require_all: bool = False
    fallback_path: str = DEFAULT_FALLBACK_PATH


@dataclass(frozen=True)
class GuardDecision:
    outcome: GuardOutcome
    message: str = ""
    redirect_to: str | None = None

    @property
    def allowed(self) -> bool:
        return self.outcome is GuardOutcome.ALLOWED


def evaluate_route(session: AuthSession, requirement: RouteRequirement | None = None) -> GuardDecision:
    """Decide what a protected screen shows for the current session.

    Checks run in a fixed order: pending auth, auth error, anonymous,
    suspended account, module access, then explicit permissions.
    """
    requirement = requirement or RouteRequirement()

    if session.status is SessionStatus.AUTHENTICATING:
        return GuardDecision(GuardOutcome.LOADING, "Loading...")

    if session.status is SessionStatus.ERROR:
        return GuardDecision(GuardOutcome.AUTH_ERROR, session.error or "Authentication Error", LOGIN_PATH)

    if not session.is_authenticated():
        return GuardDecision(GuardOutcome.REDIRECT_LOGIN, redirect_to=LOGIN_PATH)

    user = session.user
    if user is not None and not user.is_active:
        return GuardDecision(
            GuardOutcome.ACCOUNT_SUSPENDED,
            "Your account has been suspended. Please contact your administrator for assistance.",
            LOGIN_PATH,
        )

    if requirement.module is not None and not session.has_module_access(requirement.module):
        module = ModuleType(requirement.module)
        return GuardDecision(
            GuardOutcome.MODULE_DENIED,
            f"You don't have permission to access the {module.value} module.",
            requirement.fallback_path,
        )

    if requirement.permission and not session.has_permission(requirement.permission):
        return GuardDecision(
            GuardOutcome.PERMISSION_DENIED,
            f"You don't have the required permission: {requirement.permission}",
            requirement.fallback_path,
        )

    if requirement.permissions and not session.policy.has_permissions(
        user, requirement.permissions, require_all=requirement.require_all
    ):
        return GuardDecision(
            GuardOutcome.PERMISSION_DENIED,
            f"Required permissions: {', '.join(requirement.permissions)}",
            requirement.fallback_path,
        )

    return GuardDecision(GuardOutcome.ALLOWED)


class PermissionGate:
    @staticmethod
    def check(session: AuthSession, permission: str) -> GuardDecision:
        return evaluate_route(session, RouteRequirement(permission=permission))

    @staticmethod
    def require_module(session: AuthSession, module: ModuleType) -> GuardDecision:
        return evaluate_route(session, RouteRequirement(module=module))
