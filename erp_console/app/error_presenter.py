from __future__ import annotations

from typing import Any

from erp_console.app.config import ConfigError
from erp_console.app.state import SessionStateError
from erp_console.clients.backend_sdk.errors import ApiError

NETWORK_CODES = {"NETWORK_ERROR", "TIMEOUT_ERROR"}


def build_error_payload(error: Exception) -> dict[str, Any]:
    if isinstance(error, ApiError):
        category = _classify_api_error(error)
        return {
            "category": category,
            "code": error.code,
            "message": error.message,
            "trace_id": error.trace_id,
            "status_code": error.status_code,
            "action": _suggest_action(category),
        }
    if isinstance(error, ConfigError):
        return {
            "category": "config",
            "code": "CONFIG_ERROR",
            "message": str(error),
            "trace_id": None,
            "status_code": None,
            "action": "Fix configuration",
        }
    if isinstance(error, SessionStateError):
        return {
            "category": "session",
            "code": "SESSION_STATE_ERROR",
            "message": str(error),
            "trace_id": None,
            "status_code": None,
            "action": "Go to login",
        }
    return {
        "category": "internal",
        "code": "INTERNAL_ERROR",
        "message": str(error),
        "trace_id": None,
        "status_code": None,
        "action": "Contact support",
    }


def print_error_banner(payload: dict[str, Any]) -> None:
    trace_id = payload.get("trace_id") or "n/a"
    print(
        "[ERROR] "
        f"code={payload.get('code')} "
        f"message={payload.get('message')} "
        f"trace_id={trace_id} "
        f"category={payload.get('category')} "
        f"action={payload.get('action')}"
    )


def _classify_api_error(error: ApiError) -> str:
    if error.code in NETWORK_CODES:
        return "network"
    if error.status_code == 403:
        return "403"
    if error.status_code == 401:
        return "401"
    if error.status_code == 409:
        return "409"
    if error.status_code == 422:
        return "422"
    if error.status_code and error.status_code >= 500:
        return "500"
    return "api"


def _suggest_action(category: str) -> str:
    if category in {"network", "500", "409"}:
        return "Retry"
    if category == "401":
        return "Go to login"
    if category == "403":
        return "Back to dashboard"
    if category == "422":
        return "Review input"
    return "Contact support"
