from __future__ import annotations

import base64
import json
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from erp_console.app.state import AuthSession
    from erp_console.app.ui.permission_map import ModuleType


@dataclass(frozen=True)
class SessionValidation:
    valid: bool
    reason: str | None = None


def validate_token(token: str | None, now_utc: datetime | None = None) -> SessionValidation:
    """Decode a JWT payload (signature not checked) and look at ``exp``."""
    if not token:
        return SessionValidation(valid=False, reason="missing_token")

    parts = token.split(".")
    if len(parts) != 3:
        return SessionValidation(valid=False, reason="corrupt_token")

    payload_part = parts[1]
    padded = payload_part + ("=" * (-len(payload_part) % 4))
    try:
        decoded = base64.urlsafe_b64decode(padded.encode("utf-8")).decode("utf-8")
        payload = json.loads(decoded)
    except (ValueError, UnicodeDecodeError):
        return SessionValidation(valid=False, reason="corrupt_token")

    if not isinstance(payload, dict):
        return SessionValidation(valid=False, reason="corrupt_token")

    exp = payload.get("exp")
    if exp is None:
        return SessionValidation(valid=True)

    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return SessionValidation(valid=False, reason="corrupt_token")

    now = now_utc or datetime.now(tz=timezone.utc)
    if float(exp) <= now.timestamp():
        return SessionValidation(valid=False, reason="expired_token")

    return SessionValidation(valid=True)


class SessionGuard:
    def __init__(self, on_invalid_session: Callable[[str], None]) -> None:
        self._on_invalid_session = on_invalid_session

    def require_session(self, session: AuthSession, module: ModuleType | str) -> bool:
        validation = validate_token(session.access_token)
        if not validation.valid:
            self._on_invalid_session(validation.reason or "invalid_session")
            return False
        if not session.set_active_module(module):
            self._on_invalid_session("module_denied")
            return False
        return True
