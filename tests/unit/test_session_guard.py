import base64
import json
from datetime import datetime, timedelta, timezone

from erp_console.app.session_guard import SessionGuard, validate_token
from erp_console.app.state import AuthSession
from erp_console.app.ui.permission_map import ModuleAccessPolicy, ModuleType
from erp_console.clients.backend_sdk.models import AuthTokens, Permission, UserProfile


def _jwt(payload: object) -> str:
    header = base64.urlsafe_b64encode(json.dumps({"alg": "none", "typ": "JWT"}).encode()).decode().rstrip("=")
    body = base64.urlsafe_b64encode(json.dumps(payload).encode()).decode().rstrip("=")
    return f"{header}.{body}.sig"


class _Provider:
    def __init__(self, token: str) -> None:
        self.token = token

    def sign_in(self, email, password):
        return AuthTokens(access_token=self.token)

    def refresh(self, refresh_token):
        return AuthTokens(access_token=self.token)

    def sign_out(self, access_token):
        return None

    def get_user(self, access_token):
        return UserProfile(id="u-1", permissions=[Permission(name="invoice_read")])


def test_validate_token_reports_reasons() -> None:
    now = datetime(2024, 3, 5, tzinfo=timezone.utc)

    assert validate_token(None).reason == "missing_token"
    assert validate_token("not-a-jwt").reason == "corrupt_token"
    assert validate_token("a.!!!.c").reason == "corrupt_token"
    assert validate_token(_jwt(["exp"])).reason == "corrupt_token"
    assert validate_token(_jwt({"exp": "soon"})).reason == "corrupt_token"
    assert validate_token(_jwt({"exp": int(now.timestamp())}), now_utc=now).reason == "expired_token"
    assert validate_token(_jwt({"exp": int((now + timedelta(minutes=5)).timestamp())}), now_utc=now).valid is True
    assert validate_token(_jwt({"sub": "u-1"})).valid is True


def test_session_guard_redirects_when_token_expired() -> None:
    token = _jwt({"exp": int((datetime.now(tz=timezone.utc) - timedelta(minutes=1)).timestamp())})
    session = AuthSession(_Provider(token), ModuleAccessPolicy.default())
    session.login("al@example.com", "pw")
    invalid_reasons: list[str] = []

    guard = SessionGuard(on_invalid_session=invalid_reasons.append)

    assert guard.require_session(session, module=ModuleType.INVOICE) is False
    assert invalid_reasons == ["expired_token"]


def test_session_guard_checks_module_access() -> None:
    token = _jwt({"exp": int((datetime.now(tz=timezone.utc) + timedelta(hours=1)).timestamp())})
    session = AuthSession(_Provider(token), ModuleAccessPolicy.default())
    session.login("al@example.com", "pw")
    invalid_reasons: list[str] = []
    guard = SessionGuard(on_invalid_session=invalid_reasons.append)

    assert guard.require_session(session, module=ModuleType.INVOICE) is True
    assert session.active_module is ModuleType.INVOICE
    assert guard.require_session(session, module=ModuleType.CRUD) is False
    assert invalid_reasons == ["module_denied"]
