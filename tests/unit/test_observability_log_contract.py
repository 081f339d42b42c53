import json
import logging

from erp_console.app.infrastructure.logging.logger import get_logger, log_action


class CaptureHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.messages = []

    def emit(self, record):
        self.messages.append(record.getMessage())


def test_log_action_contains_required_fields() -> None:
    logger = logging.getLogger("erp_console.test.obs")
    logger.handlers = []
    logger.setLevel(logging.INFO)
    handler = CaptureHandler()
    logger.addHandler(handler)

    log_action(logger=logger, module="auth", action="login", actor_id="u-1", outcome="success", trace_id="trace-1")

    payload = json.loads(handler.messages[0])
    assert payload["module"] == "auth"
    assert payload["action"] == "login"
    assert payload["actor_id"] == "u-1"
    assert payload["trace_id"] == "trace-1"
    assert payload["outcome"] == "success"
    assert payload["level"] == "INFO"
    assert "ts" in payload


def test_get_logger_does_not_stack_handlers() -> None:
    first = get_logger("erp_console.test.handlers")
    second = get_logger("erp_console.test.handlers")

    assert first is second
    assert len(second.handlers) == 1


def test_session_login_logs_without_secrets(tmp_path) -> None:
    from erp_console.app.state import AuthSession
    from erp_console.app.ui.permission_map import ModuleAccessPolicy
    from erp_console.clients.backend_sdk.models import AuthTokens, UserProfile

    class _Provider:
        def sign_in(self, email, password):
            return AuthTokens(access_token="secret-access", refresh_token="secret-refresh")

        def refresh(self, refresh_token):
            raise AssertionError("not expected")

        def sign_out(self, access_token):
            return None

        def get_user(self, access_token):
            return UserProfile(id="u-9")

    handler = CaptureHandler()
    logging.getLogger("erp_console.app.state").addHandler(handler)
    try:
        AuthSession(_Provider(), ModuleAccessPolicy.default()).login("al@example.com", "hunter2")
    finally:
        logging.getLogger("erp_console.app.state").removeHandler(handler)

    joined = "\n".join(handler.messages)
    assert '"actor_id": "u-9"' in joined
    assert "secret-access" not in joined
    assert "hunter2" not in joined
