from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Protocol

from erp_console.app.infrastructure.logging.logger import get_logger, log_action
from erp_console.app.session_guard import validate_token
from erp_console.app.ui.permission_map import ModuleAccessPolicy, ModuleType
from erp_console.clients.backend_sdk.auth_store import AuthStore
from erp_console.clients.backend_sdk.errors import ApiError
from erp_console.clients.backend_sdk.models import AuthTokens, SessionData, UserProfile

logger = get_logger(__name__)

SESSION_CHECK_FAILED = "Failed to check session"


class SessionStatus(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    ERROR = "error"


_TRANSITIONS: dict[SessionStatus, frozenset[SessionStatus]] = {
    SessionStatus.ANONYMOUS: frozenset({SessionStatus.AUTHENTICATING}),
    SessionStatus.AUTHENTICATING: frozenset(
        {SessionStatus.AUTHENTICATED, SessionStatus.ERROR, SessionStatus.ANONYMOUS}
    ),
    SessionStatus.AUTHENTICATED: frozenset(
        {SessionStatus.AUTHENTICATING, SessionStatus.ANONYMOUS, SessionStatus.ERROR}
    ),
    SessionStatus.ERROR: frozenset({SessionStatus.AUTHENTICATING, SessionStatus.ANONYMOUS}),
}


class SessionStateError(RuntimeError):
    def __init__(self, current: SessionStatus, target: SessionStatus) -> None:
        super().__init__(f"Illegal session transition {current.value} -> {target.value}")
        self.current = current
        self.target = target


class AuthProvider(Protocol):
    def sign_in(self, email: str, password: str) -> AuthTokens: ...

    def refresh(self, refresh_token: str) -> AuthTokens: ...

    def sign_out(self, access_token: str) -> None: ...

    def get_user(self, access_token: str) -> UserProfile: ...


SessionListener = Callable[["AuthSession"], None]


class AuthSession:
    """Authentication state for one console user.

    The provider does the network work; this class owns the state machine,
    the persisted session and the permission checks for the current user.
    """

    def __init__(
        self,
        provider: AuthProvider,
        policy: ModuleAccessPolicy,
        store: AuthStore | None = None,
    ) -> None:
        self.provider = provider
        self.policy = policy
        self.store = store
        self._status = SessionStatus.ANONYMOUS
        self._access_token: str | None = None
        self._refresh_token: str | None = None
        self._user: UserProfile | None = None
        self._error: str | None = None
        self._active_module: ModuleType | None = None
        self._listeners: list[SessionListener] = []

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def user(self) -> UserProfile | None:
        return self._user

    @property
    def access_token(self) -> str | None:
        return self._access_token

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def active_module(self) -> ModuleType | None:
        return self._active_module

    def is_authenticated(self) -> bool:
        return self._status is SessionStatus.AUTHENTICATED and self._user is not None

    def is_loading(self) -> bool:
        return self._status is SessionStatus.AUTHENTICATING

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def restore(self) -> bool:
        """Resume a persisted session; an expired access token is refreshed first."""
        stored = self.store.load() if self.store is not None else None
        if stored is None:
            return False

        self._transition(SessionStatus.AUTHENTICATING)
        try:
            tokens = self._tokens_for(stored)
            user = self.provider.get_user(tokens.access_token)
        except ApiError as error:
            self._clear_credentials()
            self._fail(SESSION_CHECK_FAILED, action="restore", trace_id=error.trace_id)
            return False
        self._establish(tokens, user, action="restore")
        return True

    def login(self, email: str, password: str) -> UserProfile:
        self._error = None
        self._transition(SessionStatus.AUTHENTICATING)
        try:
            tokens = self.provider.sign_in(email, password)
            user = self.provider.get_user(tokens.access_token)
        except ApiError as error:
            self._clear_credentials()
            self._fail(error.message, action="login", trace_id=error.trace_id)
            raise
        self._establish(tokens, user, action="login")
        return user

    def refresh(self) -> UserProfile:
        if self._status is not SessionStatus.AUTHENTICATED or not self._refresh_token:
            raise SessionStateError(self._status, SessionStatus.AUTHENTICATING)
        self._transition(SessionStatus.AUTHENTICATING)
        try:
            tokens = self.provider.refresh(self._refresh_token)
            user = self.provider.get_user(tokens.access_token)
        except ApiError as error:
            self._clear_credentials()
            self._fail(error.message, action="refresh", trace_id=error.trace_id)
            raise
        self._establish(tokens, user, action="refresh")
        return user

    def logout(self) -> None:
        if self._status is SessionStatus.ANONYMOUS:
            return
        token = self._access_token
        actor_id = self._user.id if self._user else None
        try:
            if token:
                self.provider.sign_out(token)
        except ApiError as error:
            self._error = error.message
            log_action(logger, "auth", "logout", actor_id, "failure", error.trace_id)
            raise
        else:
            self._error = None
            log_action(logger, "auth", "logout", actor_id, "success")
        finally:
            self._clear_credentials()
            self._transition(SessionStatus.ANONYMOUS)

    def clear_error(self) -> None:
        self._error = None
        if self._status is SessionStatus.ERROR:
            self._transition(SessionStatus.ANONYMOUS)

    def has_permission(self, permission: str) -> bool:
        return self.policy.has_permission(self._user, permission)

    def has_module_access(self, module: ModuleType | str) -> bool:
        return self.policy.has_module_access(self._user, module)

    def set_active_module(self, module: ModuleType | str) -> bool:
        target = ModuleType(module)
        if not self.has_module_access(target):
            logger.debug("set_active_module denied for %s", target.value)
            return False
        self._active_module = target
        self._notify()
        return True

    def _tokens_for(self, stored: SessionData) -> AuthTokens:
        validation = validate_token(stored.access_token)
        if validation.valid:
            return AuthTokens(access_token=stored.access_token, refresh_token=stored.refresh_token)
        if validation.reason == "expired_token" and stored.refresh_token:
            return self.provider.refresh(stored.refresh_token)
        raise ApiError(code="SESSION_INVALID", message=SESSION_CHECK_FAILED)

    def _establish(self, tokens: AuthTokens, user: UserProfile, *, action: str) -> None:
        self._access_token = tokens.access_token
        self._refresh_token = tokens.refresh_token or self._refresh_token
        self._user = user
        self._error = None
        if self.store is not None:
            self.store.save(
                SessionData(access_token=self._access_token, refresh_token=self._refresh_token, user=user)
            )
        self._transition(SessionStatus.AUTHENTICATED)
        log_action(logger, "auth", action, user.id, "success")

    def _fail(self, message: str, *, action: str, trace_id: str | None = None) -> None:
        self._error = message
        self._transition(SessionStatus.ERROR)
        log_action(logger, "auth", action, None, "failure", trace_id, level=logging.WARNING)

    def _clear_credentials(self) -> None:
        self._access_token = None
        self._refresh_token = None
        self._user = None
        self._active_module = None
        if self.store is not None:
            self.store.clear()

    def _transition(self, target: SessionStatus) -> None:
        if target not in _TRANSITIONS[self._status]:
            raise SessionStateError(self._status, target)
        self._status = target
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)


__all__ = [
    "SESSION_CHECK_FAILED",
    "AuthProvider",
    "AuthSession",
    "SessionStateError",
    "SessionStatus",
]
