from __future__ import annotations

from typing import Any

from erp_console.clients.backend_sdk.errors import ApiError
from erp_console.clients.backend_sdk.http_client import HttpClient
from erp_console.clients.backend_sdk.models import AuthTokens, UserProfile


class AuthClient:
    """Password-grant client for the hosted auth service (``/auth/v1``)."""

    def __init__(self, http_client: HttpClient) -> None:
        self.http_client = http_client

    def sign_in(self, email: str, password: str) -> AuthTokens:
        response = self.http_client.request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return _tokens_from(response)

    def refresh(self, refresh_token: str) -> AuthTokens:
        response = self.http_client.request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        return _tokens_from(response)

    def sign_out(self, access_token: str) -> None:
        self.http_client.request("POST", "/auth/v1/logout", token=access_token)

    def get_user(self, access_token: str) -> UserProfile:
        response = self.http_client.request("GET", "/auth/v1/user", token=access_token)
        if not isinstance(response, dict) or not response.get("id"):
            raise ApiError(code="INVALID_USER_PAYLOAD", message="Auth service returned no user")
        return UserProfile.from_auth_user(response)


def _tokens_from(response: Any) -> AuthTokens:
    if not isinstance(response, dict) or not response.get("access_token"):
        raise ApiError(code="INVALID_TOKEN_PAYLOAD", message="Authentication failed")
    user = response.get("user") or {}
    return AuthTokens(
        access_token=response["access_token"],
        refresh_token=response.get("refresh_token"),
        token_type=response.get("token_type") or "bearer",
        expires_in=response.get("expires_in"),
        user_id=user.get("id"),
    )
