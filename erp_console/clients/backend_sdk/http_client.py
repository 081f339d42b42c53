from __future__ import annotations

import time
from typing import Any, Callable

import httpx

from erp_console.clients.backend_sdk.errors import ApiError


class HttpClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout_seconds: float = 20,
        verify_ssl: bool = True,
        retry_max_attempts: int = 3,
        retry_backoff_ms: int = 150,
        transport: Callable[..., httpx.Response] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.verify_ssl = verify_ssl
        self.retry_max_attempts = max(1, retry_max_attempts)
        self.retry_backoff_ms = max(0, retry_backoff_ms)
        self.transport = transport or httpx.request

    def request(self, method: str, path: str, token: str | None = None, **kwargs: Any) -> Any:
        headers = dict(kwargs.pop("headers", None) or {})
        headers["apikey"] = self.api_key
        headers["Authorization"] = f"Bearer {token or self.api_key}"
        normalized_path = path if path.startswith("/") else f"/{path}"
        url = f"{self.base_url}{normalized_path}"

        allow_retry = method.upper() == "GET"

        for attempt in range(1, self.retry_max_attempts + 1):
            try:
                response = self.transport(
                    method,
                    url,
                    timeout=self.timeout_seconds,
                    verify=self.verify_ssl,
                    headers=headers,
                    **kwargs,
                )
            except httpx.TimeoutException as exc:
                if (not allow_retry) or attempt >= self.retry_max_attempts:
                    raise ApiError(
                        code="TIMEOUT_ERROR",
                        message="The backend took too long to respond. Check your network and try again.",
                        details=str(exc),
                    ) from exc
                self._backoff(attempt)
                continue
            except httpx.TransportError as exc:
                if (not allow_retry) or attempt >= self.retry_max_attempts:
                    raise ApiError(
                        code="NETWORK_ERROR",
                        message="Could not reach the backend. Retry manually.",
                        details=str(exc),
                    ) from exc
                self._backoff(attempt)
                continue

            if response.status_code >= 400:
                if allow_retry and self._is_retryable_status(response.status_code) and attempt < self.retry_max_attempts:
                    self._backoff(attempt)
                    continue
                raise ApiError.from_http_response(response)
            return self._safe_json(response)
        raise ApiError(code="INTERNAL_ERROR", message="Max retry attempts reached")

    def _backoff(self, attempt: int) -> None:
        time.sleep((self.retry_backoff_ms * attempt) / 1000)

    @staticmethod
    def _is_retryable_status(status_code: int) -> bool:
        return 500 <= status_code <= 599

    @staticmethod
    def _safe_json(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return {"message": response.text}
