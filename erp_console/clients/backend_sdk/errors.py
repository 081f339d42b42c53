from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: dict[str, Any] | list[Any] | str | None = None
    trace_id: str | None = None
    status_code: int | None = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    @classmethod
    def from_http_response(cls, response: httpx.Response) -> "ApiError":
        trace_id = _extract_trace_id(response)
        try:
            payload = response.json()
        except ValueError:
            return cls(
                code="HTTP_ERROR",
                message=response.text or "HTTP request failed",
                details=None,
                trace_id=trace_id,
                status_code=response.status_code,
            )

        if isinstance(payload, dict):
            # The database gateway answers {code, message, details, hint};
            # the auth service answers {error, error_description} or {code, msg}.
            code = payload.get("error_code") or payload.get("error") or payload.get("code") or "HTTP_ERROR"
            message = (
                payload.get("message")
                or payload.get("msg")
                or payload.get("error_description")
                or response.text
                or "HTTP request failed"
            )
            return cls(
                code=str(code),
                message=str(message),
                details=payload.get("details") or payload.get("hint"),
                trace_id=trace_id,
                status_code=response.status_code,
            )

        return cls(
            code="HTTP_ERROR",
            message=response.text or "HTTP request failed",
            details=payload,
            trace_id=trace_id,
            status_code=response.status_code,
        )


def _extract_trace_id(response: httpx.Response) -> str | None:
    return (
        response.headers.get("X-Request-Id")
        or response.headers.get("X-Trace-ID")
        or response.headers.get("sb-request-id")
    )
