from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_BACKEND_URL = "http://localhost:54321"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class AppConfig:
    backend_url: str
    anon_key: str
    timeout_seconds: float
    verify_ssl: bool
    retry_max_attempts: int
    retry_backoff_ms: int
    table_page_size: int
    hrms_url: str = ""

    @classmethod
    def from_env(cls, env_file: str = ".env") -> "AppConfig":
        load_dotenv(env_file)
        config = cls(
            backend_url=os.getenv("ERP_BACKEND_URL", DEFAULT_BACKEND_URL).strip().rstrip("/"),
            anon_key=os.getenv("ERP_BACKEND_ANON_KEY", "").strip(),
            timeout_seconds=_read_float("ERP_TIMEOUT_SECONDS", "20"),
            verify_ssl=_coerce_bool(os.getenv("ERP_VERIFY_SSL"), True),
            retry_max_attempts=_read_int("ERP_RETRY_MAX_ATTEMPTS", "3"),
            retry_backoff_ms=_read_int("ERP_RETRY_BACKOFF_MS", "150"),
            table_page_size=_read_int("ERP_TABLE_PAGE_SIZE", "10"),
            hrms_url=os.getenv("ERP_HRMS_URL", "").strip().rstrip("/"),
        )
        config.validate()
        return config

    def validate(self) -> None:
        if not self.backend_url:
            raise ConfigError("ERP_BACKEND_URL cannot be empty")
        if not self.anon_key:
            raise ConfigError("ERP_BACKEND_ANON_KEY is required")
        if self.timeout_seconds <= 0:
            raise ConfigError("ERP_TIMEOUT_SECONDS must be greater than 0")
        if self.retry_max_attempts < 1:
            raise ConfigError("ERP_RETRY_MAX_ATTEMPTS must be >= 1")
        if self.retry_backoff_ms < 0:
            raise ConfigError("ERP_RETRY_BACKOFF_MS must be >= 0")
        if self.table_page_size < 1:
            raise ConfigError("ERP_TABLE_PAGE_SIZE must be >= 1")


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def _read_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected an integer, got {raw!r}") from exc
