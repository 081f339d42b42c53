from __future__ import annotations

import hashlib
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from platformdirs import user_data_dir
from pydantic import ValidationError

from .models import SessionData


@dataclass
class AuthStore:
    """Persisted login for one backend.

    Each backend URL gets its own file, and a file written for another backend
    is discarded on load. Writes go through a temp file so a crash never leaves
    a half-written session behind.
    """

    backend_url: str = ""
    app_name: str = "erp_console"
    base_dir: Path | None = None

    @property
    def path(self) -> Path:
        base = self.base_dir or Path(user_data_dir(self.app_name, "ERP"))
        base.mkdir(parents=True, exist_ok=True)
        scope = hashlib.sha256(self.backend_url.encode("utf-8")).hexdigest()[:12] if self.backend_url else "default"
        return base / f"session-{scope}.json"

    def save(self, session: SessionData) -> None:
        path = self.path
        record = {"backend_url": self.backend_url, "session": session.model_dump(mode="json")}
        staging = path.with_suffix(".tmp")
        staging.write_text(json.dumps(record, indent=2), encoding="utf-8")
        try:
            staging.chmod(0o600)
        except OSError:
            pass
        os.replace(staging, path)

    def load(self) -> SessionData | None:
        path = self.path
        if not path.exists():
            return None
        try:
            record: Any = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            self.clear()
            return None
        if not isinstance(record, dict) or record.get("backend_url", "") != self.backend_url:
            self.clear()
            return None
        try:
            return SessionData.model_validate(record.get("session"))
        except ValidationError:
            self.clear()
            return None

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
