from __future__ import annotations

import os
from pathlib import Path

from infra.path import default_db_path

DB_URL_ENV = "CASHFLOW_DB_URL"


def sqlite_url(path: str | Path) -> str:
    return f"sqlite:///{Path(path).as_posix()}"


def resolve_db_url(explicit: str | None = None) -> str:
    """Database URL: explicit argument, then ``CASHFLOW_DB_URL``, then the per-user file."""
    candidate = (explicit or "").strip() or (os.getenv(DB_URL_ENV) or "").strip()
    if candidate:
        return candidate
    return sqlite_url(default_db_path())


__all__ = ["DB_URL_ENV", "resolve_db_url", "sqlite_url"]
