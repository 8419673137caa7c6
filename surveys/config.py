"""Runtime settings sourced from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


def _normalize_bool(value: str | None, default: bool = False) -> bool:
    """Return normalized boolean from environment-style value."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"", "0", "false", "no", "off"}:
        return False
    if normalized in {"1", "true", "yes", "on"}:
        return True
    return default


@dataclass(frozen=True)
class Settings:
    # Application (client) id registered with the identity provider; token
    # caches are partitioned by it.
    client_id: Optional[str]
    sql_echo: bool
    log_level: str
    token_cache_backend: str  # memory|database


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """Return the cached settings built from environment variables."""
    backend = os.getenv("TOKEN_CACHE_BACKEND", "database").strip().lower()
    if backend not in {"memory", "database"}:
        raise ValueError(f"Unsupported TOKEN_CACHE_BACKEND: {backend}")
    return Settings(
        client_id=os.getenv("AUTH_CLIENT_ID") or None,
        sql_echo=_normalize_bool(os.getenv("SQL_ECHO"), default=False),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        token_cache_backend=backend,
    )


def refresh_settings_cache() -> None:
    """Invalidate cached settings (useful for tests)."""
    get_settings.cache_clear()
