from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from skillbridge.exceptions import ConfigurationError

STORE_BACKENDS = {"memory", "supabase"}
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    store: str = "memory"
    supabase_url: str = ""
    supabase_key: str = ""
    data_dir: Path | None = None
    matcher: str = "substring"
    opportunity_limit: int | None = 20
    strict_persistence: bool = True
    request_timeout: float = 12.0
    log_level: str = "INFO"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


def load_settings() -> Settings:
    """
    Build settings from the environment (and a ``.env`` file if present).

    Priority: process environment, then ``.env``, then the defaults above.
    """
    load_dotenv(find_dotenv(usecwd=True))

    store = os.getenv("SKILLBRIDGE_STORE", "memory").strip().lower()
    if store not in STORE_BACKENDS:
        raise ConfigurationError(
            f"SKILLBRIDGE_STORE must be one of {sorted(STORE_BACKENDS)}, got {store!r}"
        )

    supabase_url = os.getenv("SUPABASE_URL", "").strip()
    supabase_key = os.getenv("SUPABASE_KEY", "").strip()
    if store == "supabase" and not (supabase_url and supabase_key):
        raise ConfigurationError("SUPABASE_URL and SUPABASE_KEY are required for the supabase store")

    data_dir = os.getenv("SKILLBRIDGE_DATA_DIR", "").strip()
    limit = _env_int("SKILLBRIDGE_OPPORTUNITY_LIMIT", 20)
    if limit < 0:
        raise ConfigurationError("SKILLBRIDGE_OPPORTUNITY_LIMIT must not be negative")

    return Settings(
        store=store,
        supabase_url=supabase_url,
        supabase_key=supabase_key,
        data_dir=Path(data_dir) if data_dir else None,
        matcher=os.getenv("SKILLBRIDGE_MATCHER", "substring").strip() or "substring",
        opportunity_limit=limit or None,
        strict_persistence=_env_bool("SKILLBRIDGE_STRICT_PERSISTENCE", True),
        request_timeout=_env_float("SKILLBRIDGE_REQUEST_TIMEOUT", 12.0),
        log_level=os.getenv("SKILLBRIDGE_LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )
