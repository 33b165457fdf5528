"""
Configuration helpers for the users API.

Exposes a Settings object that reads environment variables (seed endpoint,
data file, listen address, feature flags) so that routers/services do not
fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_SEED_URL = "https://dummyjson.com/users"
DEFAULT_DATA_FILE = "data/users.json"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    seed_url: str
    seed_on_startup: bool
    seed_timeout_seconds: float
    data_file: Path
    host: str
    port: int
    serialize_writes: bool
    legacy_error_status: bool
    log_level: str
    cors_origins: tuple[str, ...]


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _float(value: str, default: float = 0.0) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    def _positive(value: float, default: float) -> float:
        return value if value > 0 else default

    def _origins(value: str | None) -> tuple[str, ...]:
        items = [item.strip() for item in (value or "*").split(",")]
        return tuple(item for item in items if item)

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        seed_url=os.getenv("SEED_URL", DEFAULT_SEED_URL).strip(),
        seed_on_startup=_bool(os.getenv("SEED_ON_STARTUP"), True),
        seed_timeout_seconds=_positive(_float(os.getenv("SEED_TIMEOUT_SECONDS", "10"), 10.0), 10.0),
        data_file=Path(os.getenv("DATA_FILE") or DEFAULT_DATA_FILE),
        host=os.getenv("HOST", "127.0.0.1"),
        port=_int(os.getenv("PORT", "3000"), 3000),
        serialize_writes=_bool(os.getenv("SERIALIZE_WRITES"), True),
        legacy_error_status=_bool(os.getenv("LEGACY_ERROR_STATUS"), False),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        cors_origins=_origins(os.getenv("CORS_ORIGINS")),
    )
