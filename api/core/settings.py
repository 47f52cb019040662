"""
Process configuration read from environment variables.

`Settings.from_env()` is called once by the app factory; everything else
receives the resulting object instead of reading `os.environ` itself.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

DEFAULT_JWT_SECRET = "dev-secret-change-me"

# PostgreSQL caps a single statement at 32767 bind parameters and every
# detection binds 8 of them.
MAX_DETECTION_BATCH = 32767 // 8

logger = logging.getLogger(__name__)


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw not in {"0", "false", "no", "off"}


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    database_url: str = ""
    db_pool_min_size: int = 1
    db_pool_max_size: int = 5
    db_command_timeout_s: float = 30.0
    db_acquire_timeout_s: float = 10.0

    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    token_expire_days: int = 7

    allow_legacy_plaintext_passwords: bool = True
    detection_batch_max: int = MAX_DETECTION_BATCH

    cors_allow_origins: list[str] = field(default_factory=lambda: ["*"])
    service_name: str = "blustick-api"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        batch_max = _env_int("DETECTION_BATCH_MAX", MAX_DETECTION_BATCH)
        if batch_max <= 0 or batch_max > MAX_DETECTION_BATCH:
            batch_max = MAX_DETECTION_BATCH

        settings = cls(
            database_url=os.environ.get("DATABASE_URL", "").strip(),
            db_pool_min_size=max(_env_int("DB_POOL_MIN_SIZE", 1), 0),
            db_pool_max_size=max(_env_int("DB_POOL_MAX_SIZE", 5), 1),
            db_command_timeout_s=_env_float("DB_COMMAND_TIMEOUT_S", 30.0),
            db_acquire_timeout_s=_env_float("DB_ACQUIRE_TIMEOUT_S", 10.0),
            jwt_secret=_env_str("JWT_SECRET", DEFAULT_JWT_SECRET),
            jwt_algorithm=_env_str("JWT_ALG", "HS256"),
            token_expire_days=max(_env_int("TOKEN_EXPIRE_DAYS", 7), 1),
            allow_legacy_plaintext_passwords=_env_bool("ALLOW_LEGACY_PLAINTEXT_PASSWORDS", True),
            detection_batch_max=batch_max,
            cors_allow_origins=_env_list("CORS_ALLOW_ORIGINS", ["*"]),
            service_name=_env_str("SERVICE_NAME", "blustick-api"),
            log_level=_env_str("LOG_LEVEL", "INFO").upper(),
        )
        if settings.jwt_secret == DEFAULT_JWT_SECRET:
            logger.warning("jwt_secret_default in use; set JWT_SECRET in production")
        return settings
