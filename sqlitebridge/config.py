from __future__ import annotations

import dataclasses
import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_STMT_CACHE_SIZE = 128
MAX_STMT_CACHE_SIZE = 4096
DEFAULT_BUSY_TIMEOUT = 5.0

_FALSY = {"0", "false", "no", "off"}


@dataclasses.dataclass(frozen=True)
class BridgeConfig:
    # Fail on unbindable values instead of leaving the position NULL.
    strict_types: bool = True
    # Per-connection prepared statement cache (sqlite3 ``cached_statements``).
    stmt_cache_size: int = DEFAULT_STMT_CACHE_SIZE
    # Seconds SQLite waits on a file lock held by another process.
    busy_timeout: float = DEFAULT_BUSY_TIMEOUT

    @classmethod
    def from_env(cls, environ=None) -> "BridgeConfig":
        env = os.environ if environ is None else environ

        strict_raw = env.get("SQLITEBRIDGE_STRICT_TYPES")
        strict = True if strict_raw is None else strict_raw.strip().lower() not in _FALSY

        cache_size = _int(env, "SQLITEBRIDGE_STMT_CACHE_SIZE", DEFAULT_STMT_CACHE_SIZE)
        if cache_size < 0 or cache_size > MAX_STMT_CACHE_SIZE:
            clamped = min(MAX_STMT_CACHE_SIZE, max(0, cache_size))
            logger.warning("SQLITEBRIDGE_STMT_CACHE_SIZE=%s out of range, using %s", cache_size, clamped)
            cache_size = clamped

        busy = _float(env, "SQLITEBRIDGE_BUSY_TIMEOUT", DEFAULT_BUSY_TIMEOUT)
        if busy < 0:
            logger.warning("SQLITEBRIDGE_BUSY_TIMEOUT=%s is negative, using 0", busy)
            busy = 0.0

        return cls(strict_types=strict, stmt_cache_size=cache_size, busy_timeout=busy)


def _int(env, name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("invalid integer %s=%r, using default %s", name, raw, default)
        return default


def _float(env, name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("invalid number %s=%r, using default %s", name, raw, default)
        return default
