from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple


_TABLE_NAME_ENV = "TRAFFIC_TABLE_NAME"
_TABLE_PATH_ENV = "TRAFFIC_TABLE_PERSISTENCE_PATH"
_PAGE_SIZE_ENV = "TRAFFIC_TABLE_PAGE_SIZE"
_HOUR_CACHE_ENV = "HOUR_CACHE_SIZE"
_DST_CACHE_ENV = "DST_CACHE_SIZE"
_CORS_ORIGINS_ENV = "CORS_ALLOW_ORIGINS"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    table_name: Optional[str]
    table_persistence_path: Optional[str]
    table_page_size: int
    hour_cache_size: int
    dst_cache_size: int
    cors_origins: Tuple[str, ...]
    log_level: str


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_origins(default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = os.getenv(_CORS_ORIGINS_ENV)
    if value is None:
        return default
    origins = tuple(part.strip() for part in value.split(",") if part.strip())
    return origins or default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        table_name=_read_optional_env(_TABLE_NAME_ENV, "traffic_data"),
        table_persistence_path=_read_optional_env(_TABLE_PATH_ENV, "./tmp/traffic_db.json"),
        table_page_size=_read_positive_int(_PAGE_SIZE_ENV, 1000),
        hour_cache_size=_read_positive_int(_HOUR_CACHE_ENV, 100_000),
        dst_cache_size=_read_positive_int(_DST_CACHE_ENV, 4096),
        cors_origins=_read_origins(("*",)),
        log_level=_read_log_level("INFO"),
    )
