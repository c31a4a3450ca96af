"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

MAX_CHUNK_SIZE = 5000


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def clamp_chunk_size(value: int) -> int:
    return max(1, min(MAX_CHUNK_SIZE, value))


@dataclass(frozen=True)
class SnapshotImportSettings:
    """
    Runtime defaults for snapshot validation and import.

    Operator options on a request override these per upload.
    """

    chunk_size: int = 1000
    dry_run_sample_size: int = 200
    require_eom: bool = False
    allow_mixed: bool = False
    max_report_rows: int = 500
    log_validation_errors: bool = True


@lru_cache(maxsize=1)
def get_snapshot_import_settings() -> SnapshotImportSettings:
    """
    Return cached snapshot import settings from environment variables.
    """

    return SnapshotImportSettings(
        chunk_size=clamp_chunk_size(_get_int_env("SNAPSHOT_IMPORT_CHUNK_SIZE", 1000)),
        dry_run_sample_size=max(1, _get_int_env("SNAPSHOT_IMPORT_DRY_RUN_SAMPLE", 200)),
        require_eom=_get_bool_env("SNAPSHOT_IMPORT_REQUIRE_EOM", False),
        allow_mixed=_get_bool_env("SNAPSHOT_IMPORT_ALLOW_MIXED", False),
        max_report_rows=max(1, _get_int_env("SNAPSHOT_IMPORT_MAX_REPORT_ROWS", 500)),
        log_validation_errors=_get_bool_env("SNAPSHOT_IMPORT_LOG_VALIDATION_ERRORS", True),
    )
