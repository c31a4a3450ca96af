"""
db/config.py

Resolves the snapshot store's PostgreSQL URL from the process environment,
falling back to `.env` / `.env.local` at the project root.
"""

from __future__ import annotations

import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ENV_FILENAMES = (".env", ".env.local")
CLOUD_ENVIRONMENTS = frozenset({"prod", "production", "staging", "cloud"})
PSYCOPG_SCHEME = "postgresql+psycopg://"


def read_env_file(path: Path) -> dict[str, str]:
    """
    Parse KEY=VALUE lines; blank lines, comments and lines without '=' are skipped.
    """

    values: dict[str, str] = {}
    if not path.exists():
        return values
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key:
            values[key] = value.strip().strip('"').strip("'")
    return values


def load_env_files(root: Path = PROJECT_ROOT) -> None:
    # Process environment wins over file values.
    for filename in ENV_FILENAMES:
        for key, value in read_env_file(root / filename).items():
            os.environ.setdefault(key, value)


def normalize_postgres_url(url: str) -> str:
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return PSYCOPG_SCHEME + url[len(prefix):]
    return url


def configured_database_url() -> str | None:
    """
    First configured URL, or None.

    DATABASE_URL wins; CLOUD_DATABASE_URL applies only when ENVIRONMENT is a
    cloud-like value; LOCAL_DATABASE_URL is the fallback.
    """

    load_env_files()

    environment = os.getenv("ENVIRONMENT", "local").strip().lower()
    candidates = ["DATABASE_URL"]
    if environment in CLOUD_ENVIRONMENTS:
        candidates.append("CLOUD_DATABASE_URL")
    candidates.append("LOCAL_DATABASE_URL")

    for name in candidates:
        url = os.getenv(name, "").strip()
        if url:
            return normalize_postgres_url(url)
    return None


def resolve_database_url() -> str:
    url = configured_database_url()
    if url is None:
        raise RuntimeError(
            "No database URL configured. Set DATABASE_URL, or configure "
            "LOCAL_DATABASE_URL / CLOUD_DATABASE_URL."
        )
    return url
