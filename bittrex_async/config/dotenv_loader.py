"""
Explicit dotenv loader.

Rules:
- In production (`ENVIRONMENT=prod`): do not load `.env` / `.env.local`.
- Otherwise: load `.env` then `.env.local` (local overrides).

This must remain dependency-light and MUST NOT import `bittrex_async.config.config`.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv


def _is_prod_env() -> bool:
    return str(os.getenv("ENVIRONMENT") or "dev").strip().lower() == "prod"


def load_dotenv_files(*, root: Path | None = None) -> None:
    """
    Load dotenv files from ``root`` (default: current working directory).

    In prod, this is a no-op.
    """
    if _is_prod_env():
        return

    root = root or Path.cwd()
    env_path = root / ".env"
    env_local_path = root / ".env.local"

    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)

    if env_local_path.exists():
        load_dotenv(dotenv_path=env_local_path, override=True)
