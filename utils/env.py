from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

"""Environment helper utilities.

Loads a `.env` file from the project root so pricing overrides such as
``PRICING_COST_PLUS_MARKUP`` or ``PRICING_LOG_LEVEL`` defined there become
available via ``os.getenv``, and offers typed readers for those variables.
"""

__all__ = ["load_project_dotenv", "get_env_float", "get_env_int"]


def _find_project_root(start: Path | None = None) -> Path:
    """Traverse upwards until we find a directory that contains `pyproject.toml`."""
    current = start or Path(__file__).resolve().parent
    for _ in range(10):
        if (current / "pyproject.toml").exists():
            return current
        if current.parent == current:
            break
        current = current.parent
    return Path(__file__).resolve().parent


def load_project_dotenv(start: Path | None = None) -> bool:
    """Load the project-level `.env` if present. Existing variables win."""
    dotenv_path = _find_project_root(start) / ".env"
    if dotenv_path.exists():
        return load_dotenv(dotenv_path=dotenv_path, override=False)
    return False


def get_env_float(name: str, default: float | None = None) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be a number, got {raw!r}") from exc


def get_env_int(name: str, default: int | None = None) -> int | None:
    value = get_env_float(name)
    if value is None:
        return default
    if not value.is_integer():
        raise ValueError(f"Environment variable {name} must be an integer, got {value}")
    return int(value)
