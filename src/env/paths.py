from __future__ import annotations

import os
from pathlib import Path

# ---------------------------------------------------------------------
# Project root
# ---------------------------------------------------------------------

# This file lives in src/env/, so project root is two levels up
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


# ---------------------------------------------------------------------
# Base directories (override-friendly, resolved at call time)
# ---------------------------------------------------------------------


def _resolve_dir(env_var: str, default: Path) -> Path:
    """
    Resolve a directory path from an environment variable or default.
    Ensures the directory exists.
    """
    raw = os.environ.get(env_var)
    path = Path(raw).expanduser().resolve() if raw else default
    path.mkdir(parents=True, exist_ok=True)
    return path


def logs_dir() -> Path:
    return _resolve_dir("LIVELISTARR_LOGS_DIR", PROJECT_ROOT / "logs")


def out_dir() -> Path:
    """Snapshots and other run artifacts."""
    return _resolve_dir("LIVELISTARR_OUT_DIR", PROJECT_ROOT / "out")


def config_dir() -> Path:
    """Playlists file and .env."""
    return _resolve_dir("LIVELISTARR_CONFIG_DIR", PROJECT_ROOT / "config")


# ---------------------------------------------------------------------
# Named files
# ---------------------------------------------------------------------


def out_file(name: str) -> Path:
    return out_dir() / name


def module_logs_dir(module: str) -> Path:
    """
    Base log directory for a CLI module (e.g. sync, auth).
    """
    path = logs_dir() / module
    path.mkdir(parents=True, exist_ok=True)
    return path
