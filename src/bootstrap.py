from __future__ import annotations

"""bootstrap.py

Process bootstrap for Livelistarr.

This module is intentionally tiny and side-effectful.

Rules:
1) Only bootstrap is allowed to *mutate* os.environ for shared run context.
2) Call bootstrap_base_env() exactly once at the true entrypoint.
3) Call bootstrap_run_context() after argparse parsing, before init_logging().

Everything else should treat environment variables as the source of truth.
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from env import config_dir, reset_env_caches


_BOOTSTRAPPED = False


def bootstrap_base_env(dotenv_path: Optional[Path] = None) -> None:
    """Load config/.env (if present) without overriding the real environment."""
    global _BOOTSTRAPPED
    if _BOOTSTRAPPED:
        return

    path = dotenv_path or (config_dir() / ".env")
    if path.exists():
        load_dotenv(path, override=False)

    os.environ.setdefault(
        "LIVELISTARR_RUN_ID",
        datetime.now().strftime("%Y-%m-%d_%H-%M-%S"),
    )

    reset_env_caches()
    _BOOTSTRAPPED = True


def bootstrap_run_context(
    *,
    command: str,
    verbose: bool | None = None,
    quiet: bool | None = None,
) -> None:
    """Establish run-scoped context used by logging + pipeline stages."""

    os.environ["LIVELISTARR_COMMAND"] = command

    if verbose is not None:
        os.environ["LIVELISTARR_VERBOSE"] = "1" if verbose else "0"
    if quiet is not None:
        os.environ["LIVELISTARR_QUIET"] = "1" if quiet else "0"

    # Context changes must invalidate cached env views.
    reset_env_caches()
