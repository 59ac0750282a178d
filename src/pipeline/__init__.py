"""
Run-level pipeline pieces: domain models, playlists file loading,
snapshot persistence and reporting.

No side effects or imports of runtime environment at package import time.
"""
from __future__ import annotations

__all__ = [
    "errors",
    "models",
    "playlists_config",
    "report",
    "snapshot",
]
