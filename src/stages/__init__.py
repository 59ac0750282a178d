"""
Sync stages: the set reconciler and the per-playlist orchestrator.

No side effects at package import time.
"""
from __future__ import annotations
