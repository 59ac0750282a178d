from __future__ import annotations

from providers.youtube.api_manager import (
    QuotaExhaustedError,
    RequestError,
    ResilientExecutor,
    TerminalRequestError,
    TransientRequestError,
)
from providers.youtube.provider import YouTubeContentSource

__all__ = [
    "QuotaExhaustedError",
    "RequestError",
    "ResilientExecutor",
    "TerminalRequestError",
    "TransientRequestError",
    "YouTubeContentSource",
]
