from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AuthHealthStatus(str, Enum):
    OK = "ok"
    AUTH_INVALID = "auth_invalid"
    FAILED = "failed"


@dataclass(frozen=True)
class AuthHealthResult:
    provider: str
    status: AuthHealthStatus
    message: str


@dataclass
class Credential:
    """
    One long-lived secret plus the short-lived access token derived from it.

    Mutated only by CredentialManager's refresh; never persisted.
    """

    refresh_token: str
    access_token: str | None = None
    expires_at_ms: int = 0
