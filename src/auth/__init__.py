from __future__ import annotations

from auth.base import AuthHealthResult, AuthHealthStatus, Credential
from auth.credentials import CredentialManager
from auth.errors import AuthError, AuthFailed, AuthInvalid
from auth.health import check

__all__ = [
    "AuthError",
    "AuthFailed",
    "AuthHealthResult",
    "AuthHealthStatus",
    "AuthInvalid",
    "Credential",
    "CredentialManager",
    "check",
]
