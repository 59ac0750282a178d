from __future__ import annotations


class AuthError(Exception):
    """Base auth error. Irrecoverable within a run."""


class AuthInvalid(AuthError):
    """The stored refresh token was rejected; interactive reauth required."""


class AuthFailed(AuthError):
    """Unexpected auth failure (network, server error, malformed response)."""
