from __future__ import annotations

from auth.base import AuthHealthResult, AuthHealthStatus
from auth.credentials import CredentialManager
from auth.errors import AuthFailed, AuthInvalid
from logger import get_logger


def check(credentials: CredentialManager, provider_name: str = "youtube") -> AuthHealthResult:
    """
    Validates OAuth by forcing a token exchange.
    Never raises; the outcome is encoded in the result status.
    """
    logger = get_logger("auth.health")
    logger.info("oauth.check.start")

    try:
        credentials.get_valid_token()
    except AuthInvalid as e:
        logger.error("oauth.check.auth_invalid", exc_info=e)
        return AuthHealthResult(
            provider=provider_name,
            status=AuthHealthStatus.AUTH_INVALID,
            message=str(e),
        )
    except AuthFailed as e:
        logger.error("oauth.check.failed", exc_info=e)
        return AuthHealthResult(
            provider=provider_name,
            status=AuthHealthStatus.FAILED,
            message=str(e),
        )

    logger.info("oauth.check.ok")
    return AuthHealthResult(
        provider=provider_name,
        status=AuthHealthStatus.OK,
        message="OAuth OK",
    )
