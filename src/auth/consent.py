"""
consent.py

One-time interactive consent flow that yields the long-lived refresh token
the sync job runs on.
"""

from __future__ import annotations

from typing import Any, Dict

from google_auth_oauthlib.flow import InstalledAppFlow

import config
from auth.errors import AuthFailed, AuthInvalid
from logger import get_logger


def _client_config(client_id: str, client_secret: str) -> Dict[str, Any]:
    return {
        "installed": {
            "client_id": client_id,
            "client_secret": client_secret,
            "auth_uri": config.OAUTH_AUTH_URL,
            "token_uri": config.OAUTH_TOKEN_URL,
            "redirect_uris": ["http://localhost"],
        }
    }


def run_setup_flow(client_id: str, client_secret: str, port: int = 0) -> str:
    """
    Run the installed-app OAuth flow in a local browser and return the refresh token.

    Raises:
        AuthInvalid: consent completed but Google issued no refresh token
        AuthFailed: the flow itself failed
    """
    logger = get_logger("auth.setup")

    try:
        logger.debug("Starting OAuth authentication flow...")
        flow = InstalledAppFlow.from_client_config(
            _client_config(client_id, client_secret),
            config.YOUTUBE_OAUTH_SCOPES,
        )
        creds = flow.run_local_server(
            port=port,
            access_type="offline",
            prompt="consent",
        )
    except Exception as e:
        logger.error(f"OAuth authentication failed: {e}")
        raise AuthFailed(f"OAuth flow failed: {e}") from e

    if not creds.refresh_token:
        raise AuthInvalid(
            "No refresh token received. This happens when the app is already "
            "authorized: remove its access at https://myaccount.google.com/permissions "
            "and run setup again."
        )

    logger.debug("Successfully authenticated with OAuth")
    return creds.refresh_token
