"""
credentials.py

OAuth access-token lifecycle.

Responsibilities:
- Hand out a cached access token while it is comfortably valid
- Exchange the refresh token for a new access token when it is not
- Coalesce concurrent refreshes into one outbound call (single-flight)
- Translate token endpoint failures into AuthInvalid / AuthFailed

Does NOT:
- Retry refreshes (callers / operators decide)
- Persist tokens anywhere
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

import requests

import config
from auth.base import Credential
from auth.errors import AuthError, AuthFailed, AuthInvalid
from logger import get_logger

# Token endpoint statuses that mean "this refresh token is no good".
_CLIENT_REJECTION_STATUSES = (400, 401)

REAUTH_MESSAGE = (
    "OAuth refresh token is invalid or expired. Please re-run: livelistarr auth setup"
)
GENERIC_FAILURE_MESSAGE = (
    "OAuth token refresh failed. Please check your credentials and try again."
)


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class _InflightRefresh:
    """Outcome slot shared by the refreshing caller and everyone waiting on it."""

    def __init__(self):
        self.done = threading.Event()
        self.token: Optional[str] = None
        self.error: Optional[BaseException] = None
        self.waiters = 0

    def wait(self) -> str:
        self.done.wait()
        if self.error is not None:
            raise self.error
        return self.token


class CredentialManager:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        *,
        token_url: str = config.OAUTH_TOKEN_URL,
        session: Optional[requests.Session] = None,
        timeout: float = config.DEFAULT_REQUEST_TIMEOUT_SEC,
        refresh_buffer_ms: int = config.TOKEN_REFRESH_BUFFER_SEC * 1000,
        clock: Callable[[], int] = _wall_clock_ms,
        logger: Optional[logging.Logger] = None,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._credential = Credential(refresh_token=refresh_token)
        self._token_url = token_url
        self._session = session or requests.Session()
        self._timeout = timeout
        self._refresh_buffer_ms = refresh_buffer_ms
        self._clock = clock
        self._logger = logger or get_logger("auth.credentials")

        self._lock = threading.Lock()
        self._inflight: Optional[_InflightRefresh] = None

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def get_valid_token(self) -> str:
        """
        Return a usable access token, refreshing at most once no matter how
        many callers ask at the same time.

        Raises:
            AuthInvalid: the refresh token was rejected
            AuthFailed: any other refresh failure
        """
        with self._lock:
            if self._has_fresh_token():
                self._logger.debug("Using cached access token")
                return self._credential.access_token

            inflight = self._inflight
            owner = inflight is None
            if owner:
                inflight = _InflightRefresh()
                self._inflight = inflight
            else:
                inflight.waiters += 1

        if not owner:
            self._logger.debug("Refresh already in progress, waiting...")
            return inflight.wait()

        self._logger.info("Access token expired or missing, refreshing...")
        try:
            token = self._perform_refresh()
        except BaseException as e:
            inflight.error = e
            raise
        else:
            inflight.token = token
            return token
        finally:
            with self._lock:
                self._inflight = None
            inflight.done.set()

    @property
    def expires_at_ms(self) -> int:
        return self._credential.expires_at_ms

    # -----------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------

    def _has_fresh_token(self) -> bool:
        cred = self._credential
        if not cred.access_token:
            return False
        return self._clock() < cred.expires_at_ms - self._refresh_buffer_ms

    def _perform_refresh(self) -> str:
        self._logger.debug("Exchanging refresh token for access token")

        try:
            response = self._session.post(
                self._token_url,
                data={
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "refresh_token": self._credential.refresh_token,
                    "grant_type": "refresh_token",
                },
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            self._logger.error(f"Failed to refresh access token: {e}")
            raise AuthFailed(GENERIC_FAILURE_MESSAGE) from e

        if response.status_code in _CLIENT_REJECTION_STATUSES:
            self._logger.error(
                f"Token endpoint rejected refresh token (HTTP {response.status_code})"
            )
            raise AuthInvalid(REAUTH_MESSAGE)

        if not response.ok:
            self._logger.error(
                f"Failed to refresh access token (HTTP {response.status_code})"
            )
            raise AuthFailed(GENERIC_FAILURE_MESSAGE)

        try:
            payload = response.json()
            access_token = str(payload["access_token"])
            expires_in = int(payload["expires_in"])
        except (ValueError, KeyError, TypeError) as e:
            self._logger.error(f"Malformed token endpoint response: {e}")
            raise AuthFailed(GENERIC_FAILURE_MESSAGE) from e

        with self._lock:
            self._credential.access_token = access_token
            self._credential.expires_at_ms = self._clock() + expires_in * 1000

        self._logger.info(f"Access token refreshed successfully (expires_in={expires_in}s)")
        return access_token


__all__ = ["CredentialManager", "AuthError", "AuthInvalid", "AuthFailed"]
