"""
api_manager.py

Request execution and HTTP error translation.

Responsibilities:
- Token injection (one fresh lookup per attempt)
- Retry logic with exponential backoff
- HTTP → domain error translation

Does NOT:
- Know anything about playlists or channels
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional, TypeVar

import requests

import config
from auth.credentials import CredentialManager
from logger import get_logger


T = TypeVar("T")

# ============================================================
# Exceptions
# ============================================================


class RequestError(Exception):
    """Outbound API call failed."""

    def __init__(self, message: str, *, status: Optional[int] = None, label: str = ""):
        super().__init__(message)
        self.status = status
        self.label = label


class TransientRequestError(RequestError):
    """No response, 429 or 5xx. Worth retrying."""


class TerminalRequestError(RequestError):
    """Any other 4xx. Retrying will not help."""


class QuotaExhaustedError(TerminalRequestError):
    """403 whose payload reports the daily quota is spent."""


# ============================================================
# Error detection helpers
# ============================================================


def _is_quota_payload(data: Any) -> bool:
    """
    YouTube quota errors are reliably signaled here:
    error.errors[].reason in ('quotaExceeded', 'dailyLimitExceeded')
    """
    if not isinstance(data, dict):
        return False
    error = data.get("error")
    if not isinstance(error, dict):
        return False
    for err in error.get("errors") or []:
        if isinstance(err, dict) and err.get("reason") in config.QUOTA_REASONS:
            return True
    return False


def is_transient_status(status_code: int) -> bool:
    return status_code in config.TRANSIENT_STATUS_CODES or status_code >= 500


def _error_reason(response: requests.Response) -> str:
    try:
        data = response.json()
        message = data.get("error", {}).get("message")
        if message:
            return str(message)
    except (ValueError, AttributeError):
        pass
    return (response.text or "")[:300]


def raise_for_response(response: requests.Response, label: str = "") -> None:
    """Translate a non-2xx response into the RequestError family."""
    status = response.status_code
    if status < 400:
        return

    reason = _error_reason(response)
    message = f"{label or 'request'} failed with HTTP {status}: {reason}".rstrip(": ")

    if is_transient_status(status):
        raise TransientRequestError(message, status=status, label=label)

    if status == 403:
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if _is_quota_payload(payload):
            raise QuotaExhaustedError(message, status=status, label=label)

    raise TerminalRequestError(message, status=status, label=label)


def should_retry(exc: BaseException) -> bool:
    """
    Network-level failure (no response) → retry.
    429 / 5xx → retry.
    Anything else → fail immediately.
    """
    if isinstance(exc, TransientRequestError):
        return True
    if isinstance(exc, RequestError):
        return False
    if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
        return True
    if isinstance(exc, requests.HTTPError) and exc.response is not None:
        return is_transient_status(exc.response.status_code)
    return False


# ============================================================
# Retry engine
# ============================================================


class ResilientExecutor:
    """
    Wraps every outbound call: fetch a valid token, run the operation,
    retry transient failures with exponential backoff (no jitter).

    Delay before attempt n (0-indexed, n >= 1) is base * 2**(n-1):
    1s, 2s, ... for the default base of 1s.
    """

    def __init__(
        self,
        credentials: CredentialManager,
        *,
        max_attempts: int = config.MAX_RETRIES,
        backoff_base_sec: float = config.BACKOFF_BASE_SEC,
        sleep: Callable[[float], None] = time.sleep,
        logger: Optional[logging.Logger] = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self._credentials = credentials
        self._max_attempts = max_attempts
        self._backoff_base_sec = backoff_base_sec
        self._sleep = sleep
        self._logger = logger or get_logger("providers.youtube.api_manager")

    def backoff_delay(self, attempt: int) -> float:
        """Delay to wait after failed attempt `attempt` (0-indexed)."""
        return self._backoff_base_sec * (2**attempt)

    def execute(self, operation: Callable[[str], T], label: str = "") -> T:
        """
        Run `operation(access_token)` with bounded retries.

        Auth failures and non-retryable errors propagate immediately. When
        every attempt fails transiently the last error is re-raised as-is.
        """
        attempt = 0
        while True:
            token = self._credentials.get_valid_token()

            try:
                return operation(token)
            except Exception as e:
                if not should_retry(e):
                    raise

                if attempt >= self._max_attempts - 1:
                    self._logger.error(
                        f"{label} failed after {self._max_attempts} attempts: {e}"
                    )
                    raise

                delay = self.backoff_delay(attempt)
                self._logger.warning(
                    f"{label} failed (attempt {attempt + 1}/{self._max_attempts}), "
                    f"retrying in {delay:g}s: {e}"
                )

            self._sleep(delay)
            attempt += 1
