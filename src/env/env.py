from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import config
from env.paths import config_dir
from pipeline.errors import ConfigurationError


# ------------------------------------------------------------
# Errors / helpers
# ------------------------------------------------------------


class ConfigError(ConfigurationError):
    """Required runtime environment is missing or malformed."""


_OAUTH_VARS = (
    "YOUTUBE_OAUTH_CLIENT_ID",
    "YOUTUBE_OAUTH_CLIENT_SECRET",
    "YOUTUBE_OAUTH_REFRESH_TOKEN",
)


def _as_bool(v: str) -> bool:
    return v.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(v: str, default: int) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def _as_float(v: str, default: float) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        return default


def _redact(v: Optional[str]) -> str:
    if not v:
        return "(not set)"
    return f"(set, {len(v)} chars)"


# ------------------------------------------------------------
# Logging environment (SAFE ANYWHERE)
# ------------------------------------------------------------


@dataclass(frozen=True)
class LoggingEnvironment:
    log_level: str
    log_retention: int
    verbose: bool
    quiet: bool


def get_logging_env() -> LoggingEnvironment:
    return LoggingEnvironment(
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        log_retention=_as_int(os.environ.get("LOG_RETENTION", "30"), 30),
        verbose=_as_bool(os.environ.get("LIVELISTARR_VERBOSE", "0")),
        quiet=_as_bool(os.environ.get("LIVELISTARR_QUIET", "0")),
    )


# ------------------------------------------------------------
# OAuth credentials
# ------------------------------------------------------------


@dataclass(frozen=True)
class OAuthSettings:
    client_id: str
    client_secret: str
    refresh_token: str


# ------------------------------------------------------------
# Full runtime environment (PIPELINE ONLY)
# ------------------------------------------------------------


class Environment:
    def __init__(self):
        self._logging = get_logging_env()

        # ---- OAUTH (validated lazily, `auth setup` needs only id/secret) ----
        self.client_id = os.environ.get("YOUTUBE_OAUTH_CLIENT_ID", "").strip()
        self.client_secret = os.environ.get("YOUTUBE_OAUTH_CLIENT_SECRET", "").strip()
        self.refresh_token = os.environ.get("YOUTUBE_OAUTH_REFRESH_TOKEN", "").strip()

        # ---- PIPELINE CONTEXT ----
        self.command = os.environ.get("LIVELISTARR_COMMAND", "bootstrap")
        raw_playlists = os.environ.get("LIVELISTARR_PLAYLISTS_FILE", "")
        self.playlists_file = (
            Path(raw_playlists).expanduser()
            if raw_playlists
            else config_dir() / "playlists.json"
        )

        # ---- REQUEST BEHAVIOR ----
        self.request_timeout = _as_int(
            os.environ.get("YT_REQUEST_TIMEOUT", ""),
            config.DEFAULT_REQUEST_TIMEOUT_SEC,
        )
        self.mutation_pause_sec = _as_float(
            os.environ.get("LIVELISTARR_MUTATION_PAUSE_SEC", ""),
            config.DEFAULT_MUTATION_PAUSE_SEC,
        )

        # ---- OUTPUT TOGGLES ----
        report = os.environ.get("ENABLE_SYNC_REPORT", "")
        self.enable_report = True if report == "" else report.lower() == "true"
        self.snapshot_enabled = _as_bool(os.environ.get("LIVELISTARR_SNAPSHOT", "1"))

    def oauth_credentials(self) -> OAuthSettings:
        missing = [name for name in _OAUTH_VARS if not os.environ.get(name, "").strip()]
        if missing:
            raise ConfigError(
                "OAuth credentials not configured. Please set "
                + ", ".join(missing)
                + "."
            )
        return OAuthSettings(
            client_id=self.client_id,
            client_secret=self.client_secret,
            refresh_token=self.refresh_token,
        )

    def as_dict(self) -> dict:
        return {
            "Logging": {
                "log_level": self.log_level,
                "log_retention": self.log_retention,
                "verbose": self.verbose,
                "quiet": self.quiet,
            },
            "Pipeline": {
                "command": self.command,
                "playlists_file": str(self.playlists_file),
            },
            "Behavior": {
                "request_timeout": self.request_timeout,
                "mutation_pause_sec": self.mutation_pause_sec,
                "enable_report": self.enable_report,
                "snapshot_enabled": self.snapshot_enabled,
            },
            "OAuth": {
                "client_id": _redact(self.client_id),
                "client_secret": _redact(self.client_secret),
                "refresh_token": _redact(self.refresh_token),
            },
        }

    # ---- logging passthrough ----
    @property
    def log_level(self) -> str:
        return self._logging.log_level

    @property
    def log_retention(self) -> int:
        return self._logging.log_retention

    @property
    def verbose(self) -> bool:
        return self._logging.verbose

    @property
    def quiet(self) -> bool:
        return self._logging.quiet


_ENV: Optional[Environment] = None


def reset_env_caches() -> None:
    """Invalidate cached views of environment variables."""
    global _ENV
    _ENV = None


def get_env() -> Environment:
    global _ENV
    if _ENV is None:
        _ENV = Environment()
    return _ENV
