from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Malformed input configuration. Aborts the run before any network call."""
