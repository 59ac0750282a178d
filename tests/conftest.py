import logging

import pytest


@pytest.fixture(autouse=True)
def clean_env_and_logging(tmp_path, monkeypatch):
    """
    Ensure tests don't leak env, logger state, or cached env views.
    """

    keys = [
        "LIVELISTARR_LOGS_DIR",
        "LIVELISTARR_OUT_DIR",
        "LIVELISTARR_CONFIG_DIR",
        "LIVELISTARR_COMMAND",
        "LIVELISTARR_RUN_ID",
        "LIVELISTARR_VERBOSE",
        "LIVELISTARR_QUIET",
        "LIVELISTARR_PLAYLISTS_FILE",
        "LIVELISTARR_MUTATION_PAUSE_SEC",
        "LIVELISTARR_SNAPSHOT",
        "ENABLE_SYNC_REPORT",
        "YT_REQUEST_TIMEOUT",
        "LOG_LEVEL",
        "LOG_RETENTION",
        "YOUTUBE_OAUTH_CLIENT_ID",
        "YOUTUBE_OAUTH_CLIENT_SECRET",
        "YOUTUBE_OAUTH_REFRESH_TOKEN",
    ]
    for k in keys:
        monkeypatch.delenv(k, raising=False)

    # Every filesystem side effect lands in tmp
    monkeypatch.setenv("LIVELISTARR_LOGS_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("LIVELISTARR_OUT_DIR", str(tmp_path / "out"))
    monkeypatch.setenv("LIVELISTARR_CONFIG_DIR", str(tmp_path / "config"))

    # No pauses between mutations
    monkeypatch.setenv("LIVELISTARR_MUTATION_PAUSE_SEC", "0")

    # Reset logger global state
    import logger.state

    logger.state.INITIALIZED = False
    logger.state.RUN_ID = None
    logger.state.LOG_DIR = None
    logger.state.LOG_FILE_PATH = None

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    from env import reset_env_caches

    reset_env_caches()
    yield
    reset_env_caches()


@pytest.fixture
def playlists_file(tmp_path):
    """Write a playlists.json and return its path."""
    import json

    def _write(data, name="playlists.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
