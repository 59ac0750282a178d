"""
config.py

Central constants for Livelistarr.

This file intentionally contains ONLY:
- Constants
- Tunables
- Endpoints
- Regex patterns

It must NOT contain:
- Business logic
- API calls
- Validation / side effects

Runtime configuration (credentials, file locations, toggles) belongs in:
- env/env.py
- bootstrap.py
- runner.py (orchestration)
"""

from __future__ import annotations

import os
import re

# ============================================================
# OAUTH
# ============================================================

OAUTH_TOKEN_URL = "https://oauth2.googleapis.com/token"
OAUTH_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
YOUTUBE_OAUTH_SCOPES = ["https://www.googleapis.com/auth/youtube"]

# Cached access tokens are treated as expired this long before they really are.
TOKEN_REFRESH_BUFFER_SEC = 5 * 60

# ============================================================
# YOUTUBE API ENDPOINTS
# ============================================================

API_BASE_URL = "https://www.googleapis.com/youtube/v3"
SEARCH_URL = f"{API_BASE_URL}/search"
PLAYLISTS_URL = f"{API_BASE_URL}/playlists"
PLAYLIST_ITEMS_URL = f"{API_BASE_URL}/playlistItems"

PLAYLIST_URL_TEMPLATE = "https://www.youtube.com/playlist?list={playlist_id}"
VIDEO_URL_TEMPLATE = "https://youtube.com/watch?v={video_id}"
CHANNEL_URL_TEMPLATE = "https://youtube.com/channel/{channel_id}"

YOUTUBE_PAGE_SIZE = 50

# ============================================================
# REQUEST POLICY
# ============================================================

MAX_RETRIES = int(os.environ.get("YT_MAX_RETRIES", "3"))
BACKOFF_BASE_SEC = float(os.environ.get("YT_BACKOFF_BASE_SEC", "1.0"))

DEFAULT_REQUEST_TIMEOUT_SEC = 30
DEFAULT_MUTATION_PAUSE_SEC = 0.2

TRANSIENT_STATUS_CODES = frozenset({429})
QUOTA_REASONS = ("quotaExceeded", "dailyLimitExceeded")

# ============================================================
# IDENTIFIER PATTERNS
# ============================================================

PLAYLIST_ID_RE = re.compile(r"^PL[\w-]+$")
CHANNEL_ID_RE = re.compile(r"^UC[\w-]+$")

# ============================================================
# SNAPSHOT
# ============================================================

SNAPSHOT_KEY = "sync_snapshot"
