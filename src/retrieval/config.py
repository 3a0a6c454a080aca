"""Central configuration constants for talking to GitHub and the local git clone."""

from __future__ import annotations

import os
from typing import List

from src.secrets import load_local_secrets, resolve_github_tokens

_SECRETS = load_local_secrets()
GITHUB_TOKENS: List[str] = resolve_github_tokens(_SECRETS)
USER_AGENT = "tag-changelog/1.0"
BASE_URL = os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip("/")
PER_PAGE = 100
REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "30"))
MAX_RETRIES = max(3, len(GITHUB_TOKENS) * 2)
BACKOFF_BASE_SEC = 2
MAX_WAIT_ON_403 = int(os.getenv("MAX_WAIT_ON_403", "180"))
MAX_PAGES_PRS = int(os.getenv("MAX_PAGES_PRS", "0"))  # 0 = no cap
# The compare endpoint returns at most this many commits and does not paginate.
COMPARE_COMMITS_CAP = 250
GIT_BINARY = os.getenv("GIT_BINARY", "git")

__all__ = [
    "GITHUB_TOKENS",
    "USER_AGENT",
    "BASE_URL",
    "PER_PAGE",
    "REQUEST_TIMEOUT",
    "MAX_RETRIES",
    "BACKOFF_BASE_SEC",
    "MAX_WAIT_ON_403",
    "MAX_PAGES_PRS",
    "COMPARE_COMMITS_CAP",
    "GIT_BINARY",
]
