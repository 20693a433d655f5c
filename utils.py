#!/usr/bin/env python3
"""Utility functions for rename-default-branch."""

import os
import subprocess
import threading
import time
from typing import List, Optional

from logging_utils import Logger

TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")


class RateLimiter:
    """Rate limiter to prevent abuse and respect API limits."""

    def __init__(self, max_requests_per_minute: int = 60):
        self.max_requests = max_requests_per_minute
        self.requests: List[float] = []
        self.lock = threading.Lock()

    def wait_if_needed(self, operation_type: str = "API") -> None:
        """Wait if necessary to respect rate limits."""
        current_time = time.time()

        with self.lock:
            self._clean_old_requests(current_time)
            if len(self.requests) >= self.max_requests:
                wait_time = 60 - (current_time - self.requests[0])
                if wait_time > 0:
                    Logger.security_event(
                        "RATE_LIMIT_HIT",
                        f"rate limit reached for {operation_type}, "
                        f"waiting {wait_time:.2f}s",
                    )
                    time.sleep(wait_time)
                    current_time = time.time()
                    self._clean_old_requests(current_time)
            self.requests.append(current_time)

    def _clean_old_requests(self, current_time: float) -> None:
        """Remove requests older than 1 minute."""
        cutoff_time = current_time - 60
        self.requests = [
            req_time for req_time in self.requests if req_time > cutoff_time
        ]


def token_from_gh_cli() -> Optional[str]:
    """Return the token the GitHub CLI is logged in with, if any."""
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            check=False,
            capture_output=True,
            text=True,
            timeout=30,
        )
    except (OSError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def discover_token(explicit: Optional[str]) -> Optional[str]:
    """Resolve the API token from the flag, the environment, then ``gh``."""
    if explicit:
        return explicit
    for var in TOKEN_ENV_VARS:
        value = os.getenv(var)
        if value:
            return value
    token = token_from_gh_cli()
    if token:
        Logger.debug("using credentials of the gh CLI")
    return token
