"""
Write safety & abuse protection.

Per-IP rate limiting for the favorites endpoints plus light input checks.
Uses in-memory state (no external deps, no background workers).
"""

import logging
import time
from collections import defaultdict
from typing import Optional

from .config.settings import FAVORITE_WRITES_PER_MINUTE

logger = logging.getLogger(__name__)

# ==================================================
# CONFIG
# ==================================================

RATE_LIMIT_WINDOW = 60  # seconds
MAX_NAME_LENGTH = 200

# ==================================================
# RATE LIMITER (in-memory)
# ==================================================

class RateLimiter:
    """Simple in-memory rate limiter per IP."""

    def __init__(self, max_requests: int, window_seconds: int):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.requests: dict[str, list[float]] = defaultdict(list)

    def is_allowed(self, ip: str) -> bool:
        """Return True if request is allowed, False if rate limited."""
        now = time.time()
        ips_requests = self.requests[ip]

        # Remove old timestamps outside the window
        ips_requests[:] = [t for t in ips_requests if now - t < self.window_seconds]

        if len(ips_requests) >= self.max_requests:
            logger.warning(f"Rate limit exceeded for {ip}")
            return False

        ips_requests.append(now)
        return True

    def reset(self) -> None:
        self.requests.clear()


favorite_limiter = RateLimiter(FAVORITE_WRITES_PER_MINUTE, RATE_LIMIT_WINDOW)


# ==================================================
# VALIDATION
# ==================================================


def validate_favorite(provider: str, name: str, size: Optional[int]) -> tuple[bool, Optional[str]]:
    """
    Validate a favorite write before it touches the database.
    Return (is_valid, error_message).
    """
    if not provider or not name:
        return False, "provider and name are required"
    if len(provider) > MAX_NAME_LENGTH or len(name) > MAX_NAME_LENGTH:
        return False, f"provider/name longer than {MAX_NAME_LENGTH} characters"
    if size is not None and not 1 <= size <= 1024:
        return False, f"size must be between 1 and 1024, got {size}"
    return True, None


# ==================================================
# IP EXTRACTION
# ==================================================


def get_client_ip(request) -> str:
    """
    Extract client IP from request.
    Handles X-Forwarded-For and direct connections.
    """
    # X-Forwarded-For for proxies / CDN
    if request.headers.get("x-forwarded-for"):
        return request.headers["x-forwarded-for"].split(",")[0].strip()

    # Direct connection
    if request.client:
        return request.client.host

    return "unknown"
