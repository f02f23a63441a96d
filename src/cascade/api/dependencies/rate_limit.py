"""
Per-client request limiting for the chat endpoint.

Counts requests per client in fixed windows with the ``limits`` library
(the engine slowapi is built on). The limiter is owned by the application
instance (``app.state.rate_limiter``) and handed to endpoints through a
dependency, so tests and alternative deployments can swap its storage.
"""

from typing import Optional

from fastapi import Request
from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage, Storage
from limits.strategies import FixedWindowRateLimiter


class RateLimiter:
    """
    Fixed-window counter keyed by client identifier.

    The window opens on a client's first request. Every request is counted,
    including rejected ones. The default ``MemoryStorage`` lives for the life
    of the process; pass a shared storage to scale out.
    """

    def __init__(self, max_requests: int = 10, window_seconds: float = 60, storage: Optional[Storage] = None):
        self.max_requests = max_requests
        self.window_seconds = int(window_seconds)
        self.item = RateLimitItemPerSecond(max_requests, self.window_seconds)
        self.storage = storage or MemoryStorage()
        self._strategy = FixedWindowRateLimiter(self.storage)

    def is_rate_limited(self, client_id: str) -> bool:
        """Record one request for ``client_id`` and report whether it is over the limit."""
        return not self._strategy.hit(self.item, client_id)

    def window_stats(self, client_id: str):
        """``(reset_time, remaining)`` for the client's current window."""
        return self._strategy.get_window_stats(self.item, client_id)

    def reset(self):
        self.storage.reset()


def client_identifier(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


# FastAPI dependency functions
def get_rate_limiter(request: Request) -> RateLimiter:
    """FastAPI dependency to get the rate limiter owned by the app."""
    return request.app.state.rate_limiter
