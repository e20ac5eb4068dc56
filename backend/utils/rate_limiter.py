import os
import time
from collections import defaultdict, deque
from typing import Deque, Dict

from fastapi import Request, HTTPException, status


class RateLimiter:
    """Sliding-window limiter keyed by client IP, used as a FastAPI dependency."""

    def __init__(self, requests_limit: int, time_window: int):
        self.requests_limit = requests_limit
        self.time_window = time_window  # in seconds
        self.hits: Dict[str, Deque[float]] = defaultdict(deque)
        self.last_sweep = time.monotonic()

    @staticmethod
    def client_key(request: Request) -> str:
        # First address in X-Forwarded-For is the original client when behind a proxy
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
        if request.client and request.client.host:
            return request.client.host
        return "127.0.0.1"

    async def __call__(self, request: Request):
        now = time.monotonic()
        if now - self.last_sweep >= self.time_window:
            self.sweep(now)

        window = self.hits[self.client_key(request)]
        while window and now - window[0] >= self.time_window:
            window.popleft()

        if len(window) >= self.requests_limit:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests. Please try again later."
            )

        window.append(now)
        return True

    def sweep(self, now: float):
        """Drop clients whose most recent hit has left the window."""
        stale = [key for key, window in self.hits.items() if not window or now - window[-1] >= self.time_window]
        for key in stale:
            del self.hits[key]
        self.last_sweep = now

    def reset(self):
        self.hits.clear()


# In-memory only; a multi-process deployment would need a shared store.
auth_rate_limiter = RateLimiter(
    requests_limit=int(os.getenv("AUTH_RATE_LIMIT", "5")), time_window=60
)

password_reset_rate_limiter = RateLimiter(
    requests_limit=int(os.getenv("PASSWORD_RESET_RATE_LIMIT", "3")), time_window=3600
)
