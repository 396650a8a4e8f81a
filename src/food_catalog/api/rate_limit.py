"""Per-IP sliding window rate limiting."""

import logging
import time
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitRule:
    """Request budget for paths under a prefix."""

    prefix: str
    max_requests: int
    window_seconds: float
    message: str = "Too many requests from this IP, please try again later."


class RateLimitMiddleware(BaseHTTPMiddleware):
    """In-memory sliding window limiter applying every matching rule.

    State lives in the process, so limits are per worker.
    """

    def __init__(
        self,
        app: ASGIApp,
        rules: list[RateLimitRule],
        clock: Callable[[], float] = time.monotonic,
        sweep_interval_seconds: float = 60.0,
    ) -> None:
        super().__init__(app)
        self.rules = rules
        self.clock = clock
        self.sweep_interval_seconds = sweep_interval_seconds
        self._windows = {rule.prefix: rule.window_seconds for rule in rules}
        self._requests: dict[tuple[str, str], list[float]] = defaultdict(list)
        self._last_sweep = clock()

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        matching = [rule for rule in self.rules if path.startswith(rule.prefix)]
        if not matching or request.method == "OPTIONS":
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = self.clock()
        if now - self._last_sweep >= self.sweep_interval_seconds:
            self.sweep(now)
        for rule in matching:
            key = (rule.prefix, client_ip)
            window_start = now - rule.window_seconds
            recent = self._requests.get(key, [])
            timestamps = [ts for ts in recent if ts > window_start]
            if timestamps:
                self._requests[key] = timestamps
            else:
                self._requests.pop(key, None)
            if len(timestamps) >= rule.max_requests:
                retry_after = int(timestamps[0] + rule.window_seconds - now) + 1
                _logger.warning(
                    "Rate limit exceeded: ip=%s prefix=%s requests=%s",
                    client_ip,
                    rule.prefix,
                    len(timestamps),
                )
                return JSONResponse(
                    status_code=429,
                    content={"success": False, "message": rule.message},
                    headers={"Retry-After": str(retry_after)},
                )

        for rule in matching:
            self._requests[(rule.prefix, client_ip)].append(now)
        return await call_next(request)

    def sweep(self, now: float) -> None:
        """Drop clients with no requests inside their rule's window."""
        for key, timestamps in list(self._requests.items()):
            window_start = now - self._windows.get(key[0], 0.0)
            if not timestamps or timestamps[-1] <= window_start:
                del self._requests[key]
        self._last_sweep = now

    @property
    def tracked_clients(self) -> int:
        """Number of (prefix, ip) pairs currently held in memory."""
        return len(self._requests)
