"""
NoteNest — Auth Rate Limiting Middleware
==========================================

What:  Per-IP sliding-window limit on credential submissions.
Why:   Sign-in and sign-up hit Supabase Auth, which has its own quotas. Bursts
       of guesses from one address are rejected here before they cost a call.
How:   Only POST /api/login and POST /api/register are counted. Each IP keeps
       the timestamps of its recent attempts; those older than the window are
       dropped on every check. At the limit the request gets a 429 with a
       Retry-After header.

Single-process only: the counters live in this worker's memory.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from notenest.config import settings
from notenest.exceptions import RateLimitExceededError
from notenest.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

LIMITED_ROUTES = {("POST", "/api/login"), ("POST", "/api/register")}


class AuthRateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(app, **kwargs)
        self.max_requests = max_requests or settings.auth_rate_limit_requests
        self.window_seconds = window_seconds or settings.auth_rate_limit_window
        self._attempts: Dict[str, List[float]] = defaultdict(list)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if (request.method, request.url.path) not in LIMITED_ROUTES:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        try:
            self.check(client_ip)
        except RateLimitExceededError as e:
            logger.warning(
                "Auth rate limit exceeded for %s on %s (%d in %ds)",
                client_ip,
                request.url.path,
                self.max_requests,
                self.window_seconds,
            )
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": e.message,
                    "details": e.context,
                    "request_id": request_id_var.get(""),
                },
                headers={"Retry-After": str(e.retry_after)},
            )
        return await call_next(request)

    def check(self, client_ip: str, now: Optional[float] = None) -> None:
        """Record one attempt for `client_ip` or raise RateLimitExceededError."""
        now = time.time() if now is None else now
        window_start = now - self.window_seconds

        recent = [ts for ts in self._attempts[client_ip] if ts > window_start]
        self._attempts[client_ip] = recent

        if len(recent) >= self.max_requests:
            retry_after = int(recent[0] + self.window_seconds - now) + 1
            raise RateLimitExceededError(retry_after=retry_after)

        recent.append(now)
        self._forget_idle(window_start)

    def _forget_idle(self, window_start: float) -> None:
        idle = [
            ip for ip, stamps in self._attempts.items()
            if not stamps or stamps[-1] <= window_start
        ]
        for ip in idle:
            del self._attempts[ip]
