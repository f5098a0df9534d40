# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import math
import time
from collections import deque
from collections.abc import Callable
from functools import wraps
from threading import Lock

from flask import Request, jsonify, request

from admissions.shared.config import load_config
from admissions.shared.logging import logger


class InMemoryRateLimiter:
    """Sliding-window limiter keyed by caller; state lives in this process only."""

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = Lock()

    def hit(self, key: str) -> float:
        """Record a hit; returns 0 when allowed, else seconds until the next slot frees."""

        now = self._clock()
        with self._lock:
            hits = self._hits.setdefault(key, deque())
            while hits and now - hits[0] >= self._window:
                hits.popleft()
            if len(hits) >= self._limit:
                return self._window - (now - hits[0])
            hits.append(now)
            return 0.0


def _client_key(req: Request) -> str:
    forwarded = req.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    return forwarded or (req.remote_addr or "unknown")


def rate_limit(limit: int | None = None, window_seconds: float | None = None):
    """Reject with 429 once a client exceeds ``limit`` calls per window on one path."""

    security = load_config().security

    def decorator(f: Callable):
        if not security.enable_rate_limit:
            return f

        limiter = InMemoryRateLimiter(
            limit or security.rate_limit_requests,
            window_seconds or security.rate_limit_window,
        )

        @wraps(f)
        def wrapper(*args, **kwargs):
            retry_after = limiter.hit(f"{request.path}:{_client_key(request)}")
            if retry_after:
                logger.warning(f"rate_limit: rejected {request.method} {request.path}")
                response = jsonify({"error": "rate_limited", "message": "Too many requests"})
                response.headers["Retry-After"] = str(max(1, math.ceil(retry_after)))
                return response, 429
            return f(*args, **kwargs)

        return wrapper

    return decorator


__all__ = ["InMemoryRateLimiter", "rate_limit"]
