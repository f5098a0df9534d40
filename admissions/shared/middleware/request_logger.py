# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
import secrets
import time
from collections.abc import Mapping

from flask import Flask, Response, g, request

from admissions.infrastructure.observability import observe_request
from admissions.shared.config import load_config
from admissions.shared.logging import clear_correlation_id, logger, set_correlation_id

REQUEST_ID_HEADER = "X-Request-ID"

_SECRET_HEADERS = frozenset({"authorization", "cookie", "x-api-key"})
_SECRET_PARAMS = ("password", "token", "otp", "secret")


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    return forwarded.split(",")[0].strip() or request.remote_addr or "unknown"


def _fingerprint(value: str) -> str:
    return f"<sha256:{hashlib.sha256(value.encode()).hexdigest()[:8]}>"


def _safe_headers(headers: Mapping[str, str]) -> dict[str, str]:
    return {
        key: _fingerprint(value) if key.lower() in _SECRET_HEADERS else value
        for key, value in headers.items()
    }


def _safe_params(params: Mapping[str, str]) -> dict[str, str]:
    return {
        key: "<redacted>" if any(p in key.lower() for p in _SECRET_PARAMS) else value
        for key, value in params.items()
    }


def configure_request_logging(app: Flask) -> None:
    """Correlation id, one log line per request and response, latency metrics."""

    verbose = load_config().debug_logging

    @app.before_request
    def _start() -> None:
        g.request_id = request.headers.get(REQUEST_ID_HEADER) or secrets.token_urlsafe(8)
        g.request_started = time.perf_counter()
        set_correlation_id(g.request_id)

        if verbose:
            logger.debug(
                f"-> {request.method} {request.path} from {_client_ip()} "
                f"query={_safe_params(request.args)} headers={_safe_headers(request.headers)}"
            )
        else:
            logger.info(f"-> {request.method} {request.path} from {_client_ip()}")

    @app.after_request
    def _finish(response: Response) -> Response:
        elapsed = time.perf_counter() - g.get("request_started", time.perf_counter())
        endpoint = request.url_rule.rule if request.url_rule else "unmatched"
        observe_request(endpoint, response.status_code, elapsed)

        user = f" user={g.user_id}" if g.get("user_id") else ""
        logger.info(
            f"<- {request.method} {request.path} status={response.status_code} "
            f"duration={elapsed * 1000.0:.1f}ms{user}"
        )
        if "request_id" in g:
            response.headers.setdefault(REQUEST_ID_HEADER, g.request_id)
        return response

    @app.teardown_request
    def _teardown(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"request failed: {type(exc).__name__} on {request.method} {request.path}")
        clear_correlation_id()


__all__ = ["REQUEST_ID_HEADER", "configure_request_logging"]
