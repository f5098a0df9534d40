# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps

from flask import g, request

from admissions.application.use_cases.users.authenticate_user import AuthenticateUserUseCase
from admissions.shared.errors import UnauthorizedError
from admissions.shared.logging import logger


def bearer_token() -> str:
    auth = request.headers.get("Authorization", "")
    if auth[:7].lower() == "bearer ":
        return auth[7:].strip()
    return ""


def bearer_required(authenticate: AuthenticateUserUseCase) -> Callable:
    """Resolve the bearer token to ``g.current_user`` or reject with 401."""

    def decorator(f: Callable) -> Callable:
        @wraps(f)
        def inner(*a, **kw):
            token = bearer_token()
            if not token:
                logger.warning(
                    f"No Authorization header on {request.method} {request.path} "
                    f"from {request.headers.get('X-Forwarded-For', request.remote_addr)}"
                )
                raise UnauthorizedError()

            user = authenticate.execute(token)
            g.user_id = user.id
            g.current_user = user
            logger.debug(f"Auth OK: user={user.id} {request.method} {request.path}")
            return f(*a, **kw)

        return inner

    return decorator
