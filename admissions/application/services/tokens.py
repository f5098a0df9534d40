# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed bearer tokens for authenticated requests."""

from __future__ import annotations

from datetime import datetime, timedelta

import jwt

from admissions.domain.users.entities import Session
from admissions.domain.users.repositories import TokenIssuer
from admissions.shared.config import AuthConfig
from admissions.shared.errors import UnauthorizedError
from admissions.shared.logging import logger


class JwtTokenIssuer(TokenIssuer):
    def __init__(self, config: AuthConfig) -> None:
        self._secret = config.jwt_secret
        self._algorithm = config.jwt_algorithm
        self._lifetime = timedelta(hours=config.access_token_ttl_hours)

    def issue(self, user_id: int, now: datetime) -> Session:
        expires_at = now + self._lifetime
        payload = {
            "sub": str(user_id),
            "iat": now,
            "exp": expires_at,
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        return Session(user_id=user_id, token=token, expires_at=expires_at)

    def decode(self, token: str) -> int:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError as exc:
            logger.info("tokens: expired token rejected")
            raise UnauthorizedError() from exc
        except jwt.InvalidTokenError as exc:
            logger.warning(f"tokens: invalid token rejected ({type(exc).__name__})")
            raise UnauthorizedError() from exc

        try:
            return int(payload["sub"])
        except (TypeError, ValueError) as exc:
            raise UnauthorizedError() from exc
