# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from admissions.domain.users.entities import User, normalize_email
from admissions.domain.users.exceptions import InvalidOrExpiredCodeError, UserNotFoundError
from admissions.domain.users.repositories import (
    Clock,
    PasswordHasher,
    PasswordResetRepository,
    UserRepository,
)
from admissions.shared.logging import logger


class ResetPasswordUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        resets: PasswordResetRepository,
        password_hasher: PasswordHasher,
        clock: Clock = lambda: datetime.now(UTC),
    ) -> None:
        self._users = users
        self._resets = resets
        self._password_hasher = password_hasher
        self._clock = clock

    def execute(self, email: str, code: str, new_password: str) -> User:
        user = self._users.find_by_email(normalize_email(email))
        if not user:
            raise UserNotFoundError()

        now = self._clock()
        if not self._resets.find_active(user.id, code, now):
            raise InvalidOrExpiredCodeError()

        hashed = self._password_hasher.hash(new_password)
        # a concurrent reset may consume the code between lookup and redeem
        if not self._resets.redeem(user.id, code, hashed, now):
            logger.info(f"password_reset: code already consumed for user_id={user.id}")
            raise InvalidOrExpiredCodeError()

        logger.info(f"password_reset: password updated user_id={user.id}")
        return user
