# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from admissions.domain.users.entities import Session, normalize_email
from admissions.domain.users.exceptions import InvalidCredentialsError
from admissions.domain.users.repositories import (
    Clock,
    PasswordHasher,
    SessionRepository,
    TokenIssuer,
    UserRepository,
)


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        sessions: SessionRepository,
        password_hasher: PasswordHasher,
        tokens: TokenIssuer,
        clock: Clock = lambda: datetime.now(UTC),
    ) -> None:
        self._users = users
        self._sessions = sessions
        self._password_hasher = password_hasher
        self._tokens = tokens
        self._clock = clock

    def execute(self, email: str, password: str) -> Session:
        user = self._users.find_by_email(normalize_email(email))
        password_valid = user and self._password_hasher.verify(password, user.password_hash)

        # same error for unknown email and wrong password
        if not user or not password_valid:
            raise InvalidCredentialsError()

        session = self._tokens.issue(user.id, self._clock())
        return self._sessions.add(session)
