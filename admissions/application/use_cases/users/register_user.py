# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from admissions.domain.users.entities import User, normalize_email
from admissions.domain.users.exceptions import UserAlreadyExistsError
from admissions.domain.users.repositories import Clock, PasswordHasher, UserRepository


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        clock: Clock = lambda: datetime.now(UTC),
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._clock = clock

    def execute(self, email: str, password: str, username: str) -> User:
        email = normalize_email(email)
        if self._users.find_by_email(email):
            raise UserAlreadyExistsError()
        hashed = self._password_hasher.hash(password)
        user = User(
            id=0,
            email=email,
            username=username,
            password_hash=hashed,
            created_at=self._clock(),
        )
        return self._users.add(user)
