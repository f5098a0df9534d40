# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Use-case resolving a bearer token to its user."""

from __future__ import annotations

from admissions.domain.users.entities import User
from admissions.domain.users.repositories import TokenIssuer, UserRepository
from admissions.shared.errors import UnauthorizedError


class AuthenticateUserUseCase:
    def __init__(self, *, users: UserRepository, tokens: TokenIssuer) -> None:
        self._users = users
        self._tokens = tokens

    def execute(self, token: str) -> User:
        if not token:
            raise UnauthorizedError()
        user_id = self._tokens.decode(token)
        user = self._users.find_by_id(user_id)
        if not user:
            raise UnauthorizedError()
        return user
