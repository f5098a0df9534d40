# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Protocol

from .entities import PasswordResetRequest, Session, User

Clock = Callable[[], datetime]


class UserRepository(Protocol):
    def find_by_email(self, email: str) -> User | None: ...
    def find_by_id(self, user_id: int) -> User | None: ...
    def add(self, user: User) -> User: ...
    def update_password(self, user_id: int, password_hash: str) -> bool: ...


class SessionRepository(Protocol):
    def add(self, session: Session) -> Session: ...


class PasswordResetRepository(Protocol):
    def replace_for_user(self, request: PasswordResetRequest) -> PasswordResetRequest: ...
    def find_active(
        self, user_id: int, code: str, now: datetime
    ) -> PasswordResetRequest | None: ...

    def redeem(self, user_id: int, code: str, password_hash: str, now: datetime) -> bool:
        """Replace the user's password hash and consume the code in one transaction.

        Returns ``False`` and changes nothing when no unexpired request matches.
        """
        ...

    def purge_expired(self, now: datetime) -> int: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class CodeGenerator(Protocol):
    def generate(self) -> str: ...


class TokenIssuer(Protocol):
    def issue(self, user_id: int, now: datetime) -> Session: ...
    def decode(self, token: str) -> int: ...


class Notifier(Protocol):
    def send(self, to_address: str, subject: str, html_body: str) -> bool: ...
