# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from admissions.domain.exceptions import InvariantViolation

RESET_CODE_LENGTH = 6
RESET_CODE_MIN = 100_000
RESET_CODE_MAX = 999_999


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_reset_code(code: str) -> bool:
    return (
        len(code) == RESET_CODE_LENGTH
        and code.isascii()
        and code.isdigit()
        and RESET_CODE_MIN <= int(code) <= RESET_CODE_MAX
    )


@dataclass(slots=True, frozen=True)
class User:

    id: int
    email: str
    username: str
    password_hash: str
    created_at: datetime


@dataclass(slots=True, frozen=True)
class Session:
    """Record of an issued bearer token, kept for auditing only."""

    user_id: int
    token: str
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class PasswordResetRequest:
    """A one-time reset code issued to a user; immutable once created."""

    user_id: int
    code: str
    expires_at: datetime
    created_at: datetime
    id: int = 0

    def __post_init__(self) -> None:
        if not is_valid_reset_code(self.code):
            raise InvariantViolation("must be six digits in 100000-999999", field="code")
        if self.expires_at <= self.created_at:
            raise InvariantViolation("must be after created_at", field="expires_at")

    @classmethod
    def issue(
        cls, *, user_id: int, code: str, now: datetime, ttl: timedelta
    ) -> PasswordResetRequest:
        return cls(user_id=user_id, code=code, expires_at=now + ttl, created_at=now)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def matches(self, user_id: int, code: str, now: datetime) -> bool:
        return self.user_id == user_id and self.code == code and not self.is_expired(now)
