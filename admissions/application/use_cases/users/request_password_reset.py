# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from html import escape

from admissions.domain.users.entities import PasswordResetRequest, normalize_email
from admissions.domain.users.exceptions import MailDeliveryError, UserNotFoundError
from admissions.domain.users.repositories import (
    Clock,
    CodeGenerator,
    Notifier,
    PasswordResetRepository,
    UserRepository,
)
from admissions.shared.logging import logger

RESET_SUBJECT = "Password Reset OTP"


def render_reset_email(code: str, ttl: timedelta) -> str:
    minutes = int(ttl.total_seconds() // 60)
    return (
        f"<h2>Your OTP: {escape(code)}</h2>"
        f"<p>This OTP will expire in {minutes} minutes.</p>"
    )


class RequestPasswordResetUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        resets: PasswordResetRepository,
        codes: CodeGenerator,
        notifier: Notifier,
        ttl: timedelta = timedelta(minutes=10),
        clock: Clock = lambda: datetime.now(UTC),
    ) -> None:
        self._users = users
        self._resets = resets
        self._codes = codes
        self._notifier = notifier
        self._ttl = ttl
        self._clock = clock

    def execute(self, email: str) -> PasswordResetRequest:
        email = normalize_email(email)
        user = self._users.find_by_email(email)
        if not user:
            raise UserNotFoundError()

        request = PasswordResetRequest.issue(
            user_id=user.id,
            code=self._codes.generate(),
            now=self._clock(),
            ttl=self._ttl,
        )
        persisted = self._resets.replace_for_user(request)

        try:
            delivered = self._notifier.send(
                user.email, RESET_SUBJECT, render_reset_email(persisted.code, self._ttl)
            )
        except Exception as exc:
            logger.exception(f"password_reset: notifier raised for user_id={user.id}")
            raise MailDeliveryError() from exc
        if not delivered:
            logger.error(f"password_reset: delivery failed for user_id={user.id}")
            raise MailDeliveryError()

        logger.info(
            f"password_reset: code issued user_id={user.id} "
            f"expires_at={persisted.expires_at.isoformat()}"
        )
        return persisted
