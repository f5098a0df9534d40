"""Use-case deleting reset requests that can no longer be redeemed."""

from __future__ import annotations

from datetime import UTC, datetime

from admissions.domain.users.repositories import Clock, PasswordResetRepository


class PurgeExpiredResetsUseCase:
    def __init__(
        self,
        *,
        resets: PasswordResetRepository,
        clock: Clock = lambda: datetime.now(UTC),
    ) -> None:
        self._resets = resets
        self._clock = clock

    def execute(self) -> int:
        return self._resets.purge_expired(self._clock())
