# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Security audit trail: every account event is logged, counted and stored."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from admissions.infrastructure.db.models import AuditLog
from admissions.infrastructure.db.session import SessionLocal
from admissions.infrastructure.observability import record_auth_event
from admissions.shared.logging import logger

_SENSITIVE_KEYS = ("password", "token", "otp", "code", "secret")
_DETAILS_LIMIT = 2048


class AuditAction(str, Enum):
    REGISTER = "register"
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    PASSWORD_RESET_REQUESTED = "password_reset_requested"
    PASSWORD_RESET_COMPLETED = "password_reset_completed"
    PASSWORD_RESET_FAILED = "password_reset_failed"


@dataclass(frozen=True, slots=True)
class AuditEvent:
    action: AuditAction
    success: bool = True
    user_id: int | None = None
    ip_address: str | None = None
    details: Mapping[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def redacted_details(self) -> dict[str, Any]:
        return {
            key: "***REDACTED***" if any(s in key.lower() for s in _SENSITIVE_KEYS) else value
            for key, value in self.details.items()
        }


class AuditLogger:
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def record(self, event: AuditEvent) -> None:
        details = event.redacted_details()
        message = (
            f"AUDIT: {event.action.value} | user_id={event.user_id} | "
            f"ip={event.ip_address} | success={event.success}"
        )
        if details:
            message += f" | details={details}"
        logger.log("INFO" if event.success else "WARNING", message)

        record_auth_event(event.action.value, event.success)
        self._store(event, details)

    def _store(self, event: AuditEvent, details: dict[str, Any]) -> None:
        details_json = json.dumps(details, default=str)[:_DETAILS_LIMIT] if details else None
        session = self._session_factory()
        try:
            session.add(
                AuditLog(
                    timestamp=event.timestamp,
                    action=event.action.value,
                    user_id=event.user_id,
                    ip_address=event.ip_address,
                    success=event.success,
                    details_json=details_json,
                )
            )
            session.commit()
        except SQLAlchemyError as exc:
            # a lost audit row must not fail the request that produced it
            session.rollback()
            logger.warning(f"audit: failed to store {event.action.value}: {type(exc).__name__}")
        finally:
            session.close()


audit = AuditLogger(SessionLocal)


def audit_log(
    action: AuditAction,
    *,
    user_id: int | None = None,
    ip_address: str | None = None,
    details: Mapping[str, Any] | None = None,
    success: bool = True,
) -> None:
    audit.record(
        AuditEvent(
            action=action,
            success=success,
            user_id=user_id,
            ip_address=ip_address,
            details=details or {},
        )
    )


__all__ = ["AuditAction", "AuditEvent", "AuditLogger", "audit", "audit_log"]
