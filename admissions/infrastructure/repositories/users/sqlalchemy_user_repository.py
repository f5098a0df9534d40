# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session as DbSession

from admissions.domain.users.entities import PasswordResetRequest as DomainPasswordReset
from admissions.domain.users.entities import Session as DomainSession
from admissions.domain.users.entities import User as DomainUser
from admissions.domain.users.exceptions import UserAlreadyExistsError
from admissions.domain.users.repositories import (
    PasswordResetRepository,
    SessionRepository,
    UserRepository,
)
from admissions.infrastructure.db.models import PasswordReset, Session, User
from admissions.infrastructure.db.session import session_scope
from admissions.infrastructure.unit_of_work import SqlAlchemyUnitOfWork
from admissions.shared.logging import logger


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo; every stored timestamp is UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _to_domain_user(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        email=row.email,
        username=row.username,
        password_hash=row.password_hash,
        created_at=_as_utc(row.created_at),
    )


def _to_domain_reset(row: PasswordReset) -> DomainPasswordReset:
    return DomainPasswordReset(
        id=row.id,
        user_id=row.user_id,
        code=row.otp,
        expires_at=_as_utc(row.expires_at),
        created_at=_as_utc(row.created_at),
    )


class SqlAlchemyUserRepository(UserRepository):
    def find_by_email(self, email: str) -> DomainUser | None:
        with session_scope() as session:
            row = session.scalars(select(User).where(User.email == email)).first()
            return _to_domain_user(row) if row else None

    def find_by_id(self, user_id: int) -> DomainUser | None:
        with session_scope() as session:
            row = session.get(User, user_id)
            return _to_domain_user(row) if row else None

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with session_scope() as session:
                row = User(
                    email=user.email,
                    username=user.username,
                    password_hash=user.password_hash,
                    created_at=user.created_at,
                )
                session.add(row)
                session.flush()
                session.refresh(row)
                return _to_domain_user(row)
        except IntegrityError as exc:
            # users.email is the only unique column besides the key
            logger.info("users: insert lost to a concurrent registration")
            raise UserAlreadyExistsError() from exc

    def update_password(self, user_id: int, password_hash: str) -> bool:
        with session_scope() as session:
            updated = session.execute(
                update(User).where(User.id == user_id).values(password_hash=password_hash)
            ).rowcount
            return bool(updated)


class SqlAlchemySessionRepository(SessionRepository):
    def add(self, session_record: DomainSession) -> DomainSession:
        with session_scope() as session:
            session.add(
                Session(
                    user_id=session_record.user_id,
                    token=session_record.token,
                    expires_at=session_record.expires_at,
                )
            )
        return session_record


class SqlAlchemyPasswordResetRepository(PasswordResetRepository):
    def __init__(self, session_factory: Callable[[], DbSession]) -> None:
        self._session_factory = session_factory

    def replace_for_user(self, request: DomainPasswordReset) -> DomainPasswordReset:
        with SqlAlchemyUnitOfWork(self._session_factory) as uow:
            replaced = uow.session.execute(
                delete(PasswordReset).where(PasswordReset.user_id == request.user_id)
            ).rowcount
            row = PasswordReset(
                user_id=request.user_id,
                otp=request.code,
                expires_at=request.expires_at,
                created_at=request.created_at,
            )
            uow.session.add(row)
            uow.session.flush()
            if replaced:
                logger.debug(
                    f"password_resets: replaced {replaced} earlier request(s) "
                    f"for user_id={request.user_id}"
                )
            return _to_domain_reset(row)

    def find_active(
        self, user_id: int, code: str, now: datetime
    ) -> DomainPasswordReset | None:
        with SqlAlchemyUnitOfWork(self._session_factory) as uow:
            row = uow.session.scalars(
                select(PasswordReset).where(
                    PasswordReset.user_id == user_id,
                    PasswordReset.otp == code,
                    PasswordReset.expires_at > now,
                )
            ).first()
            return _to_domain_reset(row) if row else None

    def redeem(self, user_id: int, code: str, password_hash: str, now: datetime) -> bool:
        with SqlAlchemyUnitOfWork(self._session_factory) as uow:
            uow.session.execute(
                update(User).where(User.id == user_id).values(password_hash=password_hash)
            )
            consumed = uow.session.execute(
                delete(PasswordReset).where(
                    PasswordReset.user_id == user_id,
                    PasswordReset.otp == code,
                    PasswordReset.expires_at > now,
                )
            ).rowcount
            if not consumed:
                uow.rollback()
                return False
            return True

    def purge_expired(self, now: datetime) -> int:
        with SqlAlchemyUnitOfWork(self._session_factory) as uow:
            purged = uow.session.execute(
                delete(PasswordReset).where(PasswordReset.expires_at <= now)
            ).rowcount
        logger.info(f"password_resets: purged {purged} expired request(s)")
        return purged
