# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from admissions.shared.config import load_config
from admissions.shared.config.settings import DatabaseConfig
from admissions.shared.logging import logger


class Base(DeclarativeBase):
    pass


def _engine_options(config: DatabaseConfig) -> dict[str, Any]:
    url = config.url
    if not url.startswith("sqlite"):
        return {
            "pool_pre_ping": True,
            "pool_size": config.pool_size,
            "max_overflow": config.max_overflow,
            "pool_timeout": config.pool_timeout,
        }

    connect_args = {"check_same_thread": False, "timeout": config.pool_timeout}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, otherwise every checkout sees an empty database
        return {"connect_args": connect_args, "poolclass": StaticPool}
    return {"connect_args": connect_args, "pool_pre_ping": True}


def build_engine(config: DatabaseConfig) -> Engine:
    engine = create_engine(config.url, echo=False, **_engine_options(config))

    if engine.dialect.name == "sqlite":

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    logger.debug(f"db.engine: created dialect={engine.dialect.name}")
    return engine


ENGINE: Engine = build_engine(load_config().database)

SessionLocal = scoped_session(
    sessionmaker(bind=ENGINE, autoflush=False, autocommit=False, expire_on_commit=False)
)


@contextmanager
def session_scope() -> Iterator[Session]:
    """Commit on success, roll back and re-raise on error, always release the session."""

    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        logger.exception("db.session: error, rolling back")
        session.rollback()
        raise
    finally:
        session.close()
        SessionLocal.remove()


def init_db() -> None:
    from admissions.infrastructure.db import models  # noqa: F401

    Base.metadata.create_all(bind=ENGINE)
    logger.info(f"db: schema ensured tables={sorted(Base.metadata.tables)}")
