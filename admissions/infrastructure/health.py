# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from admissions.infrastructure.db import ENGINE
from admissions.shared.logging import logger


def database_status() -> dict[str, object]:
    """Round-trip ``SELECT 1`` and report the outcome for the health endpoint."""

    started = time.perf_counter()
    try:
        with ENGINE.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error(f"health: database check failed: {type(exc).__name__}")
        return {"ok": False, "database": f"error: {type(exc).__name__}"}

    latency_ms = round((time.perf_counter() - started) * 1000.0, 2)
    return {"ok": True, "database": "ok", "latency_ms": latency_ms}


__all__ = ["database_status"]
