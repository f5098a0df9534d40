# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Retries for start-up work that depends on the database being reachable."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.exc import OperationalError
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from admissions.shared.config import load_config
from admissions.shared.logging import logger

T = TypeVar("T")


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    logger.warning(
        f"resilience: database unavailable (attempt={state.attempt_number}): "
        f"{type(exc).__name__ if exc else 'unknown'}"
    )


def call_with_db_retry(  # noqa: UP047
    func: Callable[[], T],
    *,
    retries: int | None = None,
    backoff: float | None = None,
) -> T:
    """Run ``func``, retrying while the database refuses connections."""

    config = load_config().database
    retries = config.connect_retries if retries is None else retries
    backoff = config.connect_backoff if backoff is None else backoff

    retrying = Retrying(
        stop=stop_after_attempt(retries + 1),
        wait=wait_exponential(multiplier=backoff, max=max(backoff * 8, 0.1)),
        retry=retry_if_exception_type(OperationalError),
        before_sleep=_log_retry,
        reraise=True,
    )
    return retrying(func)


__all__ = ["call_with_db_retry"]
