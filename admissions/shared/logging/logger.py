"""Loguru configuration shared by the web app and the maintenance scripts."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_PLAIN_FMT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {extra[correlation_id]} | "
    "{name}:{function}:{line} | {message}"
)
_COLOR_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

_DEFAULT_LOG_FILE = Path(__file__).resolve().parents[3] / "instance" / "app.log"
_QUIET_LOGGERS = {
    "werkzeug": logging.INFO,
    "sqlalchemy.engine": logging.WARNING,
    "urllib3": logging.WARNING,
}

_CORRELATION_ID: ContextVar[str] = ContextVar("correlation_id", default="-")


class _InterceptHandler(logging.Handler):
    """Forward stdlib records (werkzeug, SQLAlchemy) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # skip logging's own frames so loguru reports the real caller
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        _logger.opt(depth=depth, exception=record.exc_info).bind(
            correlation_id=_CORRELATION_ID.get()
        ).log(level, record.getMessage())


class ContextualLogger:
    """Proxy for loguru that injects the current correlation id."""

    def __getattr__(self, name):  # pragma: no cover
        bound = _logger.bind(correlation_id=_CORRELATION_ID.get())
        return getattr(bound, name)


def set_correlation_id(value: str | None) -> None:
    _CORRELATION_ID.set(value or "-")


def get_correlation_id() -> str:
    return _CORRELATION_ID.get()


def clear_correlation_id() -> None:
    _CORRELATION_ID.set("-")


@contextmanager
def correlation_scope(value: str) -> Iterator[str]:
    token = _CORRELATION_ID.set(value)
    try:
        yield value
    finally:
        _CORRELATION_ID.reset(token)


def setup_logging(
    level: str | None = None,
    *,
    debug_mode: bool = False,
    log_file: str | None = None,
) -> Path:
    """Install the stderr and file sinks; returns the log file in use."""

    level = "DEBUG" if debug_mode else (level or "INFO").upper()
    path = Path(log_file) if log_file else _DEFAULT_LOG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)

    _logger.remove()
    _logger.configure(extra={"correlation_id": "-"})
    _logger.add(
        sys.stderr,
        level=level,
        format=_COLOR_FMT,
        filter=sanitize_record,
        colorize=True,
        backtrace=False,
        diagnose=False,
    )
    _logger.add(
        str(path),
        level=level,
        format=_PLAIN_FMT,
        filter=sanitize_record,
        colorize=False,
        backtrace=False,
        diagnose=False,
        enqueue=True,
        rotation="10 MB",
        retention=5,
        encoding="utf-8",
    )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)

    return path


logger = ContextualLogger()

__all__ = [
    "clear_correlation_id",
    "correlation_scope",
    "get_correlation_id",
    "logger",
    "set_correlation_id",
    "setup_logging",
]
