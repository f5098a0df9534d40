# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from typing import Any, NamedTuple


class _Rule(NamedTuple):
    pattern: re.Pattern[str]
    replacement: str


def _rule(pattern: str, replacement: str, flags: int = re.IGNORECASE) -> _Rule:
    return _Rule(re.compile(pattern, flags), replacement)


_EMAIL_RE = re.compile(r"([a-zA-Z0-9._%+-]+)@([a-zA-Z0-9.-]+\.[a-zA-Z]{2,})")

# order matters: bearer and JWT rules run before the generic token rule
_RULES: tuple[_Rule, ...] = (
    _rule(r"(secret\s*[:=]\s*['\"]?)([\w\-]{8,})(['\"]?)", r"\1***REDACTED***\3"),
    _rule(r"(bearer\s+)([\w\-.]{6,})", r"\1***REDACTED***"),
    _rule(r"\beyJ[\w\-]+\.[\w\-]+\.[\w\-]+", "***JWT***", 0),
    _rule(r"(token\s*[:=]\s*['\"]?)([\w\-.]{20,})(['\"]?)", r"\1***REDACTED***\3", 0),
    _rule(r"((?:smtp_)?password\s*[:=]\s*['\"]?)([^'\"\s]+)(['\"]?)", r"\1***REDACTED***\3"),
    _rule(r"((?:otp|code)\s*[:=]\s*['\"]?)(\d{6})(?!\d)", r"\1******"),
    _rule(r"(Your OTP:\s*)(\d{6})", r"\1******"),
    _rule(r"([a-z0-9+]+://[^:/\s]+):([^@\s]+)@", r"\1:***REDACTED***@"),
    _rule(r"(authorization\s*:\s*['\"]?)([^'\"]{10,})(['\"]?)", r"\1***REDACTED***\3"),
)


def mask_email(address: str) -> str:
    """``alice@x.com`` -> ``a***@x.com``; keeps the domain for troubleshooting."""

    local, sep, domain = address.partition("@")
    if not sep:
        return "***"
    return f"{local[:1]}***@{domain}"


def sanitize_message(message: str) -> str:
    for rule in _RULES:
        message = rule.pattern.sub(rule.replacement, message)
    return _EMAIL_RE.sub(lambda m: mask_email(m.group(0)), message)


def sanitize_record(record: dict[str, Any]) -> bool:
    """Loguru filter: scrub the message in place and always keep the record."""

    if "message" in record:
        record["message"] = sanitize_message(record["message"])
    return True
