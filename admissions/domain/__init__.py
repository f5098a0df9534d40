# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .exceptions import InvariantViolation, InvariantViolationError
from .users.entities import PasswordResetRequest, Session, User

__all__ = [
    "InvariantViolation",
    "InvariantViolationError",
    "PasswordResetRequest",
    "Session",
    "User",
]
