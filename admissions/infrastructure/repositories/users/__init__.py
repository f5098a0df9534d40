# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .sqlalchemy_user_repository import (
    SqlAlchemyPasswordResetRepository,
    SqlAlchemySessionRepository,
    SqlAlchemyUserRepository,
)

__all__ = [
    "SqlAlchemyPasswordResetRepository",
    "SqlAlchemySessionRepository",
    "SqlAlchemyUserRepository",
]
