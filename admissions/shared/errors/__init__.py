# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .base import AppError, DomainError, InfrastructureError, UnauthorizedError, ValidationError
from .http import failure_message, handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "DomainError",
    "InfrastructureError",
    "UnauthorizedError",
    "ValidationError",
    "failure_message",
    "handle_app_error",
    "register_error_handler",
]
