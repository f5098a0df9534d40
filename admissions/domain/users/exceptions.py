# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from admissions.shared.errors.base import DomainError, InfrastructureError


class UserAlreadyExistsError(DomainError):
    code = "user_already_exists"
    message = "User already exists"


class UserNotFoundError(DomainError):
    code = "user_not_found"
    status = HTTPStatus.NOT_FOUND
    message = "User not found"


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid credentials"


class InvalidOrExpiredCodeError(DomainError):
    code = "invalid_or_expired_otp"
    message = "Invalid or expired OTP"


class MailDeliveryError(InfrastructureError):
    def __init__(self) -> None:
        super().__init__(code="mail_delivery_failed", message="Failed to process request")
