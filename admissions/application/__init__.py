# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .use_cases.users.authenticate_user import AuthenticateUserUseCase
from .use_cases.users.login_user import LoginUserUseCase
from .use_cases.users.purge_expired_resets import PurgeExpiredResetsUseCase
from .use_cases.users.register_user import RegisterUserUseCase
from .use_cases.users.request_password_reset import RequestPasswordResetUseCase
from .use_cases.users.reset_password import ResetPasswordUseCase

__all__ = [
    "AuthenticateUserUseCase",
    "LoginUserUseCase",
    "PurgeExpiredResetsUseCase",
    "RegisterUserUseCase",
    "RequestPasswordResetUseCase",
    "ResetPasswordUseCase",
]
