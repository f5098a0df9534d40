# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Application dependency container."""

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from admissions.application.services.otp import SecretsCodeGenerator
from admissions.application.services.password_hashing import WerkzeugPasswordHasher
from admissions.application.services.tokens import JwtTokenIssuer
from admissions.application.use_cases.users.authenticate_user import AuthenticateUserUseCase
from admissions.application.use_cases.users.login_user import LoginUserUseCase
from admissions.application.use_cases.users.purge_expired_resets import (
    PurgeExpiredResetsUseCase,
)
from admissions.application.use_cases.users.register_user import RegisterUserUseCase
from admissions.application.use_cases.users.request_password_reset import (
    RequestPasswordResetUseCase,
)
from admissions.application.use_cases.users.reset_password import ResetPasswordUseCase
from admissions.domain.users.repositories import Notifier
from admissions.infrastructure.db import SessionLocal
from admissions.infrastructure.mail import build_notifier
from admissions.infrastructure.repositories.users import (
    SqlAlchemyPasswordResetRepository,
    SqlAlchemySessionRepository,
    SqlAlchemyUserRepository,
)
from admissions.interfaces.http.controllers.auth_controller import AuthController
from admissions.shared.config import AppConfig, load_config


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or load_config()

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def code_generator(self) -> SecretsCodeGenerator:
        return SecretsCodeGenerator()

    @cached_property
    def token_issuer(self) -> JwtTokenIssuer:
        return JwtTokenIssuer(self.config.auth)

    @cached_property
    def notifier(self) -> Notifier:
        return build_notifier(self.config.mail)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository()

    @cached_property
    def session_repository(self) -> SqlAlchemySessionRepository:
        return SqlAlchemySessionRepository()

    @cached_property
    def password_reset_repository(self) -> SqlAlchemyPasswordResetRepository:
        return SqlAlchemyPasswordResetRepository(SessionLocal)

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            sessions=self.session_repository,
            password_hasher=self.password_hasher,
            tokens=self.token_issuer,
        )

    @cached_property
    def authenticate_user_use_case(self) -> AuthenticateUserUseCase:
        return AuthenticateUserUseCase(users=self.user_repository, tokens=self.token_issuer)

    @cached_property
    def request_password_reset_use_case(self) -> RequestPasswordResetUseCase:
        return RequestPasswordResetUseCase(
            users=self.user_repository,
            resets=self.password_reset_repository,
            codes=self.code_generator,
            notifier=self.notifier,
            ttl=timedelta(minutes=self.config.auth.reset_code_ttl_minutes),
        )

    @cached_property
    def reset_password_use_case(self) -> ResetPasswordUseCase:
        return ResetPasswordUseCase(
            users=self.user_repository,
            resets=self.password_reset_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def purge_expired_resets_use_case(self) -> PurgeExpiredResetsUseCase:
        return PurgeExpiredResetsUseCase(resets=self.password_reset_repository)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            request_reset_use_case=self.request_password_reset_use_case,
            reset_password_use_case=self.reset_password_use_case,
            authenticate_use_case=self.authenticate_user_use_case,
        )


container = Container()
