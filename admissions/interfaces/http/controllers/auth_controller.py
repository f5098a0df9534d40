# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, g, jsonify, request
from pydantic import ValidationError

from admissions.application.use_cases.users.authenticate_user import AuthenticateUserUseCase
from admissions.application.use_cases.users.login_user import LoginUserUseCase
from admissions.application.use_cases.users.register_user import RegisterUserUseCase
from admissions.application.use_cases.users.request_password_reset import (
    RequestPasswordResetUseCase,
)
from admissions.application.use_cases.users.reset_password import ResetPasswordUseCase
from admissions.infrastructure.audit import AuditAction, audit_log
from admissions.interfaces.http.auth import bearer_required
from admissions.interfaces.http.dto.auth import (
    ForgotPasswordRequestDTO,
    LoginRequestDTO,
    MessageDTO,
    RegisterRequestDTO,
    ResetPasswordRequestDTO,
    TokenDTO,
    UserDTO,
    VerifyTokenDTO,
)
from admissions.shared.errors import AppError, failure_message
from admissions.shared.errors.validation import raise_validation_error
from admissions.shared.logging import logger
from admissions.shared.middleware.rate_limit import rate_limit


def _get_client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        request_reset_use_case: RequestPasswordResetUseCase,
        reset_password_use_case: ResetPasswordUseCase,
        authenticate_use_case: AuthenticateUserUseCase,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._request_reset_use_case = request_reset_use_case
        self._reset_password_use_case = reset_password_use_case
        self._authenticate_use_case = authenticate_use_case

    @failure_message("Registration failed")
    @rate_limit(limit=5, window_seconds=60.0)
    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(_json_body())
        except ValidationError as exc:
            raise_validation_error(exc)

        user = self._register_use_case.execute(dto.email, dto.password, dto.username)

        audit_log(
            AuditAction.REGISTER,
            user_id=user.id,
            ip_address=_get_client_ip(),
            details={"username": user.username},
            success=True,
        )
        logger.info(f"auth.register: ok user_id={user.id}")
        return jsonify(MessageDTO(message="User registered successfully").model_dump()), 201

    @failure_message("Login failed")
    @rate_limit(limit=10, window_seconds=60.0)
    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(_json_body())
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = _get_client_ip()

        try:
            session = self._login_use_case.execute(dto.email, dto.password)
        except AppError as exc:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"error": exc.code},
                success=False,
            )
            raise

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            user_id=session.user_id,
            ip_address=ip_address,
            success=True,
        )
        logger.info(f"auth.login: ok user_id={session.user_id}")
        return jsonify(TokenDTO(token=session.token).model_dump()), 200

    @failure_message("Failed to process request")
    @rate_limit(limit=5, window_seconds=60.0)
    def forgot_password(self) -> tuple[Response, int]:
        try:
            dto = ForgotPasswordRequestDTO.model_validate(_json_body())
        except ValidationError as exc:
            raise_validation_error(exc)

        reset = self._request_reset_use_case.execute(dto.email)

        audit_log(
            AuditAction.PASSWORD_RESET_REQUESTED,
            user_id=reset.user_id,
            ip_address=_get_client_ip(),
            success=True,
        )
        return jsonify(MessageDTO(message="OTP sent to your email").model_dump()), 200

    @failure_message("Error resetting password")
    @rate_limit(limit=10, window_seconds=60.0)
    def reset_password(self) -> tuple[Response, int]:
        try:
            dto = ResetPasswordRequestDTO.model_validate(_json_body())
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = _get_client_ip()

        try:
            user = self._reset_password_use_case.execute(dto.email, dto.otp, dto.new_password)
        except AppError as exc:
            audit_log(
                AuditAction.PASSWORD_RESET_FAILED,
                ip_address=ip_address,
                details={"error": exc.code},
                success=False,
            )
            raise

        audit_log(
            AuditAction.PASSWORD_RESET_COMPLETED,
            user_id=user.id,
            ip_address=ip_address,
            success=True,
        )
        return jsonify(MessageDTO(message="Password reset successful").model_dump()), 200

    def verify_token(self) -> tuple[Response, int]:
        user = g.current_user
        payload = VerifyTokenDTO(
            user=UserDTO(id=user.id, email=user.email, username=user.username)
        )
        return jsonify(payload.model_dump()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/forgot-password", view_func=self.forgot_password, methods=["POST"])
        bp.add_url_rule("/reset-password", view_func=self.reset_password, methods=["POST"])
        bp.add_url_rule(
            "/verify-token",
            view_func=bearer_required(self._authenticate_use_case)(self.verify_token),
            methods=["GET"],
        )
        return bp
