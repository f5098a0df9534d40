from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import cast
from unittest.mock import MagicMock

import pytest
from flask import Flask

from admissions.application.use_cases.users.authenticate_user import AuthenticateUserUseCase
from admissions.application.use_cases.users.register_user import RegisterUserUseCase
from admissions.domain.users.entities import PasswordResetRequest, Session, User
from admissions.domain.users.exceptions import (
    InvalidCredentialsError,
    InvalidOrExpiredCodeError,
    MailDeliveryError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from admissions.interfaces.http.controllers.auth_controller import AuthController
from admissions.shared.errors import UnauthorizedError
from admissions.shared.middleware.error_handler import configure_error_handling

NOW = datetime(2025, 3, 1, 9, 0, tzinfo=UTC)
ALICE = User(
    id=1,
    email="alice@x.com",
    username="Alice",
    password_hash="hash",
    created_at=NOW,
)


@pytest.fixture()
def flask_app() -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    return app


def _controller(**overrides: object) -> AuthController:
    use_cases: dict[str, object] = {
        "register_use_case": MagicMock(),
        "login_use_case": MagicMock(),
        "request_reset_use_case": MagicMock(),
        "reset_password_use_case": MagicMock(),
        "authenticate_use_case": MagicMock(),
    }
    use_cases.update(overrides)
    return AuthController(**use_cases)  # type: ignore[arg-type]


def test_register_endpoint_returns_201(flask_app: Flask) -> None:
    register_called: dict[str, tuple[str, str, str]] = {}

    class StubRegister:
        def execute(self, email: str, password: str, username: str) -> User:
            register_called["args"] = (email, password, username)
            return ALICE

    controller = _controller(register_use_case=cast(RegisterUserUseCase, StubRegister()))
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/register",
            json={"email": " Alice@X.com", "password": "secret1", "username": "Alice"},
        )

    assert response.status_code == 201
    assert response.get_json() == {"message": "User registered successfully"}
    assert register_called["args"] == ("alice@x.com", "secret1", "Alice")


def test_register_existing_user_returns_400(flask_app: Flask) -> None:
    register = MagicMock()
    register.execute.side_effect = UserAlreadyExistsError()
    flask_app.register_blueprint(_controller(register_use_case=register).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/register",
            json={"email": "alice@x.com", "password": "secret1", "username": "Alice"},
        )

    assert response.status_code == 400
    assert response.get_json()["error"] == "user_already_exists"


def test_register_invalid_payload_returns_422(flask_app: Flask) -> None:
    register = MagicMock()
    flask_app.register_blueprint(_controller(register_use_case=register).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/register", json={"email": "not-an-email", "password": "123"}
        )

    assert response.status_code == 422
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert set(payload["context"]["fields"]) == {"email", "password", "username"}
    register.execute.assert_not_called()


def test_login_returns_token(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.return_value = Session(
        user_id=1, token="signed.jwt.token", expires_at=NOW + timedelta(hours=24)
    )
    flask_app.register_blueprint(_controller(login_use_case=login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/login", json={"email": "alice@x.com", "password": "secret1"})

    assert response.status_code == 200
    assert response.get_json() == {"token": "signed.jwt.token"}


def test_login_invalid_credentials_returns_401(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.side_effect = InvalidCredentialsError()
    flask_app.register_blueprint(_controller(login_use_case=login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/login", json={"email": "alice@x.com", "password": "nope"})

    assert response.status_code == 401
    assert response.get_json() == {
        "error": "invalid_credentials",
        "message": "Invalid credentials",
    }


def test_login_invalid_payload_returns_422(flask_app: Flask) -> None:
    flask_app.register_blueprint(_controller().as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/login", json={"email": "alice@x.com"})

    assert response.status_code == 422
    assert response.get_json()["error"] == "validation_error"


def test_forgot_password_returns_200(flask_app: Flask) -> None:
    request_reset = MagicMock()
    request_reset.execute.return_value = PasswordResetRequest.issue(
        user_id=1, code="123456", now=NOW, ttl=timedelta(minutes=10)
    )
    flask_app.register_blueprint(
        _controller(request_reset_use_case=request_reset).as_blueprint()
    )

    with flask_app.test_client() as client:
        response = client.post("/api/forgot-password", json={"email": "alice@x.com"})

    assert response.status_code == 200
    assert response.get_json() == {"message": "OTP sent to your email"}
    # the code never leaves the server in the response
    assert "123456" not in response.get_data(as_text=True)
    request_reset.execute.assert_called_once_with("alice@x.com")


def test_forgot_password_unknown_user_returns_404(flask_app: Flask) -> None:
    request_reset = MagicMock()
    request_reset.execute.side_effect = UserNotFoundError()
    flask_app.register_blueprint(
        _controller(request_reset_use_case=request_reset).as_blueprint()
    )

    with flask_app.test_client() as client:
        response = client.post("/api/forgot-password", json={"email": "bob@x.com"})

    assert response.status_code == 404
    assert response.get_json()["error"] == "user_not_found"


def test_forgot_password_mail_failure_returns_generic_500(flask_app: Flask) -> None:
    request_reset = MagicMock()
    request_reset.execute.side_effect = MailDeliveryError()
    flask_app.register_blueprint(
        _controller(request_reset_use_case=request_reset).as_blueprint()
    )

    with flask_app.test_client() as client:
        response = client.post("/api/forgot-password", json={"email": "alice@x.com"})

    assert response.status_code == 500
    assert response.get_json() == {
        "error": "mail_delivery_failed",
        "message": "Failed to process request",
    }


@pytest.mark.parametrize(
    ("path", "use_case", "body", "message"),
    [
        (
            "/api/register",
            "register_use_case",
            {"email": "alice@x.com", "password": "secret1", "username": "Alice"},
            "Registration failed",
        ),
        (
            "/api/login",
            "login_use_case",
            {"email": "alice@x.com", "password": "secret1"},
            "Login failed",
        ),
        (
            "/api/forgot-password",
            "request_reset_use_case",
            {"email": "alice@x.com"},
            "Failed to process request",
        ),
        (
            "/api/reset-password",
            "reset_password_use_case",
            {"email": "alice@x.com", "otp": "123456", "newPassword": "newpass2"},
            "Error resetting password",
        ),
    ],
)
def test_unexpected_error_returns_endpoint_message(
    flask_app: Flask, path: str, use_case: str, body: dict, message: str
) -> None:
    failing = MagicMock()
    failing.execute.side_effect = RuntimeError("database password=hunter2 leaked")
    flask_app.register_blueprint(_controller(**{use_case: failing}).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(path, json=body)

    assert response.status_code == 500
    assert response.get_json() == {"error": "internal_error", "message": message}


def test_unexpected_error_outside_auth_views_uses_generic_message(flask_app: Flask) -> None:
    @flask_app.get("/api/boom")
    def boom():
        raise RuntimeError("boom")

    with flask_app.test_client() as client:
        response = client.get("/api/boom")

    assert response.status_code == 500
    assert response.get_json() == {"error": "internal_error", "message": "Internal server error"}


def test_reset_password_accepts_camel_case_field(flask_app: Flask) -> None:
    reset_password = MagicMock()
    reset_password.execute.return_value = ALICE
    flask_app.register_blueprint(
        _controller(reset_password_use_case=reset_password).as_blueprint()
    )

    with flask_app.test_client() as client:
        response = client.post(
            "/api/reset-password",
            json={"email": "alice@x.com", "otp": " 123456 ", "newPassword": "newpass2"},
        )

    assert response.status_code == 200
    assert response.get_json() == {"message": "Password reset successful"}
    reset_password.execute.assert_called_once_with("alice@x.com", "123456", "newpass2")


@pytest.mark.parametrize(
    ("error", "status", "code"),
    [
        (InvalidOrExpiredCodeError(), 400, "invalid_or_expired_otp"),
        (UserNotFoundError(), 404, "user_not_found"),
    ],
)
def test_reset_password_error_mapping(
    flask_app: Flask, error: Exception, status: int, code: str
) -> None:
    reset_password = MagicMock()
    reset_password.execute.side_effect = error
    flask_app.register_blueprint(
        _controller(reset_password_use_case=reset_password).as_blueprint()
    )

    with flask_app.test_client() as client:
        response = client.post(
            "/api/reset-password",
            json={"email": "alice@x.com", "otp": "123456", "newPassword": "newpass2"},
        )

    assert response.status_code == status
    assert response.get_json()["error"] == code


def test_verify_token_returns_user(flask_app: Flask) -> None:
    seen: list[str] = []

    class StubAuthenticate:
        def execute(self, token: str) -> User:
            seen.append(token)
            return ALICE

    controller = _controller(
        authenticate_use_case=cast(AuthenticateUserUseCase, StubAuthenticate())
    )
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.get(
            "/api/verify-token", headers={"Authorization": "Bearer abc.def.ghi"}
        )

    assert response.status_code == 200
    assert response.get_json() == {
        "user": {"id": 1, "email": "alice@x.com", "username": "Alice"}
    }
    assert seen == ["abc.def.ghi"]


def test_verify_token_without_header_returns_401(flask_app: Flask) -> None:
    authenticate = MagicMock()
    flask_app.register_blueprint(_controller(authenticate_use_case=authenticate).as_blueprint())

    with flask_app.test_client() as client:
        response = client.get("/api/verify-token")

    assert response.status_code == 401
    assert response.get_json()["error"] == "unauthorized"
    authenticate.execute.assert_not_called()


def test_verify_token_rejected_token_returns_401(flask_app: Flask) -> None:
    authenticate = MagicMock()
    authenticate.execute.side_effect = UnauthorizedError()
    flask_app.register_blueprint(_controller(authenticate_use_case=authenticate).as_blueprint())

    with flask_app.test_client() as client:
        response = client.get("/api/verify-token", headers={"Authorization": "Bearer expired"})

    assert response.status_code == 401
