from __future__ import annotations

import re

import pytest
from sqlalchemy import func, select

from admissions.app import create_app
from admissions.container import Container
from admissions.infrastructure.db import session_scope
from admissions.infrastructure.db.models import AuditLog, PasswordReset, Session, User

pytestmark = pytest.mark.usefixtures("database")

_OTP_RE = re.compile(r"Your OTP: (\d{6})")


class RecordingNotifier:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []

    def send(self, to_address: str, subject: str, html_body: str) -> bool:
        self.sent.append((to_address, subject, html_body))
        return True

    def last_code(self) -> str:
        match = _OTP_RE.search(self.sent[-1][2])
        assert match is not None
        return match.group(1)


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def client(notifier: RecordingNotifier):
    container = Container()
    container.notifier = notifier
    app = create_app(container)
    with app.test_client() as test_client:
        yield test_client


def _count(model: type) -> int:
    with session_scope() as session:
        return session.scalar(select(func.count()).select_from(model)) or 0


def test_register_login_reset_flow(client, notifier: RecordingNotifier) -> None:
    register = client.post(
        "/api/register",
        json={"email": "alice@x.com", "password": "secret1", "username": "Alice"},
    )
    assert register.status_code == 201

    login = client.post("/api/login", json={"email": "alice@x.com", "password": "secret1"})
    assert login.status_code == 200
    token = login.get_json()["token"]

    verify = client.get("/api/verify-token", headers={"Authorization": f"Bearer {token}"})
    assert verify.status_code == 200
    assert verify.get_json()["user"]["email"] == "alice@x.com"

    forgot = client.post("/api/forgot-password", json={"email": "alice@x.com"})
    assert forgot.status_code == 200
    assert notifier.sent[-1][0] == "alice@x.com"
    assert notifier.sent[-1][1] == "Password Reset OTP"
    code = notifier.last_code()
    assert _count(PasswordReset) == 1

    reset = client.post(
        "/api/reset-password",
        json={"email": "alice@x.com", "otp": code, "newPassword": "newpass2"},
    )
    assert reset.status_code == 200
    assert _count(PasswordReset) == 0

    reused = client.post(
        "/api/reset-password",
        json={"email": "alice@x.com", "otp": code, "newPassword": "another3"},
    )
    assert reused.status_code == 400
    assert reused.get_json()["error"] == "invalid_or_expired_otp"

    old = client.post("/api/login", json={"email": "alice@x.com", "password": "secret1"})
    assert old.status_code == 401
    new = client.post("/api/login", json={"email": "alice@x.com", "password": "newpass2"})
    assert new.status_code == 200

    assert _count(User) == 1
    assert _count(Session) == 2
    assert _count(AuditLog) >= 6


def test_duplicate_registration_returns_400(client) -> None:
    body = {"email": "alice@x.com", "password": "secret1", "username": "Alice"}
    assert client.post("/api/register", json=body).status_code == 201

    duplicate = client.post("/api/register", json={**body, "email": "ALICE@x.com"})
    assert duplicate.status_code == 400
    assert duplicate.get_json()["error"] == "user_already_exists"


def test_unknown_email_reset_request_creates_no_row(client, notifier: RecordingNotifier) -> None:
    response = client.post("/api/forgot-password", json={"email": "bob@x.com"})

    assert response.status_code == 404
    assert response.get_json()["error"] == "user_not_found"
    assert _count(PasswordReset) == 0
    assert notifier.sent == []


def test_wrong_password_and_unknown_email_look_the_same(client) -> None:
    client.post(
        "/api/register",
        json={"email": "alice@x.com", "password": "secret1", "username": "Alice"},
    )

    wrong = client.post("/api/login", json={"email": "alice@x.com", "password": "wrong1"})
    unknown = client.post("/api/login", json={"email": "nobody@x.com", "password": "secret1"})

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.get_json() == unknown.get_json()


def test_never_issued_code_is_rejected(client, notifier: RecordingNotifier) -> None:
    client.post(
        "/api/register",
        json={"email": "alice@x.com", "password": "secret1", "username": "Alice"},
    )
    client.post("/api/forgot-password", json={"email": "alice@x.com"})
    wrong_code = "100000" if notifier.last_code() != "100000" else "100001"

    response = client.post(
        "/api/reset-password",
        json={"email": "alice@x.com", "otp": wrong_code, "newPassword": "newpass2"},
    )

    assert response.status_code == 400
    assert _count(PasswordReset) == 1
    login = client.post("/api/login", json={"email": "alice@x.com", "password": "secret1"})
    assert login.status_code == 200


def test_verify_token_rejects_garbage(client) -> None:
    response = client.get("/api/verify-token", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401


def test_health_and_security_headers(client) -> None:
    response = client.get("/api/health", headers={"X-Request-ID": "req-123"})

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["ok"] is True
    assert payload["database"] == "ok"
    assert payload["latency_ms"] >= 0
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Request-ID"] == "req-123"


def test_metrics_endpoint_exposes_request_counters(client) -> None:
    client.get("/api/health")

    response = client.get("/metrics")

    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert "admissions_requests_total" in body
    assert 'endpoint="/api/health"' in body


def test_unknown_api_route_returns_json_404(client) -> None:
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.get_json() == {"error": "not_found", "message": "Resource not found"}


def test_wrong_method_returns_json_405(client) -> None:
    response = client.get("/api/login")

    assert response.status_code == 405
    assert response.get_json()["error"] == "method_not_allowed"
    assert "POST" in response.headers["Allow"]
