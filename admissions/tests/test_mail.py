from __future__ import annotations

import smtplib

import pytest

from admissions.infrastructure.mail import LoggingNotifier, SmtpNotifier, build_notifier
from admissions.shared.config import MailConfig


class FakeSMTP:
    instances: list[FakeSMTP] = []
    fail_with: Exception | None = None

    def __init__(self, host: str, port: int, timeout: float) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout
        self.calls: list[str] = []
        self.messages: list = []
        FakeSMTP.instances.append(self)

    def __enter__(self) -> FakeSMTP:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.calls.append("quit")

    def starttls(self) -> None:
        self.calls.append("starttls")

    def login(self, username: str, password: str) -> None:
        self.calls.append(f"login:{username}")

    def send_message(self, msg) -> None:
        if FakeSMTP.fail_with is not None:
            raise FakeSMTP.fail_with
        self.messages.append(msg)


@pytest.fixture()
def fake_smtp(monkeypatch: pytest.MonkeyPatch) -> type[FakeSMTP]:
    FakeSMTP.instances = []
    FakeSMTP.fail_with = None
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def _config() -> MailConfig:
    return MailConfig(
        SMTP_HOST="smtp.test",
        SMTP_PORT=2525,
        SMTP_USERNAME="mailer",
        SMTP_PASSWORD="pw",
        MAIL_FROM="admissions@x.com",
    )


def test_smtp_notifier_sends_html_message(fake_smtp: type[FakeSMTP]) -> None:
    notifier = SmtpNotifier(_config())

    assert notifier.send("alice@x.com", "Password Reset OTP", "<h2>Your OTP: 123456</h2>") is True

    server = fake_smtp.instances[0]
    assert (server.host, server.port) == ("smtp.test", 2525)
    assert server.calls[:2] == ["starttls", "login:mailer"]
    msg = server.messages[0]
    assert msg["To"] == "alice@x.com"
    assert msg["From"] == "admissions@x.com"
    assert msg["Subject"] == "Password Reset OTP"
    assert "Your OTP: 123456" in msg.get_body(preferencelist=("html",)).get_content()


def test_smtp_notifier_reports_failure(fake_smtp: type[FakeSMTP]) -> None:
    fake_smtp.fail_with = smtplib.SMTPRecipientsRefused({})
    assert SmtpNotifier(_config()).send("alice@x.com", "s", "<p>b</p>") is False


def test_build_notifier_without_host_logs_only() -> None:
    assert isinstance(build_notifier(MailConfig(SMTP_HOST="")), LoggingNotifier)
    assert isinstance(build_notifier(_config()), SmtpNotifier)
