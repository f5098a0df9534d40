# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Outbound e-mail delivery."""

from __future__ import annotations

import smtplib
from email.message import EmailMessage

from admissions.domain.users.repositories import Notifier
from admissions.shared.config import MailConfig
from admissions.shared.logging import logger


class SmtpNotifier(Notifier):
    """Sends HTML mail through an SMTP relay; one connection per message, no retries."""

    def __init__(self, config: MailConfig) -> None:
        self._config = config

    def _build_message(self, to_address: str, subject: str, html_body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self._config.sender
        msg["To"] = to_address
        msg.set_content("This message requires an HTML capable mail client.")
        msg.add_alternative(html_body, subtype="html")
        return msg

    def send(self, to_address: str, subject: str, html_body: str) -> bool:
        msg = self._build_message(to_address, subject, html_body)
        try:
            with smtplib.SMTP(
                self._config.smtp_host, self._config.smtp_port, timeout=self._config.timeout
            ) as server:
                if self._config.starttls:
                    server.starttls()
                if self._config.smtp_username:
                    server.login(self._config.smtp_username, self._config.smtp_password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(f"mail.smtp: failed to send '{subject}' to {to_address}: {exc}")
            return False

        logger.info(f"mail.smtp: sent '{subject}' to {to_address}")
        return True


class LoggingNotifier(Notifier):
    """Development notifier used when no SMTP relay is configured."""

    def send(self, to_address: str, subject: str, html_body: str) -> bool:
        logger.warning(f"mail.dev: SMTP disabled, '{subject}' for {to_address} not sent")
        logger.debug(f"mail.dev: body={html_body}")
        return True


def build_notifier(config: MailConfig) -> Notifier:
    if config.enabled:
        return SmtpNotifier(config)
    return LoggingNotifier()


__all__ = ["LoggingNotifier", "SmtpNotifier", "build_notifier"]
