"""Mail — outbound email for campaigns and transaction notices.

Invariants:
    - Every sender exposes `async send(to, subject, html)` and raises on failure
    - SMTP I/O runs in a worker thread: the event loop never blocks on the socket

Design Decisions:
    - stdlib smtplib: one synchronous call per message is all campaigns need
    - LoggingMailSender when smtp_host is unset: local and test runs send nothing
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage
from typing import Protocol

from tradedesk.config import Settings, get_settings

logger = logging.getLogger(__name__)


class MailSender(Protocol):
    async def send(self, to: str, subject: str, html: str) -> None: ...


class SmtpMailSender:
    def __init__(
        self, host: str, port: int, username: str | None,
        password: str | None, sender: str,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender

    def _build(self, to: str, subject: str, html: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML-capable mail client.")
        message.add_alternative(html, subtype="html")
        return message

    def _send_sync(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=30) as smtp:
            smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password or "")
            smtp.send_message(message)

    async def send(self, to: str, subject: str, html: str) -> None:
        await asyncio.to_thread(self._send_sync, self._build(to, subject, html))
        logger.info(f"Mail sent to {to}: {subject}")


class LoggingMailSender:
    """Records messages instead of sending them."""

    def __init__(self):
        self.sent: list[tuple[str, str, str]] = []

    async def send(self, to: str, subject: str, html: str) -> None:
        self.sent.append((to, subject, html))
        logger.info(f"Mail (not sent, no SMTP host) to {to}: {subject}")


def build_mail_sender(settings: Settings | None = None) -> MailSender:
    settings = settings or get_settings()
    if settings.smtp_host:
        return SmtpMailSender(
            settings.smtp_host, settings.smtp_port, settings.smtp_username,
            settings.smtp_password, settings.mail_from,
        )
    return LoggingMailSender()


_sender: MailSender | None = None


def get_mail_sender() -> MailSender:
    """FastAPI dependency; one sender per process."""
    global _sender
    if _sender is None:
        _sender = build_mail_sender()
    return _sender
