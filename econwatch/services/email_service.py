"""Email delivery channels for alert notifications.

Every channel exposes send(to, subject, body) -> bool. Implementations raise
DeliveryFailed from _deliver; send() logs it and reports False so one bad
address never stops a dispatch loop.
"""

from __future__ import annotations

import logging
import smtplib
from abc import ABC, abstractmethod
from email.mime.text import MIMEText

import httpx

from econwatch.config import Settings, get_settings
from econwatch.errors import DeliveryFailed

logger = logging.getLogger(__name__)


class DeliveryChannel(ABC):
    """Transport for one rendered message."""

    name: str = "base"

    def send(self, to: str, subject: str, body: str) -> bool:
        """Deliver one message. Returns True on success, False on any failure."""
        if not to:
            logger.warning("email_send_skipped: empty recipient address")
            return False
        try:
            self._deliver(to, subject, body)
        except DeliveryFailed as exc:
            logger.error("email_send_failed: channel=%s %s", self.name, exc)
            return False
        logger.info("email_sent: channel=%s recipient=%s subject=%s", self.name, to, subject)
        return True

    @abstractmethod
    def _deliver(self, to: str, subject: str, body: str) -> None:
        """Send or raise DeliveryFailed."""
        ...


class LogChannel(DeliveryChannel):
    """Mock transport: logs the message instead of sending it."""

    name = "log"

    def _deliver(self, to: str, subject: str, body: str) -> None:
        logger.info("email_logged: to=%s subject=%s\n%s", to, subject, body)


class SmtpChannel(DeliveryChannel):
    """Plain-text email over SMTP with STARTTLS."""

    name = "smtp"

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def _deliver(self, to: str, subject: str, body: str) -> None:
        smtp_host = getattr(self.settings, "smtp_host", "")
        if not smtp_host:
            raise DeliveryFailed(to, "SMTP host not configured")

        msg = MIMEText(body, "plain", "utf-8")
        msg["Subject"] = subject
        msg["From"] = getattr(self.settings, "smtp_from", "")
        msg["To"] = to

        try:
            with smtplib.SMTP(smtp_host, getattr(self.settings, "smtp_port", 587)) as server:
                server.starttls()
                smtp_user = getattr(self.settings, "smtp_user", "")
                smtp_password = getattr(self.settings, "smtp_password", "")
                if smtp_user:
                    server.login(smtp_user, smtp_password)
                server.sendmail(msg["From"], [to], msg.as_string())
        except smtplib.SMTPAuthenticationError as exc:
            raise DeliveryFailed(to, "could not authenticate with SMTP server") from exc
        except (smtplib.SMTPException, OSError) as exc:
            raise DeliveryFailed(to, str(exc)) from exc


class TestmailChannel(DeliveryChannel):
    """Testmail.app JSON API (staging inboxes)."""

    __test__ = False  # not a pytest test class
    name = "testmail"

    def __init__(self, settings: Settings, timeout: float = 10.0) -> None:
        self.settings = settings
        self.timeout = timeout

    def _deliver(self, to: str, subject: str, body: str) -> None:
        api_key = self.settings.testmail_api_key
        namespace = self.settings.testmail_namespace
        if not api_key or not namespace:
            raise DeliveryFailed(to, "missing TESTMAIL_API_KEY or TESTMAIL_NAMESPACE")

        payload = {
            "apikey": api_key,
            "namespace": namespace,
            "to": to,
            "subject": subject,
            "body": body,
        }
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(self.settings.testmail_api_url, json=payload)
        except httpx.HTTPError as exc:
            raise DeliveryFailed(to, str(exc)) from exc
        if response.status_code != 200:
            raise DeliveryFailed(to, f"HTTP {response.status_code}")


def get_delivery_channel(settings: Settings | None = None) -> DeliveryChannel:
    """Return the channel selected by EMAIL_BACKEND (log | smtp | testmail)."""
    if settings is None:
        settings = get_settings()
    backend = getattr(settings, "email_backend", "log")
    if backend == "smtp":
        return SmtpChannel(settings)
    if backend == "testmail":
        return TestmailChannel(settings)
    return LogChannel()
