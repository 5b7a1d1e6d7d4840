"""
Notifier - delivers expiry digests by email.

The transport is injected so the notifier can be exercised with an in-memory
double. ``SmtpTransport`` is the production transport; credentials always come
from configuration.
"""

import logging
import smtplib
from email.message import EmailMessage
from typing import Optional, Protocol

from app.config import Settings
from app.exceptions import TransportError
from services.digest import Digest

logger = logging.getLogger("foodsense.notifier")

# Well-known services resolved from EMAIL_SERVICE: (host, port)
SMTP_SERVICES = {
    "gmail": ("smtp.gmail.com", 587),
    "outlook": ("smtp-mail.outlook.com", 587),
    "hotmail": ("smtp-mail.outlook.com", 587),
    "office365": ("smtp.office365.com", 587),
    "yahoo": ("smtp.mail.yahoo.com", 587),
    "icloud": ("smtp.mail.me.com", 587),
    "zoho": ("smtp.zoho.com", 587),
    "sendgrid": ("smtp.sendgrid.net", 587),
    "mailgun": ("smtp.mailgun.org", 587),
}
SMTP_SSL_PORT = 465


class MailTransport(Protocol):
    def send(self, message: EmailMessage) -> None:
        """Deliver one message or raise TransportError"""
        ...


class SmtpTransport:
    """SMTP transport with login, STARTTLS on submission ports, SSL on 465"""

    def __init__(
        self,
        host: Optional[str],
        port: int,
        user: Optional[str],
        password: Optional[str],
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpTransport":
        service_host, service_port = SMTP_SERVICES.get(
            (settings.email_service or "").strip().lower(), (None, 587)
        )
        return cls(
            host=settings.smtp_host or service_host,
            port=settings.smtp_port or service_port,
            user=settings.email_user,
            password=settings.email_password,
            timeout=settings.smtp_timeout,
        )

    def send(self, message: EmailMessage) -> None:
        if not self.host:
            raise TransportError(
                "No SMTP host configured: set SMTP_HOST or a known EMAIL_SERVICE",
                code="SMTP_NOT_CONFIGURED",
            )
        if not self.user or not self.password:
            raise TransportError(
                "Mail credentials are not configured", code="SMTP_NOT_CONFIGURED"
            )

        try:
            if self.port == SMTP_SSL_PORT:
                with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as smtp:
                    smtp.login(self.user, self.password)
                    smtp.send_message(message)
            else:
                with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                    smtp.starttls()
                    smtp.login(self.user, self.password)
                    smtp.send_message(message)
        except smtplib.SMTPAuthenticationError as exc:
            raise TransportError(
                f"SMTP authentication failed for {self.user}", code="SMTP_AUTH"
            ) from exc
        except (smtplib.SMTPException, OSError) as exc:
            raise TransportError(
                f"SMTP delivery via {self.host}:{self.port} failed: {exc}",
                code="SMTP_DELIVERY",
            ) from exc


class Notifier:
    """Sends one digest email per call. Never mutates products."""

    def __init__(self, transport: MailTransport, sender: Optional[str] = None):
        self.transport = transport
        self.sender = sender

    def build_message(self, recipient: str, digest: Digest) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = digest.subject
        if self.sender:
            message["From"] = self.sender
        message["To"] = recipient
        message.set_content(digest.render_text())
        message.add_alternative(digest.render_html(), subtype="html")
        return message

    def send(self, recipient: str, digest: Digest) -> bool:
        """
        Dispatch the digest to recipient.

        Returns:
            True when the transport accepted the message, False when it failed.
            Failures are logged here; the caller decides what to skip.
        """
        message = self.build_message(recipient, digest)
        try:
            self.transport.send(message)
        except TransportError as exc:
            logger.error(
                f"Expiry digest to {recipient} failed "
                f"({digest.product_count} product(s)): {exc}"
            )
            return False

        logger.info(
            f"Expiry digest sent to {recipient} ({digest.product_count} product(s))"
        )
        return True
