"""SMTP email client used for OTP delivery to email identifiers."""

import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from fitdesk.config import Settings

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Raised when the SMTP server rejects or cannot take a message."""


class EmailClient:
    def __init__(self, settings: Settings):
        self.smtp_server = settings.SMTP_SERVER
        self.smtp_port = settings.SMTP_PORT
        self.smtp_username = settings.SMTP_USERNAME
        self.smtp_password = settings.SMTP_PASSWORD
        self.from_email = settings.FROM_EMAIL or settings.SMTP_USERNAME
        self.timeout = 15

    @property
    def is_configured(self) -> bool:
        return bool(self.smtp_server and self.from_email)

    def send_email(self, to_email: str, subject: str, text_content: str, html_content: Optional[str] = None) -> None:
        """Send a message over STARTTLS. Blocking; call from a worker thread."""
        if not self.is_configured:
            raise EmailDeliveryError("SMTP is not configured")

        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = self.from_email
        message["To"] = to_email
        message.attach(MIMEText(text_content, "plain", "utf-8"))
        if html_content:
            message.attach(MIMEText(html_content, "html", "utf-8"))

        try:
            context = ssl.create_default_context()
            with smtplib.SMTP(self.smtp_server, self.smtp_port, timeout=self.timeout) as server:
                server.starttls(context=context)
                if self.smtp_username:
                    server.login(self.smtp_username, self.smtp_password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise EmailDeliveryError(str(e)) from e

        logger.info("Email sent to %s: %s", to_email, subject)
