from __future__ import annotations

import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from lumir_auth.services._shared.ports.notifier import MailMessage, Notifier

logger = logging.getLogger(__name__)


class SMTPNotifier(Notifier):
    """
    Deliver messages through an SMTP relay.

    Uses STARTTLS on a plain connection when ``starttls`` is set; port 465
    switches to implicit TLS.
    """

    def __init__(
        self,
        *,
        host: str,
        port: int,
        from_name: str,
        from_address: str,
        user: str | None = None,
        password: str | None = None,
        starttls: bool = True,
        timeout: int = 30,
    ) -> None:
        self.host = host
        self.port = port
        self.from_name = from_name
        self.from_address = from_address
        self.user = user
        self.password = password or ""
        self.starttls = starttls
        self.timeout = timeout

    def _create_message(self, message: MailMessage) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = message.subject
        msg["From"] = f"{self.from_name} <{self.from_address}>"
        msg["To"] = message.to
        msg.attach(MIMEText(message.text, "plain"))
        msg.attach(MIMEText(message.html, "html"))
        return msg

    def send(self, message: MailMessage) -> None:
        mime = self._create_message(message)
        context = ssl.create_default_context()
        if self.port == 465:
            # Implicit TLS
            with smtplib.SMTP_SSL(
                self.host, self.port, context=context, timeout=self.timeout
            ) as server:
                if self.user:
                    server.login(self.user, self.password)
                server.send_message(mime)
        else:
            # STARTTLS (port 587) or plain
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.starttls:
                    server.starttls(context=context)
                if self.user:
                    server.login(self.user, self.password)
                server.send_message(mime)
        logger.info("Email sent", extra={"at": "SMTPNotifier.send"})


class LoggingNotifier(Notifier):
    """Stand-in used when mail is disabled: logs instead of delivering."""

    def send(self, message: MailMessage) -> None:
        logger.warning(
            "Mail disabled, %s email not sent (subject=%r)",
            message.template,
            message.subject,
            extra={"at": "LoggingNotifier.send"},
        )
