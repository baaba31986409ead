"""SMTP email adapter."""

import smtplib
from email.message import EmailMessage
from email.utils import make_msgid

from storefront.config import SmtpSettings
from storefront.notifications.channel.email_port import EmailPort, OutgoingEmail, SendResult
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class SmtpEmailAdapter(EmailPort):
    def __init__(self, settings: SmtpSettings, timeout: float = 10.0):
        self.settings = settings
        self.timeout = timeout

    def _mime(self, email: OutgoingEmail) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.settings.sender
        message["To"] = email.to
        message["Subject"] = email.subject
        message["Message-ID"] = make_msgid()
        message.set_content(email.body)
        if email.html_body:
            message.add_alternative(email.html_body, subtype="html")
        return message

    def deliver(self, email: OutgoingEmail) -> SendResult:
        message = self._mime(email)
        try:
            with smtplib.SMTP(self.settings.host, self.settings.port, timeout=self.timeout) as server:
                if self.settings.use_tls:
                    server.starttls()
                if self.settings.username:
                    server.login(self.settings.username, self.settings.password or "")
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.warning("SMTP delivery failed", host=self.settings.host, error=str(exc))
            return SendResult(delivered=False, error=str(exc))

        return SendResult(delivered=True, message_id=message["Message-ID"])
