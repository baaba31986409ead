"""Email channel factory.

``build_mailer()`` returns the SMTP adapter when SMTP is configured and the
in-memory fake otherwise.
"""

from storefront.config import Settings
from storefront.notifications.channel.email_port import EmailPort, OutgoingEmail, SendResult
from storefront.notifications.channel.fake_email import FakeEmailAdapter
from storefront.notifications.channel.smtp_email import SmtpEmailAdapter

__all__ = [
    "EmailPort",
    "FakeEmailAdapter",
    "OutgoingEmail",
    "SendResult",
    "SmtpEmailAdapter",
    "build_mailer",
]


def build_mailer(settings: Settings) -> EmailPort:
    if settings.smtp is not None:
        return SmtpEmailAdapter(settings.smtp)
    return FakeEmailAdapter()
