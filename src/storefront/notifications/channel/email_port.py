"""Mail delivery contract shared by the SMTP adapter and the in-memory fake."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class OutgoingEmail:
    to: str
    subject: str
    body: str
    html_body: str | None = None


@dataclass(frozen=True)
class SendResult:
    """What the transport did with one message."""

    delivered: bool
    message_id: str | None = None
    error: str | None = None


class EmailPort(ABC):
    @abstractmethod
    def deliver(self, email: OutgoingEmail) -> SendResult:
        """Hand ``email`` to the transport.

        A transport that refuses the message reports it in the result; only
        programming errors are raised.
        """
        ...
