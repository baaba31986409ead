"""In-memory email adapter used in development and tests."""

from uuid import uuid4

from storefront.notifications.channel.email_port import EmailPort, OutgoingEmail, SendResult


class FakeEmailAdapter(EmailPort):
    def __init__(self):
        self.sent_emails: list[OutgoingEmail] = []
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"
        self.error: Exception | None = None

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Email delivery failed",
        error: Exception | None = None,
    ):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.error = error

    def deliver(self, email: OutgoingEmail) -> SendResult:
        if self.error is not None:
            raise self.error
        if not self.should_succeed:
            return SendResult(delivered=False, error=self.failure_reason)

        self.sent_emails.append(email)
        return SendResult(delivered=True, message_id=f"email-{uuid4().hex[:12]}")
