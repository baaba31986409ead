"""Configurable fake payment gateway for development and testing.

No external calls are made. Behaviour can be switched at runtime to succeed,
decline or raise, and every call is recorded in ``calls``.
"""

from uuid import uuid4

from storefront.payments.gateway.port import ChargeResult, PaymentGateway


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Your card was declined."
        self.error: Exception | None = None
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool,
        failure_reason: str = "Your card was declined.",
        error: Exception | None = None,
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.error = error

    def create_charge(
        self,
        amount: int,
        currency: str,
        payment_method: str,
        description: str,
        idempotency_key: str,
    ) -> ChargeResult:
        self.calls.append(
            {
                "method": "create_charge",
                "amount": amount,
                "currency": currency,
                "payment_method": payment_method,
                "description": description,
                "idempotency_key": idempotency_key,
            }
        )

        if self.error is not None:
            raise self.error

        if self.should_succeed:
            return ChargeResult(
                success=True,
                gateway_transaction_id=f"fake_pi_{uuid4().hex[:12]}",
                gateway_status="succeeded",
            )
        return ChargeResult(
            success=False,
            gateway_status="declined",
            failure_reason=self.failure_reason,
        )
