"""Payment gateway port (abstract interface).

Capture code talks to this contract only, so the Stripe adapter and the
in-memory fake are interchangeable.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ChargeResult:
    """Result of a payment charge attempt."""

    success: bool
    gateway_transaction_id: str | None = None
    gateway_status: str | None = None
    failure_reason: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_charge(
        self,
        amount: int,
        currency: str,
        payment_method: str,
        description: str,
        idempotency_key: str,
    ) -> ChargeResult:
        """Charge ``amount`` (smallest currency unit) and confirm it immediately.

        A refusal by the processor is returned as an unsuccessful result;
        transport or configuration problems are raised.
        """
        ...
