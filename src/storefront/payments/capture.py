"""Order payment capture.

An order is charged at most once: it is claimed (unpaid → processing) before
the processor is called and settled (processing → paid) afterwards. A
declined or failed charge hands the claim back so the buyer can retry.
"""

from decimal import ROUND_HALF_UP, Decimal

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.config import Settings
from storefront.exceptions import OrderAlreadyPaid, PaymentDeclined, PermissionDenied
from storefront.identity.tokens import Caller
from storefront.ordering.order import Order
from storefront.payments.gateway.port import PaymentGateway
from storefront.utils.ids import is_valid_identifier
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def to_minor_units(amount: float) -> int:
    """12.34 → 1234"""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentService:
    def __init__(self, gateway: PaymentGateway, store_name: str = "Storefront", currency: str = "USD") -> None:
        self.gateway = gateway
        self.store_name = store_name
        self.currency = currency

    @classmethod
    def from_settings(cls, settings: Settings, gateway: PaymentGateway) -> "PaymentService":
        return cls(gateway=gateway, store_name=settings.store_name, currency=settings.currency)

    def capture(self, caller: Caller, order_id: str, process_id: str) -> Order:
        """Charge the total of ``order_id`` to the payment method ``process_id``.

        Returns the paid order. Raises ``ValidationError`` for a malformed or
        unknown order, ``PermissionDenied`` when the caller neither owns the
        order nor is an admin, ``OrderAlreadyPaid`` when the order is paid or
        being charged, and ``PaymentDeclined`` when the processor refuses.
        """
        if not is_valid_identifier(order_id):
            raise ValidationError({"orderId": ["Order id is not valid"]})

        orders = current_domain.repository_for(Order)
        order = orders.find(order_id)
        if order is None:
            raise ValidationError({"orderId": ["Order does not exist"]})

        if not caller.can_access(order.user_id):
            raise PermissionDenied("Order belongs to another user")
        if order.paid:
            raise OrderAlreadyPaid()
        if not order.is_payable:
            raise ValidationError({"orderId": ["Order has nothing to pay"]})

        if not orders.claim_for_payment(order_id):
            raise OrderAlreadyPaid("Order is already paid or being paid")
        logger.info("Order claimed for payment", order_id=order_id, user_id=caller.user_id)

        try:
            result = self.gateway.create_charge(
                amount=to_minor_units(order.total_amount),
                currency=self.currency,
                payment_method=process_id,
                description=f"Order {order_id} at {self.store_name}",
                idempotency_key=f"order-{order_id}-{process_id}",
            )
        except Exception:
            orders.release_payment_claim(order_id)
            logger.exception("Payment processor call failed", order_id=order_id)
            raise

        if not result.success:
            orders.release_payment_claim(order_id)
            logger.info(
                "Payment declined",
                order_id=order_id,
                gateway_status=result.gateway_status,
                reason=result.failure_reason,
            )
            raise PaymentDeclined(result.failure_reason)

        if not orders.settle_payment(order_id, result.gateway_transaction_id):
            # The claim was taken away while the charge was in flight
            logger.error(
                "Charged order could not be marked paid",
                order_id=order_id,
                gateway_transaction_id=result.gateway_transaction_id,
            )
            raise OrderAlreadyPaid("Order payment state changed during capture")

        logger.info("Order paid", order_id=order_id, gateway_transaction_id=result.gateway_transaction_id)
        return orders.get(order_id)
