"""Order aggregate: a buyer's checkout, its lines and its payment state.

Lifecycle:
    status:          pending → completed        (admin driven)
    payment_status:  unpaid → processing → paid (payment capture)
                     processing → unpaid        (charge declined or failed)

``paid`` mirrors ``payment_status == paid`` and is the flag clients read.
"""

from enum import Enum

from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String

from storefront.domain import storefront
from storefront.utils.clock import utc_now


class OrderStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class PaymentStatus(Enum):
    UNPAID = "unpaid"
    PROCESSING = "processing"
    PAID = "paid"


def order_total(lines) -> float:
    """Sum of quantity × unit price over ``lines``, rounded to cents."""
    return round(sum(line.quantity * line.unit_price for line in lines), 2)


@storefront.entity(part_of="Order")
class OrderLine:
    """One accepted product with the price it was sold at."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)


@storefront.aggregate
class Order:
    user_id = Identifier(required=True)
    country = String(required=True, max_length=100)
    city = String(required=True, max_length=100)
    address = String(required=True, max_length=255)
    reference = String(required=True, max_length=255)
    lines = HasMany(OrderLine)
    total_amount = Float(default=0.0, min_value=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    paid = Boolean(default=False)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.UNPAID.value)
    payment_reference = String(max_length=255)
    created_at = DateTime(default=utc_now)
    updated_at = DateTime(default=utc_now)

    @classmethod
    def place(cls, user_id, country, city, address, reference, lines):
        """Create a pending, unpaid order.

        Args:
            user_id: The buyer.
            country, city, address, reference: Shipping details.
            lines: Iterable of ``(product_id, quantity, unit_price)`` for the
                accepted lines; the total is derived from them.
        """
        now = utc_now()
        order_lines = [
            OrderLine(product_id=str(product_id), quantity=quantity, unit_price=unit_price)
            for product_id, quantity, unit_price in lines
        ]

        order = cls(
            user_id=str(user_id),
            country=country,
            city=city,
            address=address,
            reference=reference,
            total_amount=order_total(order_lines),
            created_at=now,
            updated_at=now,
        )
        for line in order_lines:
            order.add_lines(line)
        return order

    @property
    def is_payable(self) -> bool:
        return not self.paid and self.total_amount > 0
