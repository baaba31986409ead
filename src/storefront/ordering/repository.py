"""Order repository.

Payment state moves through version-checked writes: each transition only
lands when the stored order is still at the version it was read at, so two
concurrent captures of the same order cannot both charge it.
"""

from datetime import datetime

from protean import UnitOfWork
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order import Order, OrderLine, PaymentStatus
from storefront.utils.clock import utc_now
from storefront.utils.versioning import save_if_current

PATCHABLE_FIELDS = ("country", "city", "address", "reference", "status")


def _newest_first(orders: list[Order]) -> list[Order]:
    return sorted(orders, key=lambda order: order.created_at, reverse=True)


@storefront.repository(part_of=Order)
class OrderRepository:
    def find(self, order_id) -> Order | None:
        try:
            return self.get(order_id)
        except ObjectNotFoundError:
            return None

    def owned_by(self, user_id) -> list[Order]:
        return _newest_first(self._dao.query.filter(user_id=str(user_id)).all().items)

    def everything(self) -> list[Order]:
        return _newest_first(self._dao.query.all().items)

    def created_since(self, boundary: datetime) -> list[Order]:
        return self._dao.query.filter(created_at__gte=boundary).all().items

    def remove(self, order: Order) -> None:
        """Delete ``order`` together with its lines."""
        line_dao = current_domain.repository_for(OrderLine)._dao
        with UnitOfWork():
            for line in list(order.lines):
                line_dao.delete(line)
            self._dao.delete(order)

    def apply_changes(self, order_id, changes: dict) -> bool:
        """Overwrite the given top-level fields and nothing else."""
        unknown = set(changes) - set(PATCHABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be patched: {', '.join(sorted(unknown))}")

        order = self.find(order_id)
        if order is None:
            return False

        for field, value in changes.items():
            setattr(order, field, value)
        order.updated_at = utc_now()
        return save_if_current(self, order)

    def claim_for_payment(self, order_id) -> bool:
        """unpaid → processing. False if the order is paid or already being charged."""
        order = self.find(order_id)
        if order is None or order.paid or order.payment_status != PaymentStatus.UNPAID.value:
            return False

        order.payment_status = PaymentStatus.PROCESSING.value
        order.updated_at = utc_now()
        return save_if_current(self, order)

    def release_payment_claim(self, order_id) -> bool:
        """processing → unpaid, after a declined or failed charge."""
        order = self.find(order_id)
        if order is None or order.payment_status != PaymentStatus.PROCESSING.value:
            return False

        order.payment_status = PaymentStatus.UNPAID.value
        order.updated_at = utc_now()
        return save_if_current(self, order)

    def settle_payment(self, order_id, payment_reference: str | None) -> bool:
        """processing → paid."""
        order = self.find(order_id)
        if order is None or order.payment_status != PaymentStatus.PROCESSING.value:
            return False

        order.paid = True
        order.payment_status = PaymentStatus.PAID.value
        order.payment_reference = payment_reference
        order.updated_at = utc_now()
        return save_if_current(self, order)
