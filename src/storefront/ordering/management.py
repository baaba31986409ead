"""Administrative order changes: shipping/status patches and deletion."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.exceptions import OrderNotFound
from storefront.ordering.order import Order, OrderStatus
from storefront.ordering.repository import PATCHABLE_FIELDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrder:
    order_id = Identifier(required=True)
    country = String(max_length=100)
    city = String(max_length=100)
    address = String(max_length=255)
    reference = String(max_length=255)
    status = String(max_length=20)


@storefront.command(part_of="Order")
class DeleteOrder:
    order_id = Identifier(required=True)


def _changes_from(command) -> dict:
    changes = {}
    errors = {}
    for field in PATCHABLE_FIELDS:
        value = getattr(command, field)
        if value is None:
            continue
        value = value.strip()
        if not value:
            errors[field] = [f"{field.capitalize()} cannot be empty"]
            continue
        changes[field] = value

    allowed = [status.value for status in OrderStatus]
    if "status" in changes and changes["status"] not in allowed:
        errors["status"] = [f"Status can only be one of: {', '.join(allowed)}"]

    if errors:
        raise ValidationError(errors)
    return changes


@storefront.command_handler(part_of=Order)
class ManageOrderHandler:
    @handle(UpdateOrder)
    def update_order(self, command):
        repo = current_domain.repository_for(Order)
        if repo.find(command.order_id) is None:
            raise OrderNotFound()

        changes = _changes_from(command)
        if changes:
            repo.apply_changes(command.order_id, changes)
            logger.info("Order updated", order_id=str(command.order_id), fields=sorted(changes))
        return str(command.order_id)

    @handle(DeleteOrder)
    def delete_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find(command.order_id)
        if order is None:
            raise OrderNotFound()

        repo.remove(order)
        logger.info("Order deleted", order_id=str(command.order_id))
        return str(command.order_id)
