"""Checkout: turn a requested cart into a placed order.

Each requested line is resolved against the catalogue, clamped to the stock
on hand and reserved with a conditional write. If anything fails after stock
has been reserved, the reservations are handed back before the error leaves
this module.
"""

from dataclasses import asdict, dataclass

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.config import CartPolicy, Settings
from storefront.ordering.order import Order
from storefront.utils.ids import is_valid_identifier
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ShippingDetails:
    country: str
    city: str
    address: str
    reference: str


@dataclass(frozen=True)
class RequestedLine:
    product_id: str
    quantity: int


class UnresolvableLine(Exception):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class CheckoutService:
    def __init__(self, policy: CartPolicy = CartPolicy.DROP, reservation_attempts: int = 3) -> None:
        self.policy = policy
        self.reservation_attempts = reservation_attempts

    @classmethod
    def from_settings(cls, settings: Settings) -> "CheckoutService":
        return cls(policy=settings.cart_policy, reservation_attempts=settings.reservation_attempts)

    def place_order(self, user_id: str, shipping: ShippingDetails, lines: list[RequestedLine]) -> Order:
        """Reserve stock for ``lines`` and persist the resulting order.

        Under ``CartPolicy.DROP`` lines that cannot be fulfilled are left out
        of the order. Under ``CartPolicy.REJECT`` any such line fails the
        whole checkout with a ``ValidationError`` keyed by line position.
        """
        products = current_domain.repository_for(Product)

        if self.policy is CartPolicy.REJECT:
            problems = {}
            for index, line in enumerate(lines):
                reason = self._precheck(products, line)
                if reason:
                    problems[f"products.{index}"] = [reason]
            if problems:
                raise ValidationError(problems)

        reserved: list[tuple[Product, int]] = []
        try:
            for index, line in enumerate(lines):
                try:
                    reserved.append(self._reserve(products, line))
                except UnresolvableLine as exc:
                    if self.policy is CartPolicy.REJECT:
                        raise ValidationError({f"products.{index}": [exc.reason]}) from None
                    logger.info(
                        "Dropping order line",
                        user_id=str(user_id),
                        product_id=str(line.product_id),
                        reason=exc.reason,
                    )

            order = Order.place(
                user_id=user_id,
                lines=[(product.id, quantity, product.price) for product, quantity in reserved],
                **asdict(shipping),
            )
            current_domain.repository_for(Order).add(order)
        except Exception:
            self._release(products, reserved)
            raise

        logger.info(
            "Order placed",
            order_id=str(order.id),
            user_id=str(user_id),
            lines=len(order.lines),
            total_amount=order.total_amount,
        )
        return order

    def _precheck(self, products, line: RequestedLine) -> str | None:
        reason = _line_problem(line)
        if reason:
            return reason

        product = products.find(line.product_id)
        if product is None:
            return "Product not found"
        if product.acceptable_quantity(line.quantity) == 0:
            return "Product is out of stock"
        return None

    def _reserve(self, products, line: RequestedLine) -> tuple[Product, int]:
        reason = _line_problem(line)
        if reason:
            raise UnresolvableLine(reason)

        for _ in range(self.reservation_attempts):
            product = products.find(line.product_id)
            if product is None:
                raise UnresolvableLine("Product not found")

            accepted = product.acceptable_quantity(line.quantity)
            if accepted == 0:
                raise UnresolvableLine("Product is out of stock")

            if products.reserve(product, accepted):
                return product, accepted

            logger.debug("Stock changed during reservation, retrying", product_id=str(product.id))

        raise UnresolvableLine("Stock changed while reserving, try again")

    def _release(self, products, reserved: list[tuple[Product, int]]) -> None:
        for product, quantity in reserved:
            products.release(product.id, quantity, attempts=self.reservation_attempts)
        if reserved:
            logger.warning("Released stock after failed checkout", lines=len(reserved))


def _line_problem(line: RequestedLine) -> str | None:
    if not is_valid_identifier(line.product_id):
        return "Product id is not valid"
    if not isinstance(line.quantity, int) or line.quantity < 1:
        return "Quantity must be a positive integer"
    return None
