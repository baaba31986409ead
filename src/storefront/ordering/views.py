"""Read-side shapes for orders."""

from dataclasses import dataclass, field

from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.ordering.order import Order


@dataclass(frozen=True)
class DetailedLine:
    product_id: str
    name: str
    price: float
    quantity: int


@dataclass(frozen=True)
class OrderDetail:
    order: Order
    lines: list[DetailedLine] = field(default_factory=list)


def order_detail(order: Order) -> OrderDetail:
    """Attach current catalogue data to each line of ``order``.

    Lines whose product has since been removed from the catalogue are left out.
    """
    products = current_domain.repository_for(Product)
    lines = []
    for line in order.lines:
        product = products.find(line.product_id)
        if product is None:
            continue
        lines.append(
            DetailedLine(
                product_id=str(product.id),
                name=product.name,
                price=product.price,
                quantity=line.quantity,
            )
        )
    return OrderDetail(order=order, lines=lines)
