"""Payment confirmation email, sent after an order has been paid.

Delivery is best effort: the notifier runs as a background task after the
payment response has been decided, and every failure ends in a log line.
"""

from html import escape

from protean.domain import Domain
from protean.exceptions import ObjectNotFoundError

from storefront.catalogue.product import Product
from storefront.identity.user import User
from storefront.notifications.channel.email_port import EmailPort, OutgoingEmail
from storefront.ordering.order import Order
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentConfirmationTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        store = context.get("store_name", "Storefront")
        name = context.get("customer_name", "")
        order_id = context.get("order_id", "N/A")
        total = context.get("total", "0.00")
        currency = context.get("currency", "USD")
        placed_at = context.get("placed_at", "")
        city = context.get("city", "")
        country = context.get("country", "")
        address = context.get("address", "")
        items = context.get("items", [])

        lines = [f"- {item['name']} x {item['quantity']} @ {item['price']}" for item in items]
        rows = "".join(
            f"<tr><td>{escape(item['name'])}</td><td>{item['quantity']}</td><td>{item['price']}</td></tr>"
            for item in items
        )
        return {
            "subject": f"{store}: payment received for order {order_id}",
            "body": (
                f"Hi {name},\n\n"
                f"We received your payment of {currency} {total} for order {order_id}.\n\n"
                f"Order placed: {placed_at}\n"
                f"Shipping to: {city}, {country}\n"
                f"{address}\n\n"
                + "\n".join(lines)
                + f"\n\nThank you for shopping at {store}!"
            ),
            "html_body": (
                f"<p>Hi {escape(name)},</p>"
                f"<p>We received your payment of {currency} {total} for order {order_id}.</p>"
                f"<h3>Order placed</h3><p>{escape(placed_at)}</p>"
                f"<h3>Shipping to</h3><p>{escape(city)}, {escape(country)}</p><p>{escape(address)}</p>"
                f"<table><tr><th>Product</th><th>Quantity</th><th>Price</th></tr>{rows}</table>"
                f"<p>Thank you for shopping at {escape(store)}!</p>"
            ),
        }


class PaymentConfirmationNotifier:
    """Email the buyer of a paid order.

    Runs outside the request, so it opens its own domain context.
    """

    def __init__(self, mailer: EmailPort, domain: Domain, store_name: str = "Storefront", currency: str = "USD"):
        self.mailer = mailer
        self.domain = domain
        self.store_name = store_name
        self.currency = currency

    def notify(self, order_id: str) -> bool:
        """Return True when the adapter accepted the message."""
        try:
            with self.domain.domain_context():
                to, message = self._compose(order_id)
                result = self.mailer.deliver(OutgoingEmail(to=to, **message))
        except Exception:
            logger.exception("Payment confirmation email failed", order_id=order_id)
            return False

        if not result.delivered:
            logger.warning(
                "Payment confirmation email not delivered",
                order_id=order_id,
                error=result.error,
            )
            return False

        logger.info("Payment confirmation email sent", order_id=order_id, message_id=result.message_id)
        return True

    def _compose(self, order_id: str) -> tuple[str, dict]:
        order = self.domain.repository_for(Order).get(order_id)
        user = self.domain.repository_for(User).get(order.user_id)

        products = self.domain.repository_for(Product)
        items = []
        for line in order.lines:
            product = products.find(line.product_id)
            if product is None:
                raise ObjectNotFoundError(f"Product {line.product_id} of order {order_id} no longer exists")
            items.append({"name": product.name, "quantity": line.quantity, "price": f"{line.unit_price:.2f}"})

        context = {
            "store_name": self.store_name,
            "customer_name": f"{user.name} {user.lastname}".strip(),
            "order_id": str(order.id),
            "total": f"{order.total_amount:.2f}",
            "currency": self.currency,
            "placed_at": order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
            "city": order.city,
            "country": order.country,
            "address": order.address,
            "items": items,
        }
        return user.email, PaymentConfirmationTemplate.render(context)
