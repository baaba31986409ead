"""Tests for the payment confirmation email and the mail adapters."""

import smtplib
from unittest.mock import MagicMock

import pytest
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.config import Settings, SmtpSettings
from storefront.domain import storefront
from storefront.notifications.channel import FakeEmailAdapter, OutgoingEmail, SmtpEmailAdapter, build_mailer
from storefront.notifications.payment_confirmation import (
    PaymentConfirmationNotifier,
    PaymentConfirmationTemplate,
)
from storefront.ordering.order import Order


@pytest.fixture()
def notifier(mailer):
    return PaymentConfirmationNotifier(mailer, storefront, store_name="Test Store", currency="USD")


@pytest.fixture()
def paid_order(buyer, make_product):
    product = make_product(name="Alpaca Scarf", price=12.5, quantity=5)
    order = Order.place(
        user_id=buyer.id,
        country="Peru",
        city="Lima",
        address="Av. Arequipa 123",
        reference="Blue door",
        lines=[(product.id, 2, product.price)],
    )
    current_domain.repository_for(Order).add(order)
    return order


class TestTemplate:
    def test_render(self):
        message = PaymentConfirmationTemplate.render(
            {
                "store_name": "Test Store",
                "customer_name": "Ana Quispe",
                "order_id": "order-1",
                "total": "25.00",
                "currency": "USD",
                "placed_at": "2026-10-18 09:30 UTC",
                "city": "Lima",
                "country": "Peru",
                "address": "Av. Arequipa 123",
                "items": [{"name": "Alpaca <Scarf>", "quantity": 2, "price": "12.50"}],
            }
        )

        assert message["subject"] == "Test Store: payment received for order order-1"
        assert "USD 25.00" in message["body"]
        assert "- Alpaca <Scarf> x 2 @ 12.50" in message["body"]
        assert "Alpaca &lt;Scarf&gt;" in message["html_body"]
        assert "Order placed: 2026-10-18 09:30 UTC" in message["body"]
        assert "Shipping to: Lima, Peru\nAv. Arequipa 123" in message["body"]
        assert "<p>Lima, Peru</p><p>Av. Arequipa 123</p>" in message["html_body"]


class TestNotifier:
    def test_sends_to_buyer(self, notifier, mailer, paid_order):
        assert notifier.notify(paid_order.id) is True

        [email] = mailer.sent_emails
        assert email.to == "buyer@example.com"
        assert paid_order.id in email.subject
        assert "Alpaca Scarf x 2 @ 12.50" in email.body
        assert "25.00" in email.body
        assert "Shipping to: Lima, Peru" in email.body
        assert paid_order.created_at.strftime("%Y-%m-%d %H:%M") in email.body

    def test_adapter_failure_is_swallowed(self, notifier, mailer, paid_order):
        mailer.configure(should_succeed=False)
        assert notifier.notify(paid_order.id) is False

    def test_adapter_exception_is_swallowed(self, notifier, mailer, paid_order):
        mailer.configure(error=RuntimeError("smtp down"))
        assert notifier.notify(paid_order.id) is False

    def test_missing_order(self, notifier, mailer):
        assert notifier.notify("9a8b7c6d-5e4f-4a3b-8c2d-1e0f9a8b7c6d") is False
        assert mailer.sent_emails == []

    def test_missing_product(self, notifier, mailer, paid_order):
        repo = current_domain.repository_for(Product)
        for line in paid_order.lines:
            repo._dao.delete(repo.get(line.product_id))

        assert notifier.notify(paid_order.id) is False
        assert mailer.sent_emails == []


class TestBuildMailer:
    def test_fake_without_smtp(self):
        assert isinstance(build_mailer(Settings(env="test")), FakeEmailAdapter)

    def test_smtp_when_configured(self):
        settings = Settings(env="test", smtp=SmtpSettings(host="smtp.example.com"))
        assert isinstance(build_mailer(settings), SmtpEmailAdapter)


class TestSmtpAdapter:
    def test_send(self, monkeypatch):
        server = MagicMock()
        smtp = MagicMock()
        smtp.return_value.__enter__.return_value = server
        monkeypatch.setattr(smtplib, "SMTP", smtp)

        adapter = SmtpEmailAdapter(
            SmtpSettings(host="smtp.example.com", port=2525, username="shop", password="pw", sender="shop@example.com")
        )
        email = OutgoingEmail(to="ana@example.com", subject="Hello", body="Plain body", html_body="<p>Hi</p>")
        result = adapter.deliver(email)

        assert result.delivered is True
        assert result.message_id is not None
        smtp.assert_called_once_with("smtp.example.com", 2525, timeout=10.0)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("shop", "pw")

        message = server.send_message.call_args.args[0]
        assert message["To"] == "ana@example.com"
        assert message["From"] == "shop@example.com"
        assert message.is_multipart()

    def test_smtp_failure_is_reported(self, monkeypatch):
        monkeypatch.setattr(smtplib, "SMTP", MagicMock(side_effect=OSError("connection refused")))

        adapter = SmtpEmailAdapter(SmtpSettings(host="smtp.example.com", use_tls=False))
        result = adapter.deliver(OutgoingEmail(to="ana@example.com", subject="Hello", body="Plain body"))

        assert result.delivered is False
        assert "connection refused" in result.error
