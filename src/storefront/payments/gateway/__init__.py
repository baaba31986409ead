"""Payment gateway factory.

``build_gateway()`` picks the implementation from settings:
- StripeGateway when a Stripe API key is configured
- FakeGateway for development and testing
"""

from storefront.config import Settings
from storefront.payments.gateway.fake_adapter import FakeGateway
from storefront.payments.gateway.port import ChargeResult, PaymentGateway
from storefront.payments.gateway.stripe_adapter import StripeGateway

__all__ = ["ChargeResult", "FakeGateway", "PaymentGateway", "StripeGateway", "build_gateway"]


def build_gateway(settings: Settings) -> PaymentGateway:
    if settings.stripe_api_key:
        return StripeGateway(settings.stripe_api_key)
    if settings.is_production:
        raise ValueError("STRIPE_API_KEY must be set in production")
    return FakeGateway()
