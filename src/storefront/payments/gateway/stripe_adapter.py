"""Stripe payment gateway adapter.

Charges are PaymentIntents created and confirmed in a single request.
Card declines and invalid requests come back as unsuccessful results that
carry Stripe's user-facing message; connection and authentication problems
propagate as ``stripe.StripeError``.
"""

import stripe

from storefront.payments.gateway.port import ChargeResult, PaymentGateway


class StripeGateway(PaymentGateway):
    def __init__(self, api_key: str, client: stripe.StripeClient | None = None) -> None:
        self.client = client or stripe.StripeClient(api_key)

    def create_charge(
        self,
        amount: int,
        currency: str,
        payment_method: str,
        description: str,
        idempotency_key: str,
    ) -> ChargeResult:
        params = {
            "amount": amount,
            "currency": currency.lower(),
            "description": description,
            "payment_method": payment_method,
            "confirm": True,
            # Server-side confirmation has no page to redirect back to
            "automatic_payment_methods": {"enabled": True, "allow_redirects": "never"},
        }
        try:
            intent = self.client.payment_intents.create(
                params=params,
                options={"idempotency_key": idempotency_key},
            )
        except stripe.CardError as exc:
            return ChargeResult(
                success=False,
                gateway_status=exc.code or "card_error",
                failure_reason=exc.user_message or str(exc),
            )
        except stripe.InvalidRequestError as exc:
            return ChargeResult(
                success=False,
                gateway_status="invalid_request",
                failure_reason=exc.user_message or str(exc),
            )

        if intent.status != "succeeded":
            return ChargeResult(
                success=False,
                gateway_transaction_id=intent.id,
                gateway_status=intent.status,
                failure_reason=f"Payment was not completed ({intent.status})",
            )
        return ChargeResult(
            success=True,
            gateway_transaction_id=intent.id,
            gateway_status=intent.status,
        )
