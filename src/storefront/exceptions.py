"""Application errors that map onto HTTP responses.

Field-level validation problems are raised as ``protean.exceptions.ValidationError``;
everything here carries a status code and a single human-readable message.
"""


class StorefrontError(Exception):
    status_code = 500
    default_message = "Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationFailed(StorefrontError):
    status_code = 401
    default_message = "Token is invalid"


class PermissionDenied(StorefrontError):
    status_code = 403
    default_message = "Admin resources access denied"


class OrderNotFound(StorefrontError):
    status_code = 404
    default_message = "Order not found"


class OrderAlreadyPaid(StorefrontError):
    status_code = 400
    default_message = "Order is already paid"


class PaymentDeclined(StorefrontError):
    """The processor refused the charge; ``message`` is the processor's own text."""

    status_code = 400
    default_message = "Payment was declined"
