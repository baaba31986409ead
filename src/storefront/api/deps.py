"""Request dependencies: authentication and the services held on ``app.state``."""

from fastapi import Depends, Header, Request
from protean.utils.globals import current_domain

from storefront.config import Settings
from storefront.exceptions import AuthenticationFailed, PermissionDenied
from storefront.identity.tokens import Caller, TokenService
from storefront.identity.user import User
from storefront.notifications.payment_confirmation import PaymentConfirmationNotifier
from storefront.ordering.checkout import CheckoutService
from storefront.payments.capture import PaymentService

TOKEN_HEADER = "x-auth-token"


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_checkout(request: Request) -> CheckoutService:
    return request.app.state.checkout


def get_payments(request: Request) -> PaymentService:
    return request.app.state.payments


def get_notifier(request: Request) -> PaymentConfirmationNotifier:
    return request.app.state.notifier


def current_caller(
    token: str | None = Header(default=None, alias=TOKEN_HEADER),
    tokens: TokenService = Depends(get_token_service),
) -> Caller:
    if not token:
        raise AuthenticationFailed("No token, auth denied")
    return tokens.decode(token)


def admin_caller(caller: Caller = Depends(current_caller)) -> Caller:
    """The caller, re-checked against the stored user record."""
    user = current_domain.repository_for(User).find(caller.user_id)
    if user is None:
        raise AuthenticationFailed("User not found")
    if not user.is_admin:
        raise PermissionDenied()
    return Caller(user_id=str(user.id), role=user.role)
