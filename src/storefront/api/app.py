"""Storefront FastAPI application factory.

Every request runs inside the storefront domain context. Services and their
configuration are built once here and kept on ``app.state``.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api.errors import register_error_handlers
from storefront.api.routes import order_router, payment_router, user_router
from storefront.config import Settings
from storefront.domain import storefront
from storefront.identity.tokens import TokenService
from storefront.notifications.channel import EmailPort, build_mailer
from storefront.notifications.payment_confirmation import PaymentConfirmationNotifier
from storefront.ordering.checkout import CheckoutService
from storefront.payments.capture import PaymentService
from storefront.payments.gateway import PaymentGateway, build_gateway


def create_app(
    settings: Settings | None = None,
    *,
    gateway: PaymentGateway | None = None,
    mailer: EmailPort | None = None,
) -> FastAPI:
    """Build the application. ``storefront.init()`` must have run already."""
    settings = settings or Settings.from_env()
    gateway = gateway or build_gateway(settings)
    mailer = mailer or build_mailer(settings)

    app = FastAPI(
        title=f"{settings.store_name} API",
        description="Orders, payments and users",
    )
    app.state.settings = settings
    app.state.gateway = gateway
    app.state.mailer = mailer
    app.state.tokens = TokenService.from_settings(settings)
    app.state.checkout = CheckoutService.from_settings(settings)
    app.state.payments = PaymentService.from_settings(settings, gateway)
    app.state.notifier = PaymentConfirmationNotifier(
        mailer, storefront, store_name=settings.store_name, currency=settings.currency
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the storefront domain context for each request."""
        with storefront.domain_context():
            response = await call_next(request)
        return response

    register_error_handlers(app)

    app.include_router(order_router)
    app.include_router(payment_router)
    app.include_router(user_router)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "domain": storefront.name, "env": settings.env})

    return app
