from storefront.api.app import create_app
from storefront.api.routes import order_router, payment_router, user_router

__all__ = ["create_app", "order_router", "payment_router", "user_router"]
