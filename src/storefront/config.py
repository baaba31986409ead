"""Application settings.

Settings are read once from the environment (and a ``.env`` file when one is
present) and passed explicitly to the services that need them.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from dotenv import load_dotenv

DEFAULT_SECRET_KEY = "changeme"


class CartPolicy(Enum):
    """How checkout treats lines that cannot be fulfilled."""

    DROP = "drop"
    REJECT = "reject"


@dataclass(frozen=True)
class SmtpSettings:
    host: str
    port: int = 587
    username: str | None = None
    password: str | None = None
    sender: str = "no-reply@storefront.local"
    use_tls: bool = True


@dataclass(frozen=True)
class Settings:
    env: str = "development"
    secret_key: str = DEFAULT_SECRET_KEY
    token_algorithm: str = "HS256"
    token_ttl_minutes: int = 60 * 24
    store_name: str = "Storefront"
    currency: str = "USD"
    cart_policy: CartPolicy = CartPolicy.DROP
    reservation_attempts: int = 3
    bcrypt_rounds: int = 12
    payment_success_message: str = "Pago exitoso"
    stripe_api_key: str | None = None
    smtp: SmtpSettings | None = None

    def __post_init__(self):
        if self.reservation_attempts < 1:
            raise ValueError("reservation_attempts must be at least 1")
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31")
        if self.env == "production" and self.secret_key == DEFAULT_SECRET_KEY:
            raise ValueError("STOREFRONT_SECRET_KEY must be set in production")

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from ``environ`` (defaults to ``os.environ`` after loading ``.env``)."""
        if environ is None:
            load_dotenv()
            environ = os.environ

        smtp = None
        if environ.get("SMTP_HOST"):
            smtp = SmtpSettings(
                host=environ["SMTP_HOST"],
                port=int(environ.get("SMTP_PORT", "587")),
                username=environ.get("SMTP_USERNAME"),
                password=environ.get("SMTP_PASSWORD"),
                sender=environ.get("SMTP_SENDER", "no-reply@storefront.local"),
                use_tls=environ.get("SMTP_USE_TLS", "true").lower() not in ("0", "false", "no"),
            )

        return cls(
            env=environ.get("PROTEAN_ENV", "development").lower(),
            secret_key=environ.get("STOREFRONT_SECRET_KEY", DEFAULT_SECRET_KEY),
            token_ttl_minutes=int(environ.get("STOREFRONT_TOKEN_TTL_MINUTES", str(60 * 24))),
            store_name=environ.get("STOREFRONT_STORE_NAME", "Storefront"),
            currency=environ.get("STOREFRONT_CURRENCY", "USD").upper(),
            cart_policy=CartPolicy(environ.get("STOREFRONT_CART_POLICY", CartPolicy.DROP.value).lower()),
            reservation_attempts=int(environ.get("STOREFRONT_RESERVATION_ATTEMPTS", "3")),
            bcrypt_rounds=int(environ.get("STOREFRONT_BCRYPT_ROUNDS", "12")),
            payment_success_message=environ.get("STOREFRONT_PAYMENT_SUCCESS_MESSAGE", "Pago exitoso"),
            stripe_api_key=environ.get("STRIPE_API_KEY") or None,
            smtp=smtp,
        )
