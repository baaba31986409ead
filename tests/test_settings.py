"""Tests for environment-driven settings."""

import pytest

from storefront.config import CartPolicy, Settings


def test_defaults():
    settings = Settings.from_env({})

    assert settings.env == "development"
    assert settings.cart_policy is CartPolicy.DROP
    assert settings.currency == "USD"
    assert settings.payment_success_message == "Pago exitoso"
    assert settings.stripe_api_key is None
    assert settings.smtp is None
    assert settings.bcrypt_rounds == 12


def test_reads_environment():
    settings = Settings.from_env(
        {
            "PROTEAN_ENV": "Staging",
            "STOREFRONT_SECRET_KEY": "s3cret",
            "STOREFRONT_TOKEN_TTL_MINUTES": "15",
            "STOREFRONT_CURRENCY": "pen",
            "STOREFRONT_CART_POLICY": "REJECT",
            "STOREFRONT_RESERVATION_ATTEMPTS": "5",
            "STOREFRONT_BCRYPT_ROUNDS": "10",
            "STRIPE_API_KEY": "sk_test_123",
            "SMTP_HOST": "smtp.example.com",
            "SMTP_PORT": "2525",
            "SMTP_USE_TLS": "false",
        }
    )

    assert settings.env == "staging"
    assert settings.secret_key == "s3cret"
    assert settings.token_ttl_minutes == 15
    assert settings.currency == "PEN"
    assert settings.cart_policy is CartPolicy.REJECT
    assert settings.reservation_attempts == 5
    assert settings.bcrypt_rounds == 10
    assert settings.stripe_api_key == "sk_test_123"
    assert settings.smtp.port == 2525
    assert settings.smtp.use_tls is False


def test_unknown_cart_policy():
    with pytest.raises(ValueError):
        Settings.from_env({"STOREFRONT_CART_POLICY": "maybe"})


def test_production_needs_a_secret():
    with pytest.raises(ValueError):
        Settings.from_env({"PROTEAN_ENV": "production"})


def test_reservation_attempts_must_be_positive():
    with pytest.raises(ValueError):
        Settings(reservation_attempts=0)


@pytest.mark.parametrize("rounds", [3, 32])
def test_bcrypt_rounds_must_be_in_range(rounds):
    with pytest.raises(ValueError):
        Settings(bcrypt_rounds=rounds)
