import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Initialize the storefront domain before collection.

    Environment variables must be in place before the domain module is
    imported, since logging and the protean config overlay read them.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from storefront.domain import storefront

    storefront.init()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)


@pytest.fixture(scope="session", autouse=True)
def setup_db():
    from storefront.domain import storefront
    from storefront.utils.db import drop_db, setup_db

    setup_db(storefront)

    yield

    drop_db(storefront)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Push domain context before each test, cleanup after."""
    from storefront.domain import storefront

    ctx = storefront.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_product():
    from protean.utils.globals import current_domain

    from storefront.catalogue.product import Product

    counter = {"n": 0}

    def _make(name=None, price=2.0, quantity=3, sold=0):
        counter["n"] += 1
        product = Product.create(
            name=name or f"Product {counter['n']}",
            price=price,
            quantity=quantity,
            sold=sold,
        )
        current_domain.repository_for(Product).add(product)
        return product

    return _make


@pytest.fixture()
def make_user():
    from protean.utils.globals import current_domain

    from storefront.identity.registration import RegisterUser
    from storefront.identity.user import User

    counter = {"n": 0}

    def _make(email=None, password="secret123", role=0, name="Ana", lastname="Quispe"):
        counter["n"] += 1
        user_id = current_domain.process(
            RegisterUser(
                email=email or f"user{counter['n']}@example.com",
                password=password,
                name=name,
                lastname=lastname,
                role=role,
                hash_rounds=4,
            ),
            asynchronous=False,
        )
        return current_domain.repository_for(User).get(user_id)

    return _make


@pytest.fixture()
def buyer(make_user):
    return make_user(email="buyer@example.com")


@pytest.fixture()
def admin(make_user):
    return make_user(email="admin@example.com", role=1, name="Root", lastname="Admin")


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------
@pytest.fixture()
def settings():
    from storefront.config import Settings

    return Settings(env="test", secret_key="test-secret", store_name="Test Store", bcrypt_rounds=4)


@pytest.fixture()
def gateway():
    from storefront.payments.gateway import FakeGateway

    return FakeGateway()


@pytest.fixture()
def mailer():
    from storefront.notifications.channel import FakeEmailAdapter

    return FakeEmailAdapter()


@pytest.fixture()
def tokens(settings):
    from storefront.identity.tokens import TokenService

    return TokenService.from_settings(settings)


@pytest.fixture()
def app(settings, gateway, mailer):
    from storefront.api import create_app

    return create_app(settings, gateway=gateway, mailer=mailer)


@pytest.fixture()
def client(app):
    from fastapi.testclient import TestClient

    return TestClient(app)


@pytest.fixture()
def auth_headers(tokens):
    def _headers(user):
        return {"x-auth-token": tokens.issue(user)}

    return _headers
