"""Tests for product registration and conditional stock updates."""

import pytest
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.catalogue.management import AddProduct
from storefront.catalogue.product import Product


class TestAddProduct:
    def test_add_product(self):
        product_id = current_domain.process(
            AddProduct(name="Keyboard", description="Mechanical", price=49.5, quantity=7),
            asynchronous=False,
        )

        product = current_domain.repository_for(Product).get(product_id)
        assert product.name == "Keyboard"
        assert product.quantity == 7
        assert product.sold == 0

    def test_duplicate_name_is_rejected(self):
        current_domain.process(AddProduct(name="Keyboard", price=49.5, quantity=7), asynchronous=False)

        with pytest.raises(ValidationError) as exc:
            current_domain.process(AddProduct(name="Keyboard", price=10.0, quantity=1), asynchronous=False)
        assert exc.value.messages["name"] == ["Product already exists"]


class TestReserve:
    def test_reserve_moves_stock_to_sold(self, make_product):
        product = make_product(quantity=3, sold=1)
        repo = current_domain.repository_for(Product)

        assert repo.reserve(product, 2) is True

        stored = repo.get(product.id)
        assert stored.quantity == 1
        assert stored.sold == 3

    def test_stale_snapshot_fails(self, make_product):
        product = make_product(quantity=3)
        repo = current_domain.repository_for(Product)
        stale = repo.get(product.id)

        assert repo.reserve(product, 1) is True
        assert repo.reserve(stale, 1) is False

        stored = repo.get(product.id)
        assert stored.quantity == 2
        assert stored.sold == 1

    def test_cannot_reserve_more_than_stock(self, make_product):
        product = make_product(quantity=2)
        repo = current_domain.repository_for(Product)

        assert repo.reserve(product, 3) is False
        assert repo.reserve(product, 0) is False
        assert repo.get(product.id).quantity == 2


class TestRelease:
    def test_release_returns_stock(self, make_product):
        product = make_product(quantity=3)
        repo = current_domain.repository_for(Product)
        repo.reserve(product, 3)

        assert repo.release(product.id, 3) is True

        stored = repo.get(product.id)
        assert stored.quantity == 3
        assert stored.sold == 0

    def test_release_of_missing_product(self):
        repo = current_domain.repository_for(Product)
        assert repo.release("7d4f5b8e-9d1c-4c2e-8a0b-1f2e3d4c5b6a", 1) is False
