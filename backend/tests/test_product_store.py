"""
Storefront Products: Catalog Store Unit Tests
=============================================

What we test:
    ✅ Seed catalog and filtering (category exact, search substring)
    ✅ Create: required fields, negative values, id assignment, defaults
    ✅ Update: partial updates, stock 0 applied, falsy fields ignored
    ✅ Delete and not-found handling
    ✅ Stock lookup and availability flag
"""

import pytest

from storefront.exceptions import NotFoundError, ValidationError
from storefront.products.schemas import ProductInput
from storefront.products.store import (
    NEGATIVE_VALUES_MESSAGE,
    REQUIRED_FIELDS_MESSAGE,
    ProductStore,
    seed_products,
)


class TestListing:
    def setup_method(self):
        self.store = ProductStore(seed_products())

    def test_seed_catalog(self):
        products = self.store.list()
        assert [p.name for p in products] == ["Laptop", "Smartphone"]
        assert products[0].price == 999.99
        assert products[1].stock == 100

    def test_category_filter_is_case_insensitive(self):
        assert len(self.store.list(category="electronics")) == 2
        assert self.store.list(category="Books") == []

    def test_search_matches_name_substring(self):
        assert [p.id for p in self.store.list(search="PHONE")] == ["2"]

    def test_returned_products_are_copies(self):
        product = self.store.get("1")
        product.stock = 0
        assert self.store.get("1").stock == 50


class TestCreate:
    def setup_method(self):
        self.store = ProductStore(seed_products())

    def test_create_assigns_next_id(self):
        product = self.store.create(ProductInput(name="Book", price=12.5, category="Books"))
        assert product.id == "3"
        assert product.stock == 0
        assert product.description == ""
        assert product.created_at == product.updated_at

    @pytest.mark.parametrize(
        "data",
        [
            {"price": 1, "category": "c"},
            {"name": "n", "category": "c"},
            {"name": "n", "price": 1},
            {"name": "", "price": 1, "category": "c"},
            {"name": "n", "price": 0, "category": "c"},
        ],
    )
    def test_required_fields(self, data):
        with pytest.raises(ValidationError) as exc_info:
            self.store.create(ProductInput(**data))
        assert exc_info.value.message == REQUIRED_FIELDS_MESSAGE

    @pytest.mark.parametrize("price,stock", [(-1, 5), (10, -2)])
    def test_negative_values(self, price, stock):
        with pytest.raises(ValidationError) as exc_info:
            self.store.create(ProductInput(name="n", price=price, category="c", stock=stock))
        assert exc_info.value.message == NEGATIVE_VALUES_MESSAGE

    def test_ids_are_not_reused_after_delete(self):
        created = self.store.create(ProductInput(name="A", price=1, category="c"))
        self.store.delete(created.id)
        again = self.store.create(ProductInput(name="B", price=1, category="c"))
        assert again.id != created.id


class TestUpdate:
    def setup_method(self):
        self.store = ProductStore(seed_products())

    def test_partial_update(self):
        before = self.store.get("1")
        updated = self.store.update("1", ProductInput(price=899.99))
        assert updated.price == 899.99
        assert updated.name == "Laptop"
        assert updated.updated_at >= before.updated_at

    def test_stock_zero_is_applied(self):
        assert self.store.update("2", ProductInput(stock=0)).stock == 0

    def test_empty_name_is_ignored(self):
        assert self.store.update("1", ProductInput(name="")).name == "Laptop"

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError):
            self.store.update("1", ProductInput(stock=-1))

    def test_unknown_product(self):
        with pytest.raises(NotFoundError):
            self.store.update("999", ProductInput(name="x"))

    def test_unknown_product_wins_over_bad_values(self):
        with pytest.raises(NotFoundError):
            self.store.update("999", ProductInput(price=-1))

    def test_rejected_update_changes_nothing(self):
        with pytest.raises(ValidationError):
            self.store.update("1", ProductInput(name="Renamed", stock=-1))
        assert self.store.get("1").name == "Laptop"


class TestDeleteAndStock:
    def setup_method(self):
        self.store = ProductStore(seed_products())

    def test_delete(self):
        self.store.delete("1")
        with pytest.raises(NotFoundError):
            self.store.get("1")
        assert len(self.store.list()) == 1

    def test_delete_unknown(self):
        with pytest.raises(NotFoundError) as exc_info:
            self.store.delete("42")
        assert exc_info.value.message == "Product not found"

    def test_stock_lookup(self):
        stock = self.store.stock("1")
        assert stock.product_id == "1"
        assert stock.stock == 50
        assert stock.available is True

    def test_out_of_stock_is_unavailable(self):
        self.store.update("1", ProductInput(stock=0))
        assert self.store.stock("1").available is False
