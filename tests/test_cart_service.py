"""Tests for the cart service."""

from decimal import Decimal

import pytest

from common.exceptions import InsufficientStockError, NotFoundError, ValidationError
from modules.cart.service import cart_service
from modules.inventory.service import inventory_ledger


class TestAddItem:
    def test_first_add_creates_line(self, db, customer, make_product):
        product = make_product(stock=5)
        line, created = cart_service.add_item(db, customer.id, product.id, 2)
        db.commit()
        assert created is True
        assert line.quantity == 2

    def test_repeat_add_increments(self, db, customer, make_product):
        product = make_product(stock=5)
        cart_service.add_item(db, customer.id, product.id, 2)
        line, created = cart_service.add_item(db, customer.id, product.id, 1)
        db.commit()
        assert created is False
        assert line.quantity == 3
        assert cart_service.get_count(db, customer.id) == (3, 1)

    def test_add_does_not_reserve_stock(self, db, customer, make_product):
        product = make_product(stock=5)
        cart_service.add_item(db, customer.id, product.id, 5)
        db.commit()
        assert inventory_ledger.get_stock(db, product.id) == 5

    def test_increment_past_stock(self, db, customer, make_product):
        product = make_product(stock=3)
        cart_service.add_item(db, customer.id, product.id, 2)
        with pytest.raises(InsufficientStockError):
            cart_service.add_item(db, customer.id, product.id, 2)

    def test_inactive_product(self, db, customer, make_product):
        product = make_product(is_active=False)
        with pytest.raises(NotFoundError):
            cart_service.add_item(db, customer.id, product.id, 1)

    @pytest.mark.parametrize("quantity", [0, 101])
    def test_quantity_bounds(self, db, customer, make_product, quantity):
        product = make_product(stock=500)
        with pytest.raises(ValidationError):
            cart_service.add_item(db, customer.id, product.id, quantity)


class TestCartContents:
    def test_totals(self, db, customer, make_product, add_to_cart):
        add_to_cart(customer, make_product(price="2.50"), 2)
        add_to_cart(customer, make_product(price="1.25"), 4)

        cart = cart_service.get_cart(db, customer.id)
        assert cart["total_items"] == 6
        assert cart["item_count"] == 2
        assert cart["total_amount"] == Decimal("10.00")

    def test_empty_cart(self, db, customer):
        cart = cart_service.get_cart(db, customer.id)
        assert cart["items"] == []
        assert cart["total_amount"] == Decimal("0.00")
        assert cart_service.get_count(db, customer.id) == (0, 0)


class TestChangeCart:
    def test_update_quantity(self, db, customer, make_product, add_to_cart):
        line = add_to_cart(customer, make_product(stock=10), 1)
        updated = cart_service.update_quantity(db, customer.id, line.id, 7)
        db.commit()
        assert updated.quantity == 7

    def test_update_past_stock(self, db, customer, make_product, add_to_cart):
        line = add_to_cart(customer, make_product(stock=2), 1)
        with pytest.raises(InsufficientStockError):
            cart_service.update_quantity(db, customer.id, line.id, 3)

    def test_cannot_touch_other_users_line(self, db, customer, make_user, make_product, add_to_cart):
        line = add_to_cart(make_user(), make_product(), 1)
        with pytest.raises(NotFoundError):
            cart_service.update_quantity(db, customer.id, line.id, 2)
        with pytest.raises(NotFoundError):
            cart_service.remove_line(db, customer.id, line.id)

    def test_remove_line(self, db, customer, make_product, add_to_cart):
        line = add_to_cart(customer, make_product(name="Mug"), 1)
        assert cart_service.remove_line(db, customer.id, line.id) == "Mug"
        db.commit()
        assert cart_service.get_count(db, customer.id) == (0, 0)

    def test_clear_cart(self, db, customer, make_product, add_to_cart):
        add_to_cart(customer, make_product(), 1)
        add_to_cart(customer, make_product(), 2)
        assert cart_service.clear_cart(db, customer.id) == 2
        db.commit()
        assert cart_service.get_count(db, customer.id) == (0, 0)

    def test_clear_empty_cart(self, db, customer):
        with pytest.raises(ValidationError):
            cart_service.clear_cart(db, customer.id)
