"""
Tests for the POS cart.

Tests cover:
- Adding products and merging duplicate adds
- Validated updates of quantity, bonus and discount
- Line and cart totals
- Session round trip
"""

from decimal import Decimal

import pytest

from apps.core.exceptions import CartValidationError
from apps.sales.cart import Cart, validate_discount, validate_quantity


class TestCartLines:
    def test_add_appends_line_with_defaults(self, paracetamol):
        cart = Cart()
        line = cart.add(paracetamol)

        assert len(cart) == 1
        assert line.product_id == "p-1"
        assert line.quantity == 1
        assert line.bonus == 0
        assert line.discount == Decimal("0")
        assert line.price == Decimal("5.00")
        assert line.batch == "B123"

    def test_duplicate_add_increments_quantity(self, paracetamol):
        cart = Cart()
        cart.add(paracetamol)
        cart.add(paracetamol)

        assert len(cart) == 1
        assert cart.find("p-1").quantity == 2

    def test_add_does_not_check_stock(self, paracetamol):
        out_of_stock = paracetamol.copy_with(stock=0)
        cart = Cart()
        cart.add(out_of_stock)

        assert cart.find("p-1").quantity == 1

    def test_lines_keep_insertion_order(self, paracetamol, amoxicillin):
        cart = Cart()
        cart.add(amoxicillin)
        cart.add(paracetamol)
        cart.add(amoxicillin)

        assert [line.product_id for line in cart] == ["p-2", "p-1"]

    def test_remove_and_clear(self, paracetamol, amoxicillin):
        cart = Cart()
        cart.add(paracetamol)
        cart.add(amoxicillin)

        assert cart.remove("p-1") is True
        assert cart.remove("p-1") is False
        assert [line.product_id for line in cart] == ["p-2"]

        cart.clear()
        assert cart.is_empty


class TestCartUpdate:
    def test_update_merges_fields(self, paracetamol):
        cart = Cart()
        cart.add(paracetamol)

        assert cart.update("p-1", quantity=3, bonus=1, discount="12.5") is True
        line = cart.find("p-1")
        assert line.quantity == 3
        assert line.bonus == 1
        assert line.discount == Decimal("12.50")

    def test_update_unknown_product_is_noop(self, paracetamol):
        cart = Cart()
        cart.add(paracetamol)

        assert cart.update("missing", quantity=5) is False
        assert cart.find("p-1").quantity == 1

    @pytest.mark.parametrize(
        "changes",
        [
            {"quantity": 0},
            {"quantity": -2},
            {"quantity": 1.5},
            {"quantity": "abc"},
            {"bonus": -1},
            {"discount": "100.01"},
            {"discount": -5},
            {"price": "1.00"},
        ],
    )
    def test_invalid_update_rejected_and_line_unchanged(self, paracetamol, changes):
        cart = Cart()
        cart.add(paracetamol)

        with pytest.raises(CartValidationError):
            cart.update("p-1", **changes)

        line = cart.find("p-1")
        assert line.quantity == 1
        assert line.bonus == 0
        assert line.discount == Decimal("0")

    def test_validators_accept_boundaries(self):
        assert validate_quantity("4") == 4
        assert validate_discount(0) == Decimal("0.00")
        assert validate_discount("100") == Decimal("100.00")

    def test_cart_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_quantity(True)


class TestCartTotals:
    def test_totals_identities(self, paracetamol, amoxicillin):
        cart = Cart()
        cart.add(paracetamol)
        cart.add(amoxicillin)
        cart.update("p-1", quantity=15, discount="10")
        cart.update("p-2", quantity=2, bonus=1)

        totals = cart.totals()

        assert totals.subtotal == Decimal("100.00")
        assert totals.discount == Decimal("7.50")
        assert totals.total == Decimal("92.50")
        assert totals.subtotal - totals.discount == totals.total
        assert totals.line_count == 2
        assert totals.units == 18

    def test_empty_cart_totals(self):
        totals = Cart().totals()

        assert totals.subtotal == 0
        assert totals.discount == 0
        assert totals.total == 0

    def test_line_math(self, amoxicillin):
        cart = Cart()
        cart.add(amoxicillin)
        cart.update("p-2", quantity=3, discount="5")
        line = cart.find("p-2")

        assert line.gross == Decimal("37.50")
        assert line.discount_amount == Decimal("1.875")
        assert line.net == Decimal("35.625")


class TestCartSession:
    def test_session_round_trip(self, paracetamol, amoxicillin):
        cart = Cart()
        cart.add(paracetamol)
        cart.add(amoxicillin)
        cart.update("p-2", quantity=4, bonus=2, discount="7.25")

        class Session(dict):
            modified = False

        session = Session()
        cart.save(session)
        restored = Cart.load(session)

        assert session.modified is True
        assert Cart.SESSION_KEY in session
        assert [line.product_id for line in restored] == ["p-1", "p-2"]
        line = restored.find("p-2")
        assert line.quantity == 4
        assert line.bonus == 2
        assert line.discount == Decimal("7.25")
        assert line.price == Decimal("12.50")
        assert line.expiry == amoxicillin.expiry
        assert restored.totals() == cart.totals()

    def test_load_from_empty_session(self):
        assert Cart.load({}).is_empty
