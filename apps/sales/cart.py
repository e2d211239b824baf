"""
POS cart.

A cart holds transient lines for one POS session: a product snapshot plus
quantity, bonus units and a discount percentage. Nothing is persisted to
the store until checkout; between requests the cart lives in the Django
session under ``Cart.SESSION_KEY``.

Line math:
    gross    = price x quantity
    discount = gross x discount% / 100
    net      = gross - discount

Bonus units are free: deducted from stock at checkout, never charged.
"""

import datetime
import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

from apps.core.exceptions import CartValidationError
from apps.core.persistence.entities import InvoiceLine

logger = logging.getLogger(__name__)

MAX_DISCOUNT = Decimal("100")
DISCOUNT_PLACES = Decimal("0.01")


def validate_quantity(value):
    """Quantity must be a whole number of at least 1."""
    return _whole_number(value, "quantity", minimum=1)


def validate_bonus(value):
    """Bonus must be a whole number of at least 0."""
    return _whole_number(value, "bonus", minimum=0)


def validate_discount(value):
    """Discount is a percentage between 0 and 100, kept to two decimal places."""
    if isinstance(value, bool):
        raise CartValidationError("discount must be a number")
    try:
        discount = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise CartValidationError(f"discount must be a number, got {value!r}")
    if not discount.is_finite() or discount < 0 or discount > MAX_DISCOUNT:
        raise CartValidationError(f"discount must be between 0 and 100, got {value!r}")
    return discount.quantize(DISCOUNT_PLACES, rounding=ROUND_HALF_UP)


def _whole_number(value, name, minimum):
    if isinstance(value, bool):
        raise CartValidationError(f"{name} must be a whole number")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise CartValidationError(f"{name} must be a whole number, got {value!r}")
    if not number.is_finite() or number != number.to_integral_value():
        raise CartValidationError(f"{name} must be a whole number, got {value!r}")
    if number < minimum:
        raise CartValidationError(f"{name} must be at least {minimum}, got {value!r}")
    return int(number)


LINE_VALIDATORS = {
    "quantity": validate_quantity,
    "bonus": validate_bonus,
    "discount": validate_discount,
}


@dataclass
class CartLine:
    product_id: str
    item_code: str
    name: str
    batch: str
    expiry: Optional[datetime.date]
    price: Decimal
    quantity: int = 1
    bonus: int = 0
    discount: Decimal = Decimal("0")

    @classmethod
    def for_product(cls, product):
        return cls(
            product_id=product.id,
            item_code=product.item_code,
            name=product.name,
            batch=product.batch,
            expiry=product.expiry,
            price=product.price,
        )

    @property
    def gross(self):
        return self.price * self.quantity

    @property
    def discount_amount(self):
        return self.gross * self.discount / Decimal("100")

    @property
    def net(self):
        return self.gross - self.discount_amount

    def to_invoice_line(self):
        return InvoiceLine(
            item_code=self.item_code,
            name=self.name,
            batch=self.batch,
            expiry=self.expiry,
            quantity=self.quantity,
            price=self.price,
            bonus=self.bonus,
            discount=self.discount,
        )

    def to_session(self):
        return {
            "product_id": self.product_id,
            "item_code": self.item_code,
            "name": self.name,
            "batch": self.batch,
            "expiry": self.expiry.isoformat() if self.expiry else None,
            "price": str(self.price),
            "quantity": self.quantity,
            "bonus": self.bonus,
            "discount": str(self.discount),
        }

    @classmethod
    def from_session(cls, data):
        expiry = data.get("expiry")
        return cls(
            product_id=data["product_id"],
            item_code=data.get("item_code", ""),
            name=data.get("name", ""),
            batch=data.get("batch", ""),
            expiry=datetime.date.fromisoformat(expiry) if expiry else None,
            price=Decimal(data.get("price", "0")),
            quantity=int(data.get("quantity", 1)),
            bonus=int(data.get("bonus", 0)),
            discount=Decimal(data.get("discount", "0")),
        )


@dataclass(frozen=True)
class CartTotals:
    subtotal: Decimal
    discount: Decimal
    total: Decimal
    line_count: int
    units: int


class Cart:
    """Ordered collection of cart lines, at most one per product."""

    SESSION_KEY = "pos_cart"

    def __init__(self, lines=None):
        self._lines = list(lines or [])

    def __iter__(self):
        return iter(list(self._lines))

    def __len__(self):
        return len(self._lines)

    @property
    def lines(self):
        return tuple(self._lines)

    @property
    def is_empty(self):
        return not self._lines

    def find(self, product_id):
        product_id = str(product_id)
        for line in self._lines:
            if line.product_id == product_id:
                return line
        return None

    def add(self, product):
        """Add one unit of a product, merging with its existing line."""
        line = self.find(product.id)
        if line is not None:
            line.quantity += 1
            return line
        line = CartLine.for_product(product)
        self._lines.append(line)
        return line

    def update(self, product_id, **changes):
        """
        Merge quantity, bonus and discount into a product's line.

        Every value is validated before any is applied, so a rejected
        update leaves the line unchanged.

        Returns:
            False if no line exists for the product, True otherwise

        Raises:
            CartValidationError: On an unknown field or invalid value
        """
        unknown = set(changes) - set(LINE_VALIDATORS)
        if unknown:
            raise CartValidationError(f"Cannot update cart fields: {', '.join(sorted(unknown))}")

        line = self.find(product_id)
        if line is None:
            logger.debug(f"Cart update for product {product_id} ignored, not in cart")
            return False

        validated = {name: LINE_VALIDATORS[name](value) for name, value in changes.items()}
        for name, value in validated.items():
            setattr(line, name, value)
        return True

    def remove(self, product_id):
        line = self.find(product_id)
        if line is None:
            return False
        self._lines.remove(line)
        return True

    def clear(self):
        self._lines = []

    def totals(self):
        subtotal = sum((line.gross for line in self._lines), Decimal("0"))
        total = sum((line.net for line in self._lines), Decimal("0"))
        return CartTotals(
            subtotal=subtotal,
            discount=subtotal - total,
            total=total,
            line_count=len(self._lines),
            units=sum(line.quantity + line.bonus for line in self._lines),
        )

    # Session storage

    def save(self, session):
        session[self.SESSION_KEY] = [line.to_session() for line in self._lines]
        session.modified = True

    @classmethod
    def load(cls, session):
        return cls(CartLine.from_session(data) for data in session.get(cls.SESSION_KEY, []))
