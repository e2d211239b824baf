"""
Canonical record types shared by every store.

Each entity has exactly one set of snake_case field names. Rows coming
from a store, a request body or legacy exports may use older camelCase
names (``itemCode``, ``customerId`` ...); ``from_row`` and
``normalize_changes`` translate them here and nowhere else.
"""

import datetime
import logging
import uuid
from dataclasses import asdict, dataclass, field, fields
from decimal import Decimal
from typing import ClassVar, Dict, List, Optional, Tuple

from apps.core.formatting_utils import to_decimal

logger = logging.getLogger(__name__)


def new_id() -> str:
    return str(uuid.uuid4())


def _to_date(value) -> Optional[datetime.date]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    return datetime.date.fromisoformat(str(value)[:10])


def _to_int(value) -> int:
    if value in (None, ""):
        return 0
    if isinstance(value, bool):
        raise TypeError("boolean is not a valid integer quantity")
    number = to_decimal(value)
    if number != number.to_integral_value():
        raise ValueError(f"{value!r} is not a whole number")
    return int(number)


def _to_str(value) -> str:
    if value is None:
        return ""
    return str(value)


class Entity:
    """Mixin giving dataclass entities row translation helpers."""

    # legacy/alternate name -> canonical field name
    ALIASES: ClassVar[Dict[str, str]] = {}
    DECIMAL_FIELDS: ClassVar[Tuple[str, ...]] = ()
    INT_FIELDS: ClassVar[Tuple[str, ...]] = ()
    DATE_FIELDS: ClassVar[Tuple[str, ...]] = ()
    # child collections: field name -> entity class
    CHILDREN: ClassVar[Dict[str, type]] = {}
    READ_ONLY_FIELDS: ClassVar[Tuple[str, ...]] = ("id",)

    @classmethod
    def field_names(cls):
        return [f.name for f in fields(cls)]

    @classmethod
    def coerce(cls, name, value):
        if name in cls.DECIMAL_FIELDS:
            return to_decimal(value)
        if name in cls.INT_FIELDS:
            return _to_int(value)
        if name in cls.DATE_FIELDS:
            return _to_date(value)
        if name in cls.CHILDREN:
            child_cls = cls.CHILDREN[name]
            return [
                item if isinstance(item, child_cls) else child_cls.from_row(item)
                for item in value or []
            ]
        if name == "id" or name.endswith("_id"):
            return str(value) if value not in (None, "") else None
        return _to_str(value)

    @classmethod
    def from_row(cls, row):
        """Build an entity from a store row or request payload."""
        known = set(cls.field_names())
        values = {}
        for key, value in row.items():
            name = cls.ALIASES.get(key, key)
            if name in known:
                values[name] = cls.coerce(name, value)
        return cls(**values)

    @classmethod
    def normalize_changes(cls, changes):
        """
        Translate a partial update to canonical names and types.

        Unknown keys and read-only fields are dropped.
        """
        known = set(cls.field_names())
        clean = {}
        for key, value in changes.items():
            name = cls.ALIASES.get(key, key)
            if name not in known:
                logger.debug(f"Ignoring unknown {cls.__name__} field: {key}")
                continue
            if name in cls.READ_ONLY_FIELDS:
                continue
            clean[name] = cls.coerce(name, value)
        return clean

    def to_row(self, include_children=True):
        row = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in self.CHILDREN:
                if include_children:
                    row[f.name] = [child.to_row() for child in value]
                continue
            row[f.name] = value
        return row

    def copy_with(self, **changes):
        data = asdict(self)
        data.update(changes)
        for name, child_cls in self.CHILDREN.items():
            data[name] = [
                item if isinstance(item, child_cls) else child_cls(**item) for item in data[name]
            ]
        return type(self)(**data)


@dataclass
class Product(Entity):
    item_code: str = ""
    name: str = ""
    batch: str = ""
    expiry: Optional[datetime.date] = None
    price: Decimal = Decimal("0")
    stock: int = 0
    category: str = ""
    reorder_level: int = 10
    optimum_level: int = 50
    id: Optional[str] = None

    ALIASES: ClassVar[Dict[str, str]] = {
        "itemCode": "item_code",
        "reorderLevel": "reorder_level",
        "optimumLevel": "optimum_level",
        "expiry_date": "expiry",
    }
    DECIMAL_FIELDS: ClassVar[Tuple[str, ...]] = ("price",)
    INT_FIELDS: ClassVar[Tuple[str, ...]] = ("stock", "reorder_level", "optimum_level")
    DATE_FIELDS: ClassVar[Tuple[str, ...]] = ("expiry",)

    @property
    def is_low_stock(self):
        return self.stock <= self.reorder_level


@dataclass
class Customer(Entity):
    name: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    region: str = ""
    balance: Decimal = Decimal("0")
    id: Optional[str] = None

    DECIMAL_FIELDS: ClassVar[Tuple[str, ...]] = ("balance",)


@dataclass
class InvoiceLine(Entity):
    item_code: str = ""
    name: str = ""
    batch: str = ""
    expiry: Optional[datetime.date] = None
    quantity: int = 1
    price: Decimal = Decimal("0")
    bonus: int = 0
    discount: Decimal = Decimal("0")

    ALIASES: ClassVar[Dict[str, str]] = {"itemCode": "item_code"}
    DECIMAL_FIELDS: ClassVar[Tuple[str, ...]] = ("price", "discount")
    INT_FIELDS: ClassVar[Tuple[str, ...]] = ("quantity", "bonus")
    DATE_FIELDS: ClassVar[Tuple[str, ...]] = ("expiry",)

    @property
    def gross(self):
        return self.price * self.quantity

    @property
    def discount_amount(self):
        return self.gross * self.discount / Decimal("100")

    @property
    def net(self):
        return self.gross - self.discount_amount


@dataclass
class Invoice(Entity):
    invoice_number: str = ""
    customer_id: Optional[str] = None
    customer_name: str = ""
    date: Optional[datetime.date] = None
    subtotal: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    payment_method: str = "Cash"
    items: List[InvoiceLine] = field(default_factory=list)
    id: Optional[str] = None

    ALIASES: ClassVar[Dict[str, str]] = {
        "invoiceNumber": "invoice_number",
        "customerId": "customer_id",
        "customerName": "customer_name",
        "paymentMethod": "payment_method",
    }
    DECIMAL_FIELDS: ClassVar[Tuple[str, ...]] = ("subtotal", "discount", "total")
    DATE_FIELDS: ClassVar[Tuple[str, ...]] = ("date",)
    CHILDREN: ClassVar[Dict[str, type]] = {"items": InvoiceLine}

    @property
    def total_items(self):
        return sum(line.quantity + line.bonus for line in self.items)


@dataclass
class Supplier(Entity):
    name: str = ""
    contact_person: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    notes: str = ""
    id: Optional[str] = None

    ALIASES: ClassVar[Dict[str, str]] = {"contactPerson": "contact_person"}


@dataclass
class PurchaseOrderLine(Entity):
    product_id: Optional[str] = None
    name: str = ""
    quantity: int = 1
    unit_price: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    received_quantity: int = 0

    ALIASES: ClassVar[Dict[str, str]] = {
        "productId": "product_id",
        "unitPrice": "unit_price",
        "receivedQuantity": "received_quantity",
    }
    DECIMAL_FIELDS: ClassVar[Tuple[str, ...]] = ("unit_price", "total")
    INT_FIELDS: ClassVar[Tuple[str, ...]] = ("quantity", "received_quantity")

    @property
    def outstanding(self):
        return max(self.quantity - self.received_quantity, 0)


@dataclass
class PurchaseOrder(Entity):
    PENDING: ClassVar[str] = "pending"
    PARTIAL: ClassVar[str] = "partial"
    RECEIVED: ClassVar[str] = "received"
    CANCELLED: ClassVar[str] = "cancelled"
    STATUSES: ClassVar[Tuple[str, ...]] = ("pending", "partial", "received", "cancelled")

    po_number: str = ""
    supplier_id: Optional[str] = None
    order_date: Optional[datetime.date] = None
    expected_delivery: Optional[datetime.date] = None
    notes: str = ""
    status: str = "pending"
    total_amount: Decimal = Decimal("0")
    items: List[PurchaseOrderLine] = field(default_factory=list)
    id: Optional[str] = None

    ALIASES: ClassVar[Dict[str, str]] = {
        "poNumber": "po_number",
        "supplierId": "supplier_id",
        "orderDate": "order_date",
        "expectedDelivery": "expected_delivery",
        "totalAmount": "total_amount",
    }
    DECIMAL_FIELDS: ClassVar[Tuple[str, ...]] = ("total_amount",)
    DATE_FIELDS: ClassVar[Tuple[str, ...]] = ("order_date", "expected_delivery")
    CHILDREN: ClassVar[Dict[str, type]] = {"items": PurchaseOrderLine}
