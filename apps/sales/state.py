"""
Pharmacy application state.

PharmacyState owns the products, customers and invoices read from a
store and the active POS cart. Views build one per request with the
store from ``apps.core.persistence.get_store()`` and the cart restored
from the session, read snapshots from it and change data only through
its methods.

Checkout (``complete_sale``):
- Returns None for an empty cart and changes nothing
- Totals: subtotal = sum(price x qty), total = sum(net),
  discount = subtotal - total
- Numbers invoices INV-YYYYMMDD-#### with a per-day sequence that is
  checked against existing invoice numbers
- Saves the invoice, decrements each product's stock by quantity + bonus
  and adds the total to the customer's balance in one unit of work
- Updates in-memory state only after every write succeeded
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings
from django.utils import timezone

from apps.core.exceptions import (
    CheckoutError,
    EntityNotFound,
    InsufficientStockError,
    PersistenceError,
)
from apps.core.persistence.entities import Customer, Invoice, Product, new_id

from .cart import Cart

logger = logging.getLogger(__name__)

WALK_IN_CUSTOMER = "Walk-in"
DEFAULT_PAYMENT_METHOD = "Cash"
INVOICE_PREFIX = "INV"
RECENT_INVOICE_COUNT = 5


@dataclass(frozen=True)
class DashboardSummary:
    total_revenue: Decimal
    todays_sales: Decimal
    todays_invoice_count: int
    product_count: int
    customer_count: int
    low_stock: list
    recent_invoices: list


def next_sequence_number(prefix, existing_numbers, width=4):
    """
    Next free ``{prefix}{n:0width}`` number after the highest one in use.

    Existing numbers without a numeric suffix are ignored.
    """
    used = set(existing_numbers)
    highest = 0
    for number in used:
        if number.startswith(prefix):
            suffix = number[len(prefix):]
            if suffix.isdigit():
                highest = max(highest, int(suffix))

    sequence = highest + 1
    candidate = f"{prefix}{sequence:0{width}d}"
    while candidate in used:
        sequence += 1
        candidate = f"{prefix}{sequence:0{width}d}"
    return candidate


class PharmacyState:
    """Products, customers, invoices and the POS cart over an injected store."""

    def __init__(self, store, cart=None, today=None, allow_negative_stock=None):
        self.store = store
        self.cart = cart if cart is not None else Cart()
        self._today = today or timezone.localdate
        if allow_negative_stock is None:
            allow_negative_stock = settings.PHARMACY_ALLOW_NEGATIVE_STOCK
        self.allow_negative_stock = allow_negative_stock
        self._products = None
        self._customers = None
        self._invoices = None

    # Snapshots

    @property
    def products(self):
        if self._products is None:
            self._products = self.store.products.list()
        return list(self._products)

    @property
    def customers(self):
        if self._customers is None:
            self._customers = self.store.customers.list()
        return list(self._customers)

    @property
    def invoices(self):
        """Invoices, most recent first."""
        if self._invoices is None:
            self._invoices = sorted(
                self.store.invoices.list(),
                key=lambda inv: (inv.date is not None, inv.date, inv.invoice_number),
                reverse=True,
            )
        return list(self._invoices)

    def refresh(self):
        self._products = None
        self._customers = None
        self._invoices = None

    @staticmethod
    def _find(records, entity_id):
        entity_id = str(entity_id)
        for record in records:
            if record.id == entity_id:
                return record
        return None

    def get_product(self, product_id):
        product = self._find(self.products, product_id)
        if product is None:
            raise EntityNotFound("Product", product_id)
        return product

    def get_customer(self, customer_id):
        customer = self._find(self.customers, customer_id)
        if customer is None:
            raise EntityNotFound("Customer", customer_id)
        return customer

    def get_invoice(self, invoice_id):
        invoice = self._find(self.invoices, invoice_id)
        if invoice is None:
            raise EntityNotFound("Invoice", invoice_id)
        return invoice

    # Product and customer mutators

    def add_product(self, data):
        product = data if isinstance(data, Product) else Product.from_row(data)
        saved = self.store.products.create(product)
        if self._products is not None:
            self._products.append(saved)
        logger.info(f"Added product {saved.item_code} {saved.name}")
        return saved

    def update_product(self, product_id, changes):
        updated = self.store.products.update(product_id, changes)
        self._replace(self._products, updated)
        return updated

    def delete_product(self, product_id):
        self.store.products.delete(product_id)
        self._discard("_products", product_id)
        logger.info(f"Deleted product {product_id}")

    def add_customer(self, data):
        customer = data if isinstance(data, Customer) else Customer.from_row(data)
        saved = self.store.customers.create(customer)
        if self._customers is not None:
            self._customers.append(saved)
        logger.info(f"Added customer {saved.name}")
        return saved

    def update_customer(self, customer_id, changes):
        updated = self.store.customers.update(customer_id, changes)
        self._replace(self._customers, updated)
        return updated

    def delete_customer(self, customer_id):
        self.store.customers.delete(customer_id)
        self._discard("_customers", customer_id)
        logger.info(f"Deleted customer {customer_id}")

    def delete_invoice(self, invoice_id):
        self.store.invoices.delete(invoice_id)
        self._discard("_invoices", invoice_id)
        logger.info(f"Deleted invoice {invoice_id}")

    @staticmethod
    def _replace(records, updated):
        if records is None:
            return
        for index, record in enumerate(records):
            if record.id == updated.id:
                records[index] = updated
                return

    def _discard(self, attr, entity_id):
        records = getattr(self, attr)
        if records is not None:
            setattr(self, attr, [r for r in records if r.id != str(entity_id)])

    # Cart

    def add_to_cart(self, product):
        """Add one unit of ``product`` (an entity or an id) to the cart."""
        if not isinstance(product, Product):
            product = self.get_product(product)
        return self.cart.add(product)

    def update_cart_item(self, product_id, **changes):
        return self.cart.update(product_id, **changes)

    def remove_from_cart(self, product_id):
        return self.cart.remove(product_id)

    def clear_cart(self):
        self.cart.clear()

    # Checkout

    def next_invoice_number(self, day=None):
        day = day or self._today()
        prefix = f"{INVOICE_PREFIX}-{day:%Y%m%d}-"
        # Read from the store, not the snapshot, so overlapping sales see each other
        numbers = (inv.invoice_number for inv in self.store.invoices.list())
        return next_sequence_number(prefix, numbers)

    def _plan_stock_changes(self):
        """(product, units) per cart line, rejected early against the stock last read."""
        products = {p.id: p for p in self.products}
        changes = []
        for line in self.cart:
            product = products.get(line.product_id)
            if product is None:
                logger.warning(
                    f"Product {line.product_id} ({line.name}) no longer exists, "
                    "stock not adjusted"
                )
                continue
            units = line.quantity + line.bonus
            self._check_stock(product, product.stock, units, warn=False)
            changes.append((product, units))
        return changes

    def _check_stock(self, product, available, units, warn=True):
        if available >= units:
            return
        if not self.allow_negative_stock:
            raise InsufficientStockError(
                f"Insufficient stock for {product.name}: "
                f"{available} available, {units} requested"
            )
        if warn:
            logger.warning(
                f"Stock for {product.item_code} {product.name} goes to {available - units} "
                "(backordered)"
            )

    def _deduct_stock(self, uow, product, units):
        """Take ``units`` off the stored stock; None if the product is gone."""
        try:
            updated = self.store.products.adjust(product.id, "stock", -units)
        except EntityNotFound:
            logger.warning(
                f"Product {product.id} ({product.name}) was deleted during checkout, "
                "stock not adjusted"
            )
            return None
        uow.on_rollback(self.store.products.adjust, product.id, "stock", units)
        self._check_stock(updated, updated.stock + units, units)
        return updated

    def complete_sale(self, customer_id=None, payment_method=DEFAULT_PAYMENT_METHOD):
        """
        Turn the cart into an invoice.

        Returns:
            The new invoice number, or None if the cart is empty

        Raises:
            CheckoutError: Unknown customer, or a store write failed (the
                writes already made are rolled back or compensated)
            InsufficientStockError: Stock would go negative while
                backorders are disabled
        """
        if self.cart.is_empty:
            logger.info("Checkout requested with an empty cart, nothing to do")
            return None

        customer = None
        if customer_id:
            customer = self._find(self.customers, customer_id)
            if customer is None:
                raise CheckoutError(f"Customer {customer_id} not found")

        totals = self.cart.totals()
        sale_date = self._today()
        invoice = Invoice(
            id=new_id(),
            invoice_number=self.next_invoice_number(sale_date),
            customer_id=customer.id if customer else None,
            customer_name=customer.name if customer else WALK_IN_CUSTOMER,
            date=sale_date,
            subtotal=totals.subtotal,
            discount=totals.discount,
            total=totals.total,
            payment_method=payment_method or DEFAULT_PAYMENT_METHOD,
            items=[line.to_invoice_line() for line in self.cart],
        )
        stock_changes = self._plan_stock_changes()

        try:
            with self.store.unit_of_work() as uow:
                saved_invoice = self.store.invoices.create(invoice)
                uow.on_rollback(self.store.invoices.delete, saved_invoice.id)

                updated_products = []
                for product, units in stock_changes:
                    updated = self._deduct_stock(uow, product, units)
                    if updated is not None:
                        updated_products.append(updated)

                updated_customer = None
                if customer is not None:
                    updated_customer = self.store.customers.adjust(
                        customer.id, "balance", totals.total
                    )
                    uow.on_rollback(
                        self.store.customers.adjust, customer.id, "balance", -totals.total
                    )
        except PersistenceError as e:
            logger.error(f"Checkout of {invoice.invoice_number} failed: {e}", exc_info=True)
            raise CheckoutError(f"Sale could not be completed: {e}") from e

        for product in updated_products:
            self._replace(self._products, product)
        if updated_customer is not None:
            self._replace(self._customers, updated_customer)
        self._invoices.insert(0, saved_invoice)
        self.cart.clear()

        logger.info(
            f"Completed sale {saved_invoice.invoice_number} for {saved_invoice.customer_name}: "
            f"{totals.line_count} lines, total {totals.total}"
        )
        return saved_invoice.invoice_number

    # Dashboard

    def dashboard_summary(self, day=None):
        day = day or self._today()
        invoices = self.invoices
        todays = [inv for inv in invoices if inv.date == day]
        products = self.products
        return DashboardSummary(
            total_revenue=sum((inv.total for inv in invoices), Decimal("0")),
            todays_sales=sum((inv.total for inv in todays), Decimal("0")),
            todays_invoice_count=len(todays),
            product_count=len(products),
            customer_count=len(self.customers),
            low_stock=sorted(
                (p for p in products if p.is_low_stock), key=lambda p: (p.stock, p.name)
            ),
            recent_invoices=invoices[:RECENT_INVOICE_COUNT],
        )
