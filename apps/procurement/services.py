"""
Procurement services: suppliers, purchase orders and goods receiving.

- Supplier CRUD
- Purchase order numbering (PO-YYYYMMDD-####) and line/total calculation
- Receiving: adds received units to product stock and moves the order
  to partial or received, as one unit of work
- Cancelling pending orders
"""

import logging
from decimal import Decimal
from typing import Dict, Optional

from django.utils import timezone

from apps.core.exceptions import EntityNotFound, PersistenceError, PurchaseOrderError
from apps.core.persistence.entities import PurchaseOrder, PurchaseOrderLine, Supplier

from apps.sales.state import next_sequence_number

logger = logging.getLogger(__name__)

PO_PREFIX = "PO"
EDITABLE_STATUSES = (PurchaseOrder.PENDING,)
RECEIVABLE_STATUSES = (PurchaseOrder.PENDING, PurchaseOrder.PARTIAL)


class ProcurementService:
    """
    Supplier and purchase order operations over an injected store.

    Handles:
    - Supplier create/update/delete
    - Purchase order create/update/delete while pending
    - Receiving goods into stock
    - Cancelling pending orders
    """

    def __init__(self, store, today=None):
        self.store = store
        self._today = today or timezone.localdate

    # Suppliers

    def list_suppliers(self):
        return self.store.suppliers.list()

    def get_supplier(self, supplier_id):
        return self.store.suppliers.get(supplier_id)

    def create_supplier(self, data):
        supplier = data if isinstance(data, Supplier) else Supplier.from_row(data)
        saved = self.store.suppliers.create(supplier)
        logger.info(f"Added supplier {saved.name}")
        return saved

    def update_supplier(self, supplier_id, changes):
        return self.store.suppliers.update(supplier_id, changes)

    def delete_supplier(self, supplier_id):
        self.store.suppliers.delete(supplier_id)
        logger.info(f"Deleted supplier {supplier_id}")

    # Purchase orders

    def list_purchase_orders(self):
        return self.store.purchase_orders.list()

    def get_purchase_order(self, po_id):
        return self.store.purchase_orders.get(po_id)

    def next_po_number(self, day=None):
        day = day or self._today()
        prefix = f"{PO_PREFIX}-{day:%Y%m%d}-"
        return next_sequence_number(
            prefix, (po.po_number for po in self.store.purchase_orders.list())
        )

    @staticmethod
    def _priced_lines(lines):
        priced = []
        for line in lines:
            if not isinstance(line, PurchaseOrderLine):
                line = PurchaseOrderLine.from_row(line)
            if line.quantity < 1:
                raise PurchaseOrderError(f"Quantity for {line.name} must be at least 1")
            if line.unit_price < 0:
                raise PurchaseOrderError(f"Unit price for {line.name} cannot be negative")
            priced.append(line.copy_with(total=line.unit_price * line.quantity))
        return priced

    def _fill_names(self, lines):
        products = {p.id: p for p in self.store.products.list()}
        filled = []
        for line in lines:
            product = products.get(line.product_id)
            if not line.name and product is not None:
                line = line.copy_with(name=product.name)
            filled.append(line)
        return filled

    def create_purchase_order(self, data):
        """
        Create a pending purchase order.

        Line totals and the order total are computed here; any totals in
        ``data`` are ignored.
        """
        order = data if isinstance(data, PurchaseOrder) else PurchaseOrder.from_row(data)
        if not order.items:
            raise PurchaseOrderError("A purchase order needs at least one item")

        lines = self._fill_names(self._priced_lines(order.items))
        order = order.copy_with(
            po_number=order.po_number or self.next_po_number(),
            order_date=order.order_date or self._today(),
            status=PurchaseOrder.PENDING,
            items=[line.copy_with(received_quantity=0) for line in lines],
            total_amount=sum((line.total for line in lines), Decimal("0")),
        )
        saved = self.store.purchase_orders.create(order)
        logger.info(f"Created purchase order {saved.po_number} for {saved.total_amount}")
        return saved

    def update_purchase_order(self, po_id, changes):
        order = self.store.purchase_orders.get(po_id)
        if order.status not in EDITABLE_STATUSES:
            raise PurchaseOrderError(f"Purchase order {order.po_number} is {order.status}")

        changes = PurchaseOrder.normalize_changes(changes)
        changes.pop("status", None)
        if "items" in changes:
            lines = self._fill_names(self._priced_lines(changes["items"]))
            if not lines:
                raise PurchaseOrderError("A purchase order needs at least one item")
            changes["items"] = [line.to_row() for line in lines]
            changes["total_amount"] = sum((line.total for line in lines), Decimal("0"))
        return self.store.purchase_orders.update(po_id, changes)

    def delete_purchase_order(self, po_id):
        order = self.store.purchase_orders.get(po_id)
        if order.status == PurchaseOrder.PARTIAL:
            raise PurchaseOrderError(
                f"Purchase order {order.po_number} has received goods and cannot be deleted"
            )
        self.store.purchase_orders.delete(po_id)
        logger.info(f"Deleted purchase order {order.po_number}")

    def cancel_purchase_order(self, po_id):
        order = self.store.purchase_orders.get(po_id)
        if order.status != PurchaseOrder.PENDING:
            raise PurchaseOrderError(
                f"Cannot cancel {order.po_number}: only pending orders can be cancelled"
            )
        updated = self.store.purchase_orders.update(po_id, {"status": PurchaseOrder.CANCELLED})
        logger.info(f"Cancelled purchase order {order.po_number}")
        return updated

    def _allocate(self, order, quantities: Optional[Dict[str, int]]):
        """Per-line quantities to receive now, in line order."""
        if quantities is None:
            return [line.outstanding for line in order.items]

        remaining = {}
        for product_id, quantity in quantities.items():
            if isinstance(quantity, bool) or int(quantity) != quantity or quantity < 0:
                raise PurchaseOrderError(f"Invalid received quantity {quantity!r}")
            remaining[str(product_id)] = int(quantity)

        known = {line.product_id for line in order.items}
        unknown = set(remaining) - known
        if unknown:
            raise PurchaseOrderError(
                f"Products not on purchase order {order.po_number}: {', '.join(sorted(unknown))}"
            )

        allocation = []
        for line in order.items:
            wanted = remaining.get(line.product_id, 0)
            take = min(wanted, line.outstanding)
            remaining[line.product_id] = wanted - take if line.product_id in remaining else 0
            allocation.append(take)

        over = {pid: qty for pid, qty in remaining.items() if qty > 0}
        if over:
            raise PurchaseOrderError(
                f"Received quantities exceed what is outstanding on {order.po_number}"
            )
        return allocation

    def receive_purchase_order(self, po_id, quantities=None):
        """
        Receive goods against a purchase order.

        Args:
            po_id: Purchase order id
            quantities: Optional {product_id: units} received now; by
                default every outstanding unit is received

        Returns:
            The updated purchase order

        Raises:
            PurchaseOrderError: The order is not receivable or a quantity
                is invalid
        """
        order = self.store.purchase_orders.get(po_id)
        if order.status not in RECEIVABLE_STATUSES:
            raise PurchaseOrderError(
                f"Purchase order {order.po_number} is {order.status} and cannot be received"
            )

        allocation = self._allocate(order, quantities)
        if not any(allocation):
            raise PurchaseOrderError(f"Nothing to receive on {order.po_number}")

        products = {p.id: p for p in self.store.products.list()}
        new_lines = [
            line.copy_with(received_quantity=line.received_quantity + take)
            for line, take in zip(order.items, allocation)
        ]
        stock_additions = {}
        for line, take in zip(order.items, allocation):
            if not take:
                continue
            if line.product_id not in products:
                logger.warning(
                    f"Product {line.product_id} ({line.name}) on {order.po_number} no longer "
                    "exists, stock not adjusted"
                )
                continue
            stock_additions[line.product_id] = stock_additions.get(line.product_id, 0) + take

        fully_received = all(line.outstanding == 0 for line in new_lines)
        status = PurchaseOrder.RECEIVED if fully_received else PurchaseOrder.PARTIAL

        try:
            with self.store.unit_of_work() as uow:
                updated = self.store.purchase_orders.update(
                    po_id,
                    {"status": status, "items": [line.to_row() for line in new_lines]},
                )
                uow.on_rollback(
                    self.store.purchase_orders.update,
                    po_id,
                    {"status": order.status, "items": [line.to_row() for line in order.items]},
                )
                for product_id, added in stock_additions.items():
                    try:
                        self.store.products.adjust(product_id, "stock", added)
                    except EntityNotFound:
                        logger.warning(
                            f"Product {product_id} was deleted while receiving "
                            f"{order.po_number}, stock not adjusted"
                        )
                        continue
                    uow.on_rollback(self.store.products.adjust, product_id, "stock", -added)
        except PersistenceError as e:
            logger.error(f"Receiving {order.po_number} failed: {e}", exc_info=True)
            raise PurchaseOrderError(f"Purchase order could not be received: {e}") from e

        logger.info(
            f"Received {sum(allocation)} units on {order.po_number}, status now {status}"
        )
        return updated
