"""
Hosted table store (PostgREST / Supabase REST API).

Every table is reached at ``{url}/rest/v1/{table}`` with the project's
anon key. Writes tolerate tables that lack optional columns: when the
API answers PGRST204 ("Could not find the 'balance' column ...") for a
column listed in ``optional_columns``, the column is dropped and the
request retried once.

There are no transactions over HTTP. Child rows (invoice items,
purchase order items) are written after their parent and the parent is
removed again if they fail. Replacing the children of an existing row
puts the previous parent columns and children back if the new children
cannot be saved. Multi-table writes use the compensations registered on
the store's unit of work, and counters are adjusted with a filtered PATCH
that only matches while the value read is still current.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Optional

from django.core.serializers.json import DjangoJSONEncoder

import requests

from apps.core.exceptions import EntityNotFound, ImmutableEntityError, RemoteStoreError

from .base import EntityRepository, Store
from .entities import Customer, Invoice, Product, PurchaseOrder, Supplier, new_id

logger = logging.getLogger(__name__)

SCHEMA_MISMATCH_CODE = "PGRST204"
# PGRST204 on a written column, 42703 on a filtered one
MISSING_COLUMN_CODES = (SCHEMA_MISMATCH_CODE, "42703")
MISSING_COLUMN_RE = re.compile(r"'([^']+)' column")

EXPECTED_TABLES = (
    "products",
    "customers",
    "invoices",
    "invoice_items",
    "suppliers",
    "purchase_orders",
    "purchase_order_items",
    "sales_returns",
    "sales_return_items",
    "payments",
)


@dataclass
class TableStatus:
    """Result of probing one remote table."""

    name: str
    exists: bool
    row_count: Optional[int] = None
    error: str = ""


class PostgrestClient:
    """Thin wrapper over a requests session for one PostgREST endpoint."""

    def __init__(self, url, api_key, timeout=10, session=None):
        self.base_url = f"{url.rstrip('/')}/rest/v1"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )

    def request(self, method, table, params=None, payload=None, prefer=None, headers=None):
        request_headers = dict(headers or {})
        if prefer:
            request_headers["Prefer"] = prefer
        data = json.dumps(payload, cls=DjangoJSONEncoder) if payload is not None else None

        try:
            response = self.session.request(
                method,
                f"{self.base_url}/{table}",
                params=params,
                data=data,
                headers=request_headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RemoteStoreError(f"{method} {table} failed: {e}") from e

        if response.status_code >= 400:
            raise self._error_from(response, table)
        return response

    @staticmethod
    def _error_from(response, table):
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = body.get("message") or response.text or response.reason
        return RemoteStoreError(
            f"{table}: {message}",
            code=body.get("code"),
            status_code=response.status_code,
        )

    def select(self, table, params=None):
        return self.request("GET", table, params=params).json()

    def insert(self, table, rows):
        return self.request("POST", table, payload=rows, prefer="return=representation").json()

    def update(self, table, filters, values):
        return self.request(
            "PATCH", table, params=filters, payload=values, prefer="return=representation"
        ).json()

    def delete(self, table, filters):
        return self.request("DELETE", table, params=filters, prefer="return=representation").json()

    def count(self, table):
        """Return the exact row count of a table from the Content-Range header."""
        response = self.request(
            "HEAD",
            table,
            params={"select": "*"},
            prefer="count=exact",
            headers={"Range-Unit": "items", "Range": "0-0"},
        )
        content_range = response.headers.get("Content-Range", "")
        _, _, total = content_range.partition("/")
        return int(total) if total.isdigit() else None


class RemoteTableRepository(EntityRepository):
    """Repository over one PostgREST table, optionally with a child table."""

    entity_class = None
    table = None
    order = None
    optional_columns = ()
    child_table = None
    child_fk = None

    def __init__(self, client):
        self.client = client

    @property
    def _select(self):
        if self.child_table:
            return f"*,items:{self.child_table}(*)"
        return "*"

    def _missing_optional_column(self, error, payload):
        if error.code != SCHEMA_MISMATCH_CODE:
            return None
        message = str(error)
        match = MISSING_COLUMN_RE.search(message)
        if match:
            candidates = [match.group(1)]
        else:
            candidates = [c for c in self.optional_columns if c in message]
        for column in candidates:
            if column in self.optional_columns and column in payload:
                return column
        return None

    def _write(self, send, payload):
        """Send a row, retrying once without an optional column the table lacks."""
        try:
            return send(payload)
        except RemoteStoreError as e:
            column = self._missing_optional_column(e, payload)
            if column is None:
                raise
            logger.warning(
                f"Column '{column}' not found on remote table {self.table}, retrying without it"
            )
            payload = {key: value for key, value in payload.items() if key != column}
            if not payload:
                return None
            return send(payload)

    def _insert_children(self, parent_id, lines):
        if not lines:
            return
        rows = [{self.child_fk: parent_id, **line.to_row()} for line in lines]
        self.client.insert(self.child_table, rows)

    def list(self):
        params = {"select": self._select}
        if self.order:
            params["order"] = self.order
        return [self.entity_class.from_row(row) for row in self.client.select(self.table, params)]

    def get(self, entity_id):
        rows = self.client.select(self.table, {"select": self._select, "id": f"eq.{entity_id}"})
        if not rows:
            raise EntityNotFound(self.entity_class.__name__, entity_id)
        return self.entity_class.from_row(rows[0])

    def create(self, entity):
        if entity.id is None:
            entity = entity.copy_with(id=new_id())
        row = entity.to_row(include_children=False)
        self._write(lambda payload: self.client.insert(self.table, payload), row)

        if self.child_table:
            try:
                self._insert_children(entity.id, entity.items)
            except RemoteStoreError:
                logger.warning(
                    f"Saving {self.child_table} for {self.table} {entity.id} failed, "
                    "removing the parent row"
                )
                self.client.delete(self.table, {"id": f"eq.{entity.id}"})
                raise
        return entity

    def _replace_children(self, parent_id, lines):
        self.client.delete(self.child_table, {self.child_fk: f"eq.{parent_id}"})
        self._insert_children(parent_id, lines)

    def _restore(self, previous, changed_fields):
        """Put back the parent columns and child rows of ``previous``."""
        filters = {"id": f"eq.{previous.id}"}
        row = previous.to_row(include_children=False)
        try:
            restored = {name: row[name] for name in changed_fields if name in row}
            if restored:
                self._write(
                    lambda payload: self.client.update(self.table, filters, payload), restored
                )
            self._replace_children(previous.id, previous.items)
        except RemoteStoreError as e:
            logger.error(
                f"Restoring {self.table} {previous.id} after a failed update failed: {e}",
                exc_info=True,
            )

    def update(self, entity_id, changes):
        clean = self.entity_class.normalize_changes(changes)
        lines = clean.pop("items", None) if self.child_table else None
        filters = {"id": f"eq.{entity_id}"}

        # PostgREST has no multi-table transaction; keep what to put back
        previous = self.get(entity_id) if lines is not None else None

        rows = None
        if clean:
            rows = self._write(
                lambda payload: self.client.update(self.table, filters, payload), clean
            )
            if rows == []:
                raise EntityNotFound(self.entity_class.__name__, entity_id)

        if lines is not None:
            try:
                self._replace_children(entity_id, lines)
            except RemoteStoreError:
                logger.warning(
                    f"Saving {self.child_table} for {self.table} {entity_id} failed, "
                    "restoring the previous rows"
                )
                self._restore(previous, clean)
                raise

        if rows and not self.child_table:
            return self.entity_class.from_row(rows[0])
        return self.get(entity_id)

    def adjust(self, entity_id, field, delta, attempts=3):
        """
        Add ``delta`` to a numeric column.

        The PATCH is filtered on the value just read, so a concurrent write
        makes it match nothing and the read is repeated.
        """
        for _ in range(attempts):
            current = self.get(entity_id)
            value = getattr(current, field)
            filters = {"id": f"eq.{entity_id}", field: f"eq.{value}"}
            try:
                rows = self.client.update(self.table, filters, {field: value + delta})
            except RemoteStoreError as e:
                if field in self.optional_columns and e.code in MISSING_COLUMN_CODES:
                    logger.warning(f"Column '{field}' not found on remote table {self.table}")
                    return current
                raise
            if rows:
                return self.entity_class.from_row(rows[0])
            logger.info(f"{self.table} {entity_id} {field} changed while adjusting, retrying")
        raise RemoteStoreError(
            f"{self.table} {entity_id}: {field} kept changing, adjustment abandoned"
        )

    def delete(self, entity_id):
        if self.child_table:
            self.client.delete(self.child_table, {self.child_fk: f"eq.{entity_id}"})
        rows = self.client.delete(self.table, {"id": f"eq.{entity_id}"})
        if not rows:
            raise EntityNotFound(self.entity_class.__name__, entity_id)


class ProductTable(RemoteTableRepository):
    entity_class = Product
    table = "products"
    order = "name.asc"
    optional_columns = ("reorder_level", "optimum_level")


class CustomerTable(RemoteTableRepository):
    entity_class = Customer
    table = "customers"
    order = "name.asc"
    optional_columns = ("balance", "region")


class InvoiceTable(RemoteTableRepository):
    entity_class = Invoice
    table = "invoices"
    order = "date.desc"
    optional_columns = ("payment_method",)
    child_table = "invoice_items"
    child_fk = "invoice_id"

    def update(self, entity_id, changes):
        raise ImmutableEntityError("Invoices cannot be modified after checkout")


class SupplierTable(RemoteTableRepository):
    entity_class = Supplier
    table = "suppliers"
    order = "name.asc"


class PurchaseOrderTable(RemoteTableRepository):
    entity_class = PurchaseOrder
    table = "purchase_orders"
    order = "order_date.desc"
    child_table = "purchase_order_items"
    child_fk = "purchase_order_id"


class RemoteTableStore(Store):
    """Store writing to a hosted PostgREST project."""

    name = "remote"

    def __init__(self, url, api_key, timeout=10, session=None):
        self.client = PostgrestClient(url, api_key, timeout=timeout, session=session)
        self.products = ProductTable(self.client)
        self.customers = CustomerTable(self.client)
        self.invoices = InvoiceTable(self.client)
        self.suppliers = SupplierTable(self.client)
        self.purchase_orders = PurchaseOrderTable(self.client)

    def inspect_table(self, table):
        """Check that a table is reachable and count its rows."""
        try:
            row_count = self.client.count(table)
        except RemoteStoreError as e:
            return TableStatus(name=table, exists=False, error=str(e))
        return TableStatus(name=table, exists=True, row_count=row_count)

    def inspect_tables(self, tables=EXPECTED_TABLES):
        return [self.inspect_table(table) for table in tables]
