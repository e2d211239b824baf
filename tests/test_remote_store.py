"""
Tests for the hosted table store.

HTTP traffic is mocked with ``responses``; no network access is needed.
"""

import json
from decimal import Decimal

import pytest
import requests
import responses

from apps.core.exceptions import (
    EntityNotFound,
    ImmutableEntityError,
    PurchaseOrderError,
    RemoteStoreError,
)
from apps.core.persistence.entities import Customer, Invoice, InvoiceLine, Product
from apps.core.persistence.remote import RemoteTableStore
from apps.procurement.services import ProcurementService

BASE = "https://pharmacy.example.supabase.co"
REST = f"{BASE}/rest/v1"


@pytest.fixture
def store():
    return RemoteTableStore(BASE + "/", "anon-key", timeout=5)


def sent_json(call):
    return json.loads(call.request.body)


class TestReads:
    @responses.activate
    def test_list_translates_legacy_column_names(self, store):
        responses.add(
            responses.GET,
            f"{REST}/products",
            json=[
                {
                    "id": "p-1",
                    "itemCode": "001",
                    "name": "Paracetamol 500mg",
                    "batch": "B123",
                    "expiry": "2025-12-31",
                    "price": 5,
                    "stock": 100,
                    "category": "Medicine",
                }
            ],
        )

        products = store.products.list()

        assert len(products) == 1
        product = products[0]
        assert product.item_code == "001"
        assert product.price == Decimal("5")
        assert product.expiry.isoformat() == "2025-12-31"
        assert product.reorder_level == 10

        request = responses.calls[0].request
        assert "order=name.asc" in request.url
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["Authorization"] == "Bearer anon-key"

    @responses.activate
    def test_get_missing_row(self, store):
        responses.add(responses.GET, f"{REST}/customers", json=[])

        with pytest.raises(EntityNotFound):
            store.customers.get("missing")

        assert "id=eq.missing" in responses.calls[0].request.url

    @responses.activate
    def test_invoice_read_embeds_items(self, store):
        responses.add(
            responses.GET,
            f"{REST}/invoices",
            json=[
                {
                    "id": "i-1",
                    "invoiceNumber": "INV-20240517-0001",
                    "customerName": "Walk-in",
                    "date": "2024-05-17",
                    "subtotal": "15.00",
                    "discount": "0",
                    "total": "15.00",
                    "items": [{"itemCode": "001", "name": "Paracetamol", "quantity": 3}],
                }
            ],
        )

        invoice = store.invoices.get("i-1")

        assert invoice.invoice_number == "INV-20240517-0001"
        assert invoice.payment_method == "Cash"
        assert invoice.items[0].item_code == "001"
        assert invoice.items[0].quantity == 3
        assert "items%3Ainvoice_items" in responses.calls[0].request.url

    @responses.activate
    def test_connection_error_becomes_store_error(self, store):
        responses.add(
            responses.GET, f"{REST}/products", body=requests.ConnectionError("refused")
        )

        with pytest.raises(RemoteStoreError):
            store.products.list()


class TestWrites:
    @responses.activate
    def test_create_assigns_identifier(self, store):
        responses.add(responses.POST, f"{REST}/products", json=[{}], status=201)

        product = store.products.create(
            Product(item_code="003", name="Cetirizine", price=Decimal("8.00"), stock=20)
        )

        assert product.id
        body = sent_json(responses.calls[0])
        assert body["id"] == product.id
        assert body["item_code"] == "003"
        assert body["price"] == "8.00"
        assert responses.calls[0].request.headers["Prefer"] == "return=representation"

    @responses.activate
    def test_retry_without_missing_optional_column(self, store):
        responses.add(
            responses.POST,
            f"{REST}/customers",
            json={
                "code": "PGRST204",
                "message": "Could not find the 'balance' column of 'customers' in the schema cache",
            },
            status=400,
        )
        responses.add(responses.POST, f"{REST}/customers", json=[{}], status=201)

        store.customers.create(Customer(name="Ali Pharmacy", balance=Decimal("10")))

        assert len(responses.calls) == 2
        assert "balance" in sent_json(responses.calls[0])
        retried = sent_json(responses.calls[1])
        assert "balance" not in retried
        assert retried["name"] == "Ali Pharmacy"

    @responses.activate
    def test_missing_required_column_is_not_retried(self, store):
        responses.add(
            responses.POST,
            f"{REST}/customers",
            json={
                "code": "PGRST204",
                "message": "Could not find the 'phone' column of 'customers' in the schema cache",
            },
            status=400,
        )

        with pytest.raises(RemoteStoreError) as exc_info:
            store.customers.create(Customer(name="Ali Pharmacy"))

        assert exc_info.value.code == "PGRST204"
        assert exc_info.value.status_code == 400
        assert len(responses.calls) == 1

    @responses.activate
    def test_failed_items_remove_invoice(self, store):
        responses.add(responses.POST, f"{REST}/invoices", json=[{}], status=201)
        responses.add(
            responses.POST,
            f"{REST}/invoice_items",
            json={"code": "23502", "message": "null value in column"},
            status=400,
        )
        responses.add(responses.DELETE, f"{REST}/invoices", json=[{"id": "i-1"}])

        invoice = Invoice(
            id="i-1",
            invoice_number="INV-20240517-0001",
            items=[InvoiceLine(item_code="001", name="Paracetamol", quantity=3)],
        )
        with pytest.raises(RemoteStoreError):
            store.invoices.create(invoice)

        items = sent_json(responses.calls[1])
        assert items[0]["invoice_id"] == "i-1"
        assert items[0]["item_code"] == "001"
        assert responses.calls[2].request.method == "DELETE"
        assert "id=eq.i-1" in responses.calls[2].request.url

    def test_invoices_are_immutable(self, store):
        with pytest.raises(ImmutableEntityError):
            store.invoices.update("i-1", {"total": "1.00"})

    @responses.activate
    def test_update_returns_updated_row(self, store):
        responses.add(
            responses.PATCH,
            f"{REST}/products",
            json=[{"id": "p-1", "item_code": "001", "name": "Paracetamol", "stock": 94}],
        )

        product = store.products.update("p-1", {"stock": 94, "id": "other", "colour": "red"})

        assert product.stock == 94
        assert sent_json(responses.calls[0]) == {"stock": 94}
        assert "id=eq.p-1" in responses.calls[0].request.url

    @responses.activate
    def test_update_missing_row(self, store):
        responses.add(responses.PATCH, f"{REST}/customers", json=[])

        with pytest.raises(EntityNotFound):
            store.customers.update("missing", {"balance": "5"})

    @responses.activate
    def test_delete_missing_row(self, store):
        responses.add(responses.DELETE, f"{REST}/suppliers", json=[])

        with pytest.raises(EntityNotFound):
            store.suppliers.delete("missing")

    @responses.activate
    def test_purchase_order_update_replaces_items(self, store):
        responses.add(responses.PATCH, f"{REST}/purchase_orders", json=[{"id": "po-1"}])
        responses.add(responses.DELETE, f"{REST}/purchase_order_items", json=[])
        responses.add(responses.POST, f"{REST}/purchase_order_items", json=[], status=201)
        responses.add(
            responses.GET,
            f"{REST}/purchase_orders",
            json=[
                {
                    "id": "po-1",
                    "po_number": "PO-20240517-0001",
                    "status": "partial",
                    "items": [{"product_id": "p-1", "quantity": 10, "received_quantity": 4}],
                }
            ],
        )

        order = store.purchase_orders.update(
            "po-1",
            {
                "status": "partial",
                "items": [{"product_id": "p-1", "quantity": 10, "received_quantity": 4}],
            },
        )

        assert order.status == "partial"
        assert order.items[0].outstanding == 6
        methods = [call.request.method for call in responses.calls]
        assert methods == ["GET", "PATCH", "DELETE", "POST", "GET"]
        assert sent_json(responses.calls[3])[0]["purchase_order_id"] == "po-1"


PURCHASE_ORDER_ROW = {
    "id": "po-1",
    "po_number": "PO-20240517-0001",
    "status": "pending",
    "items": [
        {
            "id": "line-1",
            "purchase_order_id": "po-1",
            "product_id": "p-1",
            "name": "Paracetamol 500mg",
            "quantity": 10,
            "unit_price": 3.5,
            "total": 35,
            "received_quantity": 0,
        }
    ],
}


def calls_to(method, table):
    return [
        call
        for call in responses.calls
        if call.request.method == method and call.request.url.split("?")[0] == f"{REST}/{table}"
    ]


class TestLineReplacementFailure:
    @responses.activate
    def test_failed_receipt_restores_order_and_stock(self, store):
        responses.add(responses.GET, f"{REST}/purchase_orders", json=[PURCHASE_ORDER_ROW])
        responses.add(
            responses.GET,
            f"{REST}/products",
            json=[{"id": "p-1", "item_code": "001", "name": "Paracetamol 500mg", "stock": 100}],
        )
        responses.add(
            responses.PATCH,
            f"{REST}/purchase_orders",
            json=[{**PURCHASE_ORDER_ROW, "status": "received"}],
        )
        responses.add(responses.DELETE, f"{REST}/purchase_order_items", json=[])
        responses.add(
            responses.POST,
            f"{REST}/purchase_order_items",
            json={"message": "insert failed"},
            status=500,
        )
        responses.add(responses.POST, f"{REST}/purchase_order_items", json=[], status=201)
        service = ProcurementService(store)

        with pytest.raises(PurchaseOrderError):
            service.receive_purchase_order("po-1")

        order_patches = [sent_json(call) for call in calls_to("PATCH", "purchase_orders")]
        assert order_patches == [{"status": "received"}, {"status": "pending"}]

        inserts = calls_to("POST", "purchase_order_items")
        assert len(inserts) == 2
        restored = sent_json(inserts[-1])
        assert [(row["product_id"], row["quantity"]) for row in restored] == [("p-1", 10)]
        assert restored[0]["received_quantity"] == 0
        assert restored[0]["purchase_order_id"] == "po-1"

        assert calls_to("PATCH", "products") == []

    @responses.activate
    def test_update_restores_lines_when_insert_fails(self, store):
        responses.add(responses.GET, f"{REST}/purchase_orders", json=[PURCHASE_ORDER_ROW])
        responses.add(responses.PATCH, f"{REST}/purchase_orders", json=[PURCHASE_ORDER_ROW])
        responses.add(responses.DELETE, f"{REST}/purchase_order_items", json=[])
        responses.add(
            responses.POST,
            f"{REST}/purchase_order_items",
            json={"message": "insert failed"},
            status=500,
        )
        responses.add(responses.POST, f"{REST}/purchase_order_items", json=[], status=201)

        with pytest.raises(RemoteStoreError):
            store.purchase_orders.update(
                "po-1",
                {"notes": "Deliver before noon", "items": [{"product_id": "p-2", "quantity": 3}]},
            )

        order_patches = [sent_json(call) for call in calls_to("PATCH", "purchase_orders")]
        assert order_patches == [{"notes": "Deliver before noon"}, {"notes": ""}]
        assert len(calls_to("DELETE", "purchase_order_items")) == 2
        assert sent_json(calls_to("POST", "purchase_order_items")[-1])[0]["product_id"] == "p-1"


class TestAdjust:
    @responses.activate
    def test_retries_when_value_changed_underneath(self, store):
        responses.add(responses.GET, f"{REST}/products", json=[{"id": "p-1", "stock": 100}])
        responses.add(responses.GET, f"{REST}/products", json=[{"id": "p-1", "stock": 99}])
        responses.add(responses.PATCH, f"{REST}/products", json=[])
        responses.add(responses.PATCH, f"{REST}/products", json=[{"id": "p-1", "stock": 98}])

        product = store.products.adjust("p-1", "stock", -1)

        assert product.stock == 98
        patches = calls_to("PATCH", "products")
        assert "stock=eq.100" in patches[0].request.url
        assert "stock=eq.99" in patches[1].request.url
        assert sent_json(patches[1]) == {"stock": 98}

    @responses.activate
    def test_gives_up_after_repeated_conflicts(self, store):
        responses.add(responses.GET, f"{REST}/products", json=[{"id": "p-1", "stock": 100}])
        responses.add(responses.PATCH, f"{REST}/products", json=[])

        with pytest.raises(RemoteStoreError):
            store.products.adjust("p-1", "stock", -1)

        assert len(calls_to("PATCH", "products")) == 3

    @responses.activate
    def test_missing_optional_column_skipped(self, store):
        responses.add(responses.GET, f"{REST}/customers", json=[{"id": "c-1", "name": "Walk-in"}])
        responses.add(
            responses.PATCH,
            f"{REST}/customers",
            json={"code": "42703", "message": "column customers.balance does not exist"},
            status=400,
        )

        customer = store.customers.adjust("c-1", "balance", Decimal("72.50"))

        assert customer.balance == Decimal("0")
        assert len(calls_to("PATCH", "customers")) == 1


class TestInspection:
    @responses.activate
    def test_inspect_tables(self, store):
        responses.add(
            responses.HEAD,
            f"{REST}/products",
            headers={"Content-Range": "0-0/5"},
            status=206,
        )
        responses.add(responses.HEAD, f"{REST}/payments", status=404)

        statuses = store.inspect_tables(("products", "payments"))

        assert statuses[0].name == "products"
        assert statuses[0].exists is True
        assert statuses[0].row_count == 5
        assert statuses[1].exists is False
        assert "payments" in statuses[1].error
        assert responses.calls[0].request.headers["Prefer"] == "count=exact"

    @responses.activate
    def test_count_without_total(self, store):
        responses.add(responses.HEAD, f"{REST}/products", headers={"Content-Range": "*/*"})

        assert store.inspect_table("products").row_count is None
