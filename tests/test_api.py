"""
API tests for the pharmacy endpoints.

Tests cover:
- Authentication requirement
- Product and customer CRUD and search
- Session cart and checkout
- Invoice history, print and PDF views
- Dashboard, settings and health endpoints
"""

import datetime
from decimal import Decimal

from django.urls import reverse

import pytest
from rest_framework import status

from apps.core.exceptions import ConfigurationError, RemoteStoreError
from apps.core.models import PharmacySettings
from apps.core.persistence.entities import Customer, Product
from apps.core.persistence.orm import OrmStore


@pytest.fixture
def store(db):
    return OrmStore()


@pytest.fixture
def paracetamol_row(store):
    return store.products.create(
        Product(
            item_code="001",
            name="Paracetamol 500mg",
            batch="B123",
            expiry=datetime.date(2025, 12, 31),
            price=Decimal("5.00"),
            stock=100,
            category="Medicine",
        )
    )


@pytest.fixture
def amoxicillin_row(store):
    return store.products.create(
        Product(
            item_code="002",
            name="Amoxicillin 250mg",
            batch="B124",
            price=Decimal("12.50"),
            stock=8,
            category="Antibiotic",
        )
    )


@pytest.fixture
def customer_row(store):
    return store.customers.create(
        Customer(name="Dr. Gulam Murtaza", phone="0300-1234567", region="Gulshan Ravi")
    )


@pytest.mark.django_db
class TestAuthentication:
    @pytest.mark.parametrize(
        "url_name",
        ["inventory:product_list", "crm:customer_list", "sales:cart_detail", "core:dashboard_api"],
    )
    def test_api_requires_login(self, api_client, url_name):
        response = api_client.get(reverse(url_name))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_pages_redirect_to_login(self, client):
        response = client.get(reverse("sales:pos_interface"))

        assert response.status_code == 302
        assert "/accounts/login/" in response.url


@pytest.mark.django_db
class TestProductAPI:
    def test_create_and_list(self, authenticated_client):
        response = authenticated_client.post(
            reverse("inventory:product_list"),
            {
                "item_code": "003",
                "name": "Cetirizine 10mg",
                "batch": "B125",
                "expiry": "2026-06-30",
                "price": "8.00",
                "stock": 20,
            },
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["id"]
        assert response.data["category"] == "Medicine"
        assert response.data["is_low_stock"] is False

        response = authenticated_client.get(reverse("inventory:product_list"))
        assert [p["item_code"] for p in response.data] == ["003"]

    def test_search_and_category_filter(
        self, authenticated_client, paracetamol_row, amoxicillin_row
    ):
        url = reverse("inventory:product_list")

        response = authenticated_client.get(url, {"q": "amox"})
        assert [p["item_code"] for p in response.data] == ["002"]

        response = authenticated_client.get(url, {"q": "b123"})
        assert [p["item_code"] for p in response.data] == ["001"]

        response = authenticated_client.get(url, {"category": "Medicine"})
        assert [p["item_code"] for p in response.data] == ["001"]

    def test_invalid_levels_rejected(self, authenticated_client):
        response = authenticated_client.post(
            reverse("inventory:product_list"),
            {
                "item_code": "003",
                "name": "Cetirizine",
                "price": "8",
                "reorder_level": 30,
                "optimum_level": 20,
            },
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "optimum_level" in response.data

    def test_update_and_delete(self, authenticated_client, paracetamol_row):
        url = reverse("inventory:product_detail", args=[paracetamol_row.id])

        response = authenticated_client.patch(url, {"stock": 5}, format="json")
        assert response.status_code == status.HTTP_200_OK
        assert response.data["stock"] == 5
        assert response.data["name"] == "Paracetamol 500mg"
        assert response.data["is_low_stock"] is True

        response = authenticated_client.delete(url)
        assert response.status_code == status.HTTP_204_NO_CONTENT

        response = authenticated_client.get(url)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_low_stock(self, authenticated_client, paracetamol_row, amoxicillin_row):
        response = authenticated_client.get(reverse("inventory:low_stock_products"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 1
        assert response.data["results"][0]["item_code"] == "002"


@pytest.mark.django_db
class TestCustomerAPI:
    def test_create_search_and_update(self, authenticated_client):
        url = reverse("crm:customer_list")
        response = authenticated_client.post(
            url, {"name": "Ali Medical Store", "region": "Model Town"}, format="json"
        )
        assert response.status_code == status.HTTP_201_CREATED
        customer_id = response.data["id"]
        assert Decimal(response.data["balance"]) == 0

        response = authenticated_client.get(url, {"q": "model"})
        assert [c["id"] for c in response.data] == [customer_id]

        response = authenticated_client.patch(
            reverse("crm:customer_detail", args=[customer_id]),
            {"balance": "6070.00"},
            format="json",
        )
        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data["balance"]) == Decimal("6070")

    def test_missing_customer(self, authenticated_client):
        response = authenticated_client.get(
            reverse("crm:customer_detail", args=["6f1c1f1e-6c7b-4ad9-9d59-2c4f5b7d1e11"])
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert "detail" in response.data


@pytest.mark.django_db
class TestCartAndCheckout:
    def add(self, client, product):
        return client.post(
            reverse("sales:cart_add_item"), {"product_id": product.id}, format="json"
        )

    def test_cart_kept_in_session(self, authenticated_client, paracetamol_row):
        response = self.add(authenticated_client, paracetamol_row)
        assert response.status_code == status.HTTP_201_CREATED
        self.add(authenticated_client, paracetamol_row)

        response = authenticated_client.get(reverse("sales:cart_detail"))

        assert response.data["line_count"] == 1
        assert response.data["items"][0]["quantity"] == 2
        assert response.data["total"] == "10.00"

    def test_add_unknown_product(self, authenticated_client):
        response = authenticated_client.post(
            reverse("sales:cart_add_item"),
            {"product_id": "6f1c1f1e-6c7b-4ad9-9d59-2c4f5b7d1e11"},
            format="json",
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_line(self, authenticated_client, amoxicillin_row):
        self.add(authenticated_client, amoxicillin_row)
        url = reverse("sales:cart_item_detail", args=[amoxicillin_row.id])

        response = authenticated_client.patch(
            url, {"quantity": 4, "bonus": 1, "discount": "5"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["subtotal"] == "50.00"
        assert response.data["discount"] == "2.50"
        assert response.data["total"] == "47.50"
        assert response.data["units"] == 5

    def test_invalid_update_rejected(self, authenticated_client, amoxicillin_row):
        self.add(authenticated_client, amoxicillin_row)
        url = reverse("sales:cart_item_detail", args=[amoxicillin_row.id])

        response = authenticated_client.patch(url, {"discount": "150"}, format="json")
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = authenticated_client.patch(url, {"price": "1"}, format="json")
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_line_not_in_cart(self, authenticated_client, paracetamol_row):
        url = reverse("sales:cart_item_detail", args=[paracetamol_row.id])

        assert authenticated_client.patch(url, {"quantity": 2}, format="json").status_code == 404
        assert authenticated_client.delete(url).status_code == 404

    def test_remove_and_clear(self, authenticated_client, paracetamol_row, amoxicillin_row):
        self.add(authenticated_client, paracetamol_row)
        self.add(authenticated_client, amoxicillin_row)

        response = authenticated_client.delete(
            reverse("sales:cart_item_detail", args=[paracetamol_row.id])
        )
        assert response.data["line_count"] == 1

        response = authenticated_client.delete(reverse("sales:cart_detail"))
        assert response.data["items"] == []

    def test_empty_cart_checkout(self, authenticated_client):
        response = authenticated_client.post(reverse("sales:checkout"), {}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["detail"] == "Cart is empty"

    def test_checkout(
        self, authenticated_client, store, paracetamol_row, amoxicillin_row, customer_row
    ):
        self.add(authenticated_client, paracetamol_row)
        self.add(authenticated_client, amoxicillin_row)
        authenticated_client.patch(
            reverse("sales:cart_item_detail", args=[paracetamol_row.id]),
            {"quantity": 5},
            format="json",
        )
        authenticated_client.patch(
            reverse("sales:cart_item_detail", args=[amoxicillin_row.id]),
            {"quantity": 4, "discount": 5},
            format="json",
        )

        response = authenticated_client.post(
            reverse("sales:checkout"),
            {"customer_id": customer_row.id, "payment_method": "Credit"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        invoice_number = response.data["invoice_number"]
        assert invoice_number.startswith("INV-")
        invoice = response.data["invoice"]
        assert invoice["subtotal"] == "75.00"
        assert invoice["discount"] == "2.50"
        assert invoice["total"] == "72.50"
        assert invoice["customer_name"] == "Dr. Gulam Murtaza"
        assert len(invoice["items"]) == 2

        assert store.products.get(paracetamol_row.id).stock == 95
        assert store.products.get(amoxicillin_row.id).stock == 4
        assert store.customers.get(customer_row.id).balance == Decimal("72.50")

        cart = authenticated_client.get(reverse("sales:cart_detail")).data
        assert cart["items"] == []

    def test_checkout_rejects_unknown_payment_method(self, authenticated_client, paracetamol_row):
        self.add(authenticated_client, paracetamol_row)

        response = authenticated_client.post(
            reverse("sales:checkout"), {"payment_method": "Gold"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "payment_method" in response.data

    def test_checkout_unknown_customer(self, authenticated_client, paracetamol_row):
        self.add(authenticated_client, paracetamol_row)

        response = authenticated_client.post(
            reverse("sales:checkout"), {"customer_id": "nobody"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        cart = authenticated_client.get(reverse("sales:cart_detail")).data
        assert cart["line_count"] == 1

    def test_pos_page(self, authenticated_client, paracetamol_row, customer_row):
        self.add(authenticated_client, paracetamol_row)

        response = authenticated_client.get(reverse("sales:pos_interface"))

        assert response.status_code == 200
        assert b"Paracetamol 500mg" in response.content
        assert b"Dr. Gulam Murtaza" in response.content


@pytest.mark.django_db
class TestInvoiceViews:
    @pytest.fixture
    def invoice(self, authenticated_client, paracetamol_row, customer_row):
        authenticated_client.post(
            reverse("sales:cart_add_item"), {"product_id": paracetamol_row.id}, format="json"
        )
        response = authenticated_client.post(
            reverse("sales:checkout"), {"customer_id": customer_row.id}, format="json"
        )
        return response.data["invoice"]

    def test_list_and_search(self, authenticated_client, invoice, customer_row):
        url = reverse("sales:invoice_list")

        response = authenticated_client.get(url)
        assert [inv["id"] for inv in response.data] == [invoice["id"]]
        assert response.data[0]["total_items"] == 1
        assert "items" not in response.data[0]

        assert authenticated_client.get(url, {"q": "gulam"}).data[0]["id"] == invoice["id"]
        assert authenticated_client.get(url, {"q": "nothing"}).data == []
        response = authenticated_client.get(url, {"customer_id": customer_row.id})
        assert len(response.data) == 1

    def test_detail_and_delete(self, authenticated_client, store, invoice, paracetamol_row):
        url = reverse("sales:invoice_detail", args=[invoice["id"]])

        response = authenticated_client.get(url)
        assert response.data["items"][0]["item_code"] == "001"

        assert authenticated_client.delete(url).status_code == status.HTTP_204_NO_CONTENT
        assert authenticated_client.get(url).status_code == status.HTTP_404_NOT_FOUND
        # Deleting an invoice leaves stock as it was after the sale
        assert store.products.get(paracetamol_row.id).stock == 99

    def test_print(self, authenticated_client, invoice):
        response = authenticated_client.get(reverse("sales:invoice_print", args=[invoice["id"]]))

        assert response.status_code == 200
        assert response["Content-Type"].startswith("text/html")
        assert invoice["invoice_number"].encode() in response.content
        assert b"Five Rupees Only." in response.content

    def test_pdf(self, authenticated_client, invoice):
        response = authenticated_client.get(reverse("sales:invoice_pdf", args=[invoice["id"]]))

        assert response.status_code == 200
        assert response["Content-Type"] == "application/pdf"
        assert f'filename="invoice_{invoice["invoice_number"]}.pdf"' in (
            response["Content-Disposition"]
        )
        assert response.content.startswith(b"%PDF")

    def test_print_missing_invoice(self, authenticated_client):
        response = authenticated_client.get(
            reverse("sales:invoice_print", args=["6f1c1f1e-6c7b-4ad9-9d59-2c4f5b7d1e11"])
        )

        assert response.status_code == 404

    @pytest.mark.parametrize(
        "url_name, error, expected",
        [
            ("sales:invoice_print", ConfigurationError("Remote store URL is invalid"), 503),
            ("sales:invoice_pdf", RemoteStoreError("invoices: timed out"), 502),
        ],
    )
    def test_store_errors_on_invoice_pages(
        self, authenticated_client, monkeypatch, url_name, error, expected
    ):
        def unavailable(request):
            raise error

        monkeypatch.setattr("apps.sales.views.pharmacy_state", unavailable)

        response = authenticated_client.get(
            reverse(url_name, args=["6f1c1f1e-6c7b-4ad9-9d59-2c4f5b7d1e11"])
        )

        assert response.status_code == expected
        assert str(error).encode() in response.content


@pytest.mark.django_db
class TestCoreAPI:
    def test_dashboard_api(self, authenticated_client, paracetamol_row, amoxicillin_row):
        response = authenticated_client.get(reverse("core:dashboard_api"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["product_count"] == 2
        assert response.data["todays_invoice_count"] == 0
        assert [p["item_code"] for p in response.data["low_stock"]] == ["002"]

    def test_dashboard_page(self, authenticated_client, amoxicillin_row):
        response = authenticated_client.get(reverse("core:dashboard"))

        assert response.status_code == 200
        assert b"Amoxicillin 250mg" in response.content

    def test_settings_hide_api_key(self, authenticated_client):
        url = reverse("core:settings_api")

        response = authenticated_client.patch(
            url,
            {
                "name": "City Pharmacy",
                "db_url": "https://pharmacy.example.supabase.co/",
                "api_key": "secret",
            },
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["name"] == "City Pharmacy"
        assert response.data["has_api_key"] is True
        assert "api_key" not in response.data
        assert PharmacySettings.load().db_url == "https://pharmacy.example.supabase.co"

    def test_settings_require_url_and_key_together(self, authenticated_client):
        response = authenticated_client.patch(
            reverse("core:settings_api"),
            {"db_url": "https://pharmacy.example.supabase.co"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_health(self, client):
        response = client.get(reverse("core:health_check"))

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"]["store"]["backend"] == "local"
