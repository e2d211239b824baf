"""
Pytest configuration and fixtures for the pharmacy application.
"""

import copy
import datetime
from decimal import Decimal

import pytest

from apps.core.exceptions import EntityNotFound, ImmutableEntityError, PersistenceError
from apps.core.persistence import reset_store
from apps.core.persistence.base import EntityRepository, Store
from apps.core.persistence.entities import (
    Customer,
    Invoice,
    Product,
    PurchaseOrder,
    Supplier,
    new_id,
)

SALE_DAY = datetime.date(2024, 5, 17)


class InMemoryRepository(EntityRepository):
    """
    Repository keeping entities in a dict.

    ``fail_on`` holds operation names ("create", "update", "delete") or
    (operation, entity_id) pairs that raise PersistenceError, to exercise
    rollback paths.
    """

    def __init__(self, entity_class, immutable=False):
        self.entity_class = entity_class
        self.immutable = immutable
        self.rows = {}
        self.fail_on = set()
        self.calls = []

    def _record(self, operation, *args):
        self.calls.append((operation,) + args)
        if operation in self.fail_on or (operation, args[0]) in self.fail_on:
            raise PersistenceError(f"{self.entity_class.__name__} {operation} failed")

    def list(self):
        return [copy.deepcopy(entity) for entity in self.rows.values()]

    def get(self, entity_id):
        try:
            return copy.deepcopy(self.rows[str(entity_id)])
        except KeyError:
            raise EntityNotFound(self.entity_class.__name__, entity_id)

    def create(self, entity):
        self._record("create", entity.id)
        if entity.id is None:
            entity = entity.copy_with(id=new_id())
        self.rows[entity.id] = copy.deepcopy(entity)
        return copy.deepcopy(entity)

    def update(self, entity_id, changes):
        if self.immutable:
            raise ImmutableEntityError(f"{self.entity_class.__name__} cannot be modified")
        self._record("update", entity_id, dict(changes))
        current = self.get(entity_id)
        updated = current.copy_with(**self.entity_class.normalize_changes(changes))
        self.rows[updated.id] = updated
        return copy.deepcopy(updated)

    def delete(self, entity_id):
        self._record("delete", entity_id)
        if str(entity_id) not in self.rows:
            raise EntityNotFound(self.entity_class.__name__, entity_id)
        del self.rows[str(entity_id)]


class InMemoryStore(Store):
    """Store without transactions: a failed unit of work runs its compensations."""

    name = "memory"

    def __init__(self):
        self.products = InMemoryRepository(Product)
        self.customers = InMemoryRepository(Customer)
        self.invoices = InMemoryRepository(Invoice, immutable=True)
        self.suppliers = InMemoryRepository(Supplier)
        self.purchase_orders = InMemoryRepository(PurchaseOrder)


@pytest.fixture(autouse=True)
def _fresh_store_cache():
    """Every test starts without a cached application store."""
    reset_store()
    yield
    reset_store()


@pytest.fixture
def api_client():
    """
    Fixture for Django REST framework API client.
    """
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(
        username="cashier", email="cashier@example.com", password="testpass123"
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """
    Fixture for an API client logged in through the session.

    Session login (rather than force_authenticate) keeps the POS cart
    between requests.
    """
    api_client.force_login(user)
    return api_client


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def paracetamol():
    return Product(
        id="p-1",
        item_code="001",
        name="Paracetamol 500mg",
        batch="B123",
        expiry=datetime.date(2025, 12, 31),
        price=Decimal("5.00"),
        stock=100,
        category="Medicine",
    )


@pytest.fixture
def amoxicillin():
    return Product(
        id="p-2",
        item_code="002",
        name="Amoxicillin 250mg",
        batch="B124",
        expiry=datetime.date(2024, 10, 20),
        price=Decimal("12.50"),
        stock=50,
        category="Antibiotic",
    )


@pytest.fixture
def account_customer():
    return Customer(
        id="c-1",
        name="Dr. Gulam Murtaza",
        phone="0300-1234567",
        region="Gulshan Ravi",
        address="Bismillah Chowk",
        balance=Decimal("0"),
    )


@pytest.fixture
def seeded_store(memory_store, paracetamol, amoxicillin, account_customer):
    memory_store.products.create(paracetamol)
    memory_store.products.create(amoxicillin)
    memory_store.customers.create(account_customer)
    for repository in (memory_store.products, memory_store.customers):
        repository.calls.clear()
    return memory_store


@pytest.fixture
def state(seeded_store):
    from apps.sales.state import PharmacyState

    return PharmacyState(seeded_store, today=lambda: SALE_DAY, allow_negative_stock=True)
