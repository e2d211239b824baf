"""
Management command to load the demo catalogue and customers.

Seeds the configured store (local or remote) with a small product
catalogue and two account customers. Entities are only added to an
empty store unless --force is given.

Usage:
    python manage.py seed_pharmacy
    python manage.py seed_pharmacy --force
"""

import datetime
from decimal import Decimal

from django.core.management.base import BaseCommand, CommandError

from apps.core.exceptions import PharmacyError
from apps.core.persistence import get_store
from apps.core.persistence.entities import Customer, Product

INITIAL_PRODUCTS = [
    Product(
        item_code="001",
        name="Paracetamol 500mg",
        batch="B123",
        expiry=datetime.date(2025, 12, 31),
        price=Decimal("5.00"),
        stock=100,
        category="Medicine",
    ),
    Product(
        item_code="002",
        name="Amoxicillin 250mg",
        batch="B124",
        expiry=datetime.date(2024, 10, 20),
        price=Decimal("12.50"),
        stock=50,
        category="Antibiotic",
    ),
    Product(
        item_code="003",
        name="Vitamin C 1000mg",
        batch="B125",
        expiry=datetime.date(2026, 1, 15),
        price=Decimal("8.00"),
        stock=200,
        category="Supplement",
    ),
    Product(
        item_code="004",
        name="Ibuprofen 400mg",
        batch="B126",
        expiry=datetime.date(2025, 6, 30),
        price=Decimal("6.50"),
        stock=80,
        category="Medicine",
    ),
    Product(
        item_code="005",
        name="Cetirizine 10mg",
        batch="B127",
        expiry=datetime.date(2025, 8, 15),
        price=Decimal("4.00"),
        stock=120,
        category="Allergy",
    ),
]

INITIAL_CUSTOMERS = [
    Customer(
        name="Dr. Gulam Murtaza",
        phone="0300-1234567",
        region="Gulshan Ravi",
        address="Bismillah Chowk",
        balance=Decimal("6070.00"),
    ),
    Customer(
        name="Pharmacy One",
        phone="0321-9876543",
        region="Johar Town",
        address="Main Blvd",
        balance=Decimal("0.00"),
    ),
]


class Command(BaseCommand):
    """
    Management command to seed demo products and customers.
    """

    help = "Load the demo product catalogue and customers into an empty store"

    def add_arguments(self, parser):
        parser.add_argument(
            "--force",
            action="store_true",
            help="Add the demo records even if the store already has data",
        )

    def _seed(self, repository, entities, label, force):
        if repository.list() and not force:
            self.stdout.write(self.style.WARNING(f"{label} already present, skipping"))
            return 0
        for entity in entities:
            repository.create(entity)
        self.stdout.write(self.style.SUCCESS(f"✓ Added {len(entities)} {label.lower()}"))
        return len(entities)

    def handle(self, *args, **options):
        """Execute the command."""
        try:
            store = get_store()
            self.stdout.write(f"Seeding the {store.name} store...")
            added = self._seed(store.products, INITIAL_PRODUCTS, "Products", options["force"])
            added += self._seed(store.customers, INITIAL_CUSTOMERS, "Customers", options["force"])
        except PharmacyError as e:
            raise CommandError(f"Seeding failed: {e}")

        self.stdout.write(self.style.SUCCESS(f"Done, {added} records added."))
