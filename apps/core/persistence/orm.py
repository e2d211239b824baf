"""
Local store backed by the Django database.

Each repository maps one model to one entity type. Writes run inside
``transaction.atomic`` so a unit of work spanning several repositories
commits or rolls back as a whole; compensations registered on the unit
of work are never needed here.
"""

import logging
from contextlib import contextmanager

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from apps.core.exceptions import EntityNotFound, ImmutableEntityError, PersistenceError
from apps.crm.models import Customer as CustomerModel
from apps.inventory.models import Product as ProductModel
from apps.procurement.models import PurchaseOrder as PurchaseOrderModel
from apps.procurement.models import PurchaseOrderItem
from apps.procurement.models import Supplier as SupplierModel
from apps.sales.models import Invoice as InvoiceModel
from apps.sales.models import InvoiceItem

from .base import EntityRepository, Store, UnitOfWork
from .entities import Customer, Invoice, Product, PurchaseOrder, Supplier, new_id

logger = logging.getLogger(__name__)


def _model_row(obj, exclude=()):
    return {
        f.attname: getattr(obj, f.attname)
        for f in obj._meta.concrete_fields
        if f.attname not in exclude
    }


class ModelRepository(EntityRepository):
    """Repository over a Django model, optionally with an ``items`` child model."""

    model = None
    entity_class = None
    child_model = None
    child_fk = None

    def get_queryset(self):
        queryset = self.model.objects.all()
        if self.child_model is not None:
            queryset = queryset.prefetch_related("items")
        return queryset

    def to_entity(self, obj):
        row = _model_row(obj)
        if self.child_model is not None:
            row["items"] = [
                _model_row(item, exclude=("id", "position", f"{self.child_fk}_id"))
                for item in obj.items.all()
            ]
        return self.entity_class.from_row(row)

    def _fields_for(self, model, row):
        attnames = {f.attname for f in model._meta.concrete_fields}
        return {key: value for key, value in row.items() if key in attnames}

    def _get_object(self, entity_id, for_update=False):
        queryset = self.model.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(pk=entity_id)
        except (self.model.DoesNotExist, ValidationError, ValueError):
            raise EntityNotFound(self.entity_class.__name__, entity_id)

    def _create_children(self, obj, lines):
        children = []
        for position, line in enumerate(lines):
            fields = self._fields_for(self.child_model, line.to_row())
            fields.pop("id", None)
            children.append(self.child_model(position=position, **{self.child_fk: obj}, **fields))
        self.child_model.objects.bulk_create(children)

    def list(self):
        return [self.to_entity(obj) for obj in self.get_queryset()]

    def get(self, entity_id):
        try:
            obj = self.get_queryset().get(pk=entity_id)
        except (self.model.DoesNotExist, ValidationError, ValueError):
            raise EntityNotFound(self.entity_class.__name__, entity_id)
        return self.to_entity(obj)

    def create(self, entity):
        if entity.id is None:
            entity = entity.copy_with(id=new_id())
        fields = self._fields_for(self.model, entity.to_row(include_children=False))
        try:
            with transaction.atomic():
                obj = self.model.objects.create(**fields)
                if self.child_model is not None:
                    self._create_children(obj, entity.items)
        except DatabaseError as e:
            raise PersistenceError(f"Could not save {self.entity_class.__name__}: {e}") from e
        logger.debug(f"Created {self.entity_class.__name__} {obj.pk}")
        return self.get(obj.pk)

    def update(self, entity_id, changes):
        clean = self.entity_class.normalize_changes(changes)
        lines = clean.pop("items", None)
        try:
            with transaction.atomic():
                obj = self._get_object(entity_id, for_update=True)
                for name, value in self._fields_for(self.model, clean).items():
                    setattr(obj, name, value)
                obj.save()
                if lines is not None and self.child_model is not None:
                    obj.items.all().delete()
                    self._create_children(obj, lines)
        except DatabaseError as e:
            raise PersistenceError(
                f"Could not update {self.entity_class.__name__} {entity_id}: {e}"
            ) from e
        return self.get(entity_id)

    def adjust(self, entity_id, field, delta):
        try:
            with transaction.atomic():
                obj = self._get_object(entity_id, for_update=True)
                setattr(obj, field, getattr(obj, field) + delta)
                obj.save(update_fields=[field, "updated_at"])
        except DatabaseError as e:
            raise PersistenceError(
                f"Could not adjust {field} of {self.entity_class.__name__} {entity_id}: {e}"
            ) from e
        return self.get(entity_id)

    def delete(self, entity_id):
        obj = self._get_object(entity_id)
        try:
            obj.delete()
        except DatabaseError as e:
            raise PersistenceError(
                f"Could not delete {self.entity_class.__name__} {entity_id}: {e}"
            ) from e


class ProductRepository(ModelRepository):
    model = ProductModel
    entity_class = Product


class CustomerRepository(ModelRepository):
    model = CustomerModel
    entity_class = Customer


class InvoiceRepository(ModelRepository):
    model = InvoiceModel
    entity_class = Invoice
    child_model = InvoiceItem
    child_fk = "invoice"

    def update(self, entity_id, changes):
        raise ImmutableEntityError("Invoices cannot be modified after checkout")


class SupplierRepository(ModelRepository):
    model = SupplierModel
    entity_class = Supplier


class PurchaseOrderRepository(ModelRepository):
    model = PurchaseOrderModel
    entity_class = PurchaseOrder
    child_model = PurchaseOrderItem
    child_fk = "purchase_order"


class OrmStore(Store):
    """Store writing to the project's own database."""

    name = "local"

    def __init__(self):
        self.products = ProductRepository()
        self.customers = CustomerRepository()
        self.invoices = InvoiceRepository()
        self.suppliers = SupplierRepository()
        self.purchase_orders = PurchaseOrderRepository()

    @contextmanager
    def unit_of_work(self):
        with transaction.atomic():
            yield UnitOfWork()
