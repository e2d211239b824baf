"""
Store and repository interfaces.

A store exposes one repository per entity type (``products``,
``customers``, ``invoices``, ``suppliers``, ``purchase_orders``) with the
same signatures whatever the backing storage is, plus ``unit_of_work()``
for multi-record writes that must succeed or fail together.
"""

import logging
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class EntityRepository:
    """CRUD operations for one entity type."""

    entity_class = None

    def list(self):
        raise NotImplementedError

    def get(self, entity_id):
        raise NotImplementedError

    def create(self, entity):
        """Persist a new entity and return it with its identifier set."""
        raise NotImplementedError

    def update(self, entity_id, changes):
        """Apply a partial update and return the updated entity."""
        raise NotImplementedError

    def delete(self, entity_id):
        raise NotImplementedError

    def adjust(self, entity_id, field, delta):
        """
        Add ``delta`` to a numeric field and return the updated entity.

        The new value is computed from the stored row at write time, never
        from a copy read earlier in the request.
        """
        current = self.get(entity_id)
        return self.update(entity_id, {field: getattr(current, field) + delta})


class UnitOfWork:
    """
    Collects compensating actions for a group of writes.

    Stores without transactions run the registered compensations in
    reverse order when the group fails. Transactional stores ignore them
    and roll back instead.
    """

    def __init__(self):
        self._compensations = []

    def on_rollback(self, func, *args, **kwargs):
        self._compensations.append((func, args, kwargs))

    def rollback(self):
        failures = 0
        while self._compensations:
            func, args, kwargs = self._compensations.pop()
            try:
                func(*args, **kwargs)
            except Exception as e:
                failures += 1
                logger.error(
                    f"Compensating action {getattr(func, '__qualname__', func)} failed: {e}",
                    exc_info=True,
                )
        return failures


class Store:
    """A set of repositories sharing one backing storage."""

    name = "base"

    products = None
    customers = None
    invoices = None
    suppliers = None
    purchase_orders = None

    @contextmanager
    def unit_of_work(self):
        uow = UnitOfWork()
        try:
            yield uow
        except Exception:
            logger.warning(f"Unit of work on {self.name} store failed, running compensations")
            uow.rollback()
            raise

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"
