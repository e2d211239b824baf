"""
Exception hierarchy for the pharmacy application.

Every error raised by the persistence layer, the POS engine or the
procurement service derives from PharmacyError so views can translate
them to HTTP responses in one place.
"""


class PharmacyError(Exception):
    """Base class for all pharmacy errors."""


class ConfigurationError(PharmacyError):
    """Remote store credentials are missing or malformed."""


class CartValidationError(PharmacyError, ValueError):
    """A cart line was given an invalid quantity, bonus or discount."""


class PersistenceError(PharmacyError):
    """A read or write against the backing store failed."""


class EntityNotFound(PersistenceError):
    """The requested record does not exist."""

    def __init__(self, entity, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ImmutableEntityError(PersistenceError):
    """The record type cannot be modified after creation."""


class RemoteStoreError(PersistenceError):
    """The hosted table store returned an error response."""

    def __init__(self, message, code=None, status_code=None):
        self.code = code
        self.status_code = status_code
        super().__init__(message)


class CheckoutError(PharmacyError):
    """A sale could not be completed."""


class InsufficientStockError(CheckoutError):
    """Checkout would drive stock below zero while backorders are disabled."""


class PurchaseOrderError(PharmacyError):
    """Invalid receive or cancel request on a purchase order."""
