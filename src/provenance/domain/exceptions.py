"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Each subclass carries an ``ErrorKind`` so callers can branch on the kind of
failure without matching on message text.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    VALIDATION = "VALIDATION"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    NOT_OWNER = "NOT_OWNER"
    NOT_DELEGATE = "NOT_DELEGATE"
    INVALID_STATE = "INVALID_STATE"
    EMPTY_STORE = "EMPTY_STORE"


class DomainException(Exception):
    """Base class for all domain errors."""

    kind: ErrorKind = ErrorKind.VALIDATION


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    kind = ErrorKind.VALIDATION


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    kind = ErrorKind.RECORD_NOT_FOUND


class RecordNotFoundError(EntityNotFoundError):
    """The identifier is outside the range of created records."""

    def __init__(self, product_id: int) -> None:
        super().__init__(f"Product #{product_id} not found")
        self.product_id = product_id


class NotOwnerError(DomainException):
    """The caller tried to delegate a product it does not own."""

    kind = ErrorKind.NOT_OWNER


class NotDelegateError(DomainException):
    """The caller tried to accept a product not delegated to it."""

    kind = ErrorKind.NOT_DELEGATE


class InvalidStateError(DomainException):
    """The product is in the wrong state for the requested transition."""

    kind = ErrorKind.INVALID_STATE


class EmptyStoreError(DomainException):
    """The store holds no products yet."""

    kind = ErrorKind.EMPTY_STORE

    def __init__(self) -> None:
        super().__init__("No products have been created yet")
