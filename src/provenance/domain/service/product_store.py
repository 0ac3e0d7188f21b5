"""Domain service: the product store.

The store is the single entry point for creating and transferring
products. It assigns sequential identifiers, checks every precondition
of a transition before touching the record, and serialises all calls
through one lock so a check and its mutation are never interleaved with
another call. The repository's own ``locked()`` context is held inside
that lock, which extends the same guarantee to other processes sharing
the backend.

Callers are passed in explicitly; the store never resolves identity on
its own.
"""

from __future__ import annotations

import logging
import threading

from provenance.domain.exceptions import (
    DomainException,
    EmptyStoreError,
    InvalidStateError,
    NotDelegateError,
    NotOwnerError,
    RecordNotFoundError,
    ValidationError,
)
from provenance.domain.model.product import ProductRecord, ProductSnapshot, ProductState
from provenance.domain.model.value_objects import Principal, ProductCode
from provenance.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class ProductStore:
    """Append-only collection of products addressed by identifier.

    Identifiers are ``0, 1, 2, ...`` in creation order and are never
    reused. The backing repository is never exposed; reads return
    frozen ``ProductSnapshot`` copies.
    """

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock, self._product_repo.locked():
            return self._product_repo.count()

    # --- Commands -------------------------------------------------------------

    def create(self, code: ProductCode | int, caller: Principal) -> ProductSnapshot:
        """Append a new product owned by *caller*."""
        if not isinstance(code, ProductCode):
            code = ProductCode(code)
        _require_principal(caller, "caller")

        with self._lock, self._product_repo.locked():
            product = ProductRecord.create(
                product_id=self._product_repo.count(),
                code=code,
                owner=caller,
            )
            self._product_repo.append(product)
            logger.info(
                "Product #%d created (code=%s, owner=%s)", product.id, code, caller
            )
            return product.snapshot()

    def delegate(self, product_id: int, caller: Principal, target: Principal) -> None:
        """Offer ownership of a product to *target*.

        Checked in order: the product exists, *caller* owns it, and it is
        not already pending. Nothing is written unless all three hold.
        """
        _require_principal(caller, "caller")
        _require_principal(target, "delegate target")

        with self._lock, self._product_repo.locked():
            try:
                product = self._get(product_id)
                if product.owner != caller:
                    raise NotOwnerError(
                        f"{caller} is not the owner of product #{product_id}"
                    )
                if product.state != ProductState.OWNED:
                    raise InvalidStateError(
                        f"Cannot delegate product #{product_id} — current state is "
                        f"{product.state.value}, expected {ProductState.OWNED.value}"
                    )
            except DomainException as exc:
                self._log_rejection("delegate", product_id, caller, exc)
                raise

            product.delegate_to(target)
            self._product_repo.save(product)
            logger.info(
                "Product #%d delegated by %s to %s", product_id, caller, target
            )

    def accept(self, product_id: int, caller: Principal) -> None:
        """Take ownership of a product delegated to *caller*.

        Checked in order: the product exists, *caller* is its delegate,
        and it is pending. Nothing is written unless all three hold.
        """
        _require_principal(caller, "caller")

        with self._lock, self._product_repo.locked():
            try:
                product = self._get(product_id)
                if product.delegate != caller:
                    raise NotDelegateError(
                        f"{caller} is not the delegate of product #{product_id}"
                    )
                if product.state != ProductState.PENDING_DELEGATE:
                    raise InvalidStateError(
                        f"Cannot accept product #{product_id} — current state is "
                        f"{product.state.value}, expected "
                        f"{ProductState.PENDING_DELEGATE.value}"
                    )
            except DomainException as exc:
                self._log_rejection("accept", product_id, caller, exc)
                raise

            previous_owner = product.owner
            product.accept(caller)
            self._product_repo.save(product)
            logger.info(
                "Product #%d accepted by %s (previous owner %s)",
                product_id,
                caller,
                previous_owner,
            )

    # --- Queries --------------------------------------------------------------

    def get_by_id(self, product_id: int) -> ProductSnapshot:
        with self._lock, self._product_repo.locked():
            return self._get(product_id).snapshot()

    def get_last(self) -> ProductSnapshot:
        with self._lock, self._product_repo.locked():
            count = self._product_repo.count()
            if count == 0:
                raise EmptyStoreError()
            return self._get(count - 1).snapshot()

    # --- Internal helpers -----------------------------------------------------

    def _get(self, product_id: int) -> ProductRecord:
        # bool is an int subclass; reject it along with anything non-integral
        if (
            not isinstance(product_id, int)
            or isinstance(product_id, bool)
            or not 0 <= product_id < self._product_repo.count()
        ):
            raise RecordNotFoundError(product_id)
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise RecordNotFoundError(product_id)
        return product

    @staticmethod
    def _log_rejection(
        operation: str, product_id: int, caller: Principal, exc: DomainException
    ) -> None:
        logger.debug(
            "%s of product #%s by %s rejected: %s (%s)",
            operation,
            product_id,
            caller,
            exc.kind.value,
            exc,
        )


def _require_principal(value: object, role: str) -> None:
    if not isinstance(value, Principal):
        raise ValidationError(
            f"The {role} must be a Principal, got {type(value).__name__}"
        )
