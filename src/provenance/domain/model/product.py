"""Product aggregate.

A product record carries its ownership and delegation state. Ownership
moves in two steps: the owner delegates to a target principal, then the
target accepts. The record itself performs no validation; the store
checks every precondition before calling a transition.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from provenance.domain.model.value_objects import Principal, ProductCode


class ProductState(Enum):
    OWNED = "OWNED"
    PENDING_DELEGATE = "PENDING_DELEGATE"


@dataclass(frozen=True)
class ProductSnapshot:
    """Read-only copy of a product at a point in time."""

    id: int
    code: ProductCode
    state: ProductState
    owner: Principal
    delegate: Principal | None


@dataclass
class ProductRecord:
    """A single trackable product.

    ``delegate`` is set exactly while ``state`` is PENDING_DELEGATE.
    Use ``ProductRecord.create()`` for new products; ``__init__`` stays
    plain so repositories can reconstitute persisted records.
    """

    id: int
    code: ProductCode
    owner: Principal
    state: ProductState = ProductState.OWNED
    delegate: Principal | None = None

    @staticmethod
    def create(product_id: int, code: ProductCode, owner: Principal) -> ProductRecord:
        return ProductRecord(id=product_id, code=code, owner=owner)

    # --- State transitions ----------------------------------------------------

    def delegate_to(self, target: Principal) -> None:
        """Transition OWNED -> PENDING_DELEGATE."""
        self.state = ProductState.PENDING_DELEGATE
        self.delegate = target

    def accept(self, new_owner: Principal) -> None:
        """Transition PENDING_DELEGATE -> OWNED under a new owner."""
        self.owner = new_owner
        self.state = ProductState.OWNED
        self.delegate = None

    # --- Reads ----------------------------------------------------------------

    def snapshot(self) -> ProductSnapshot:
        return ProductSnapshot(
            id=self.id,
            code=self.code,
            state=self.state,
            owner=self.owner,
            delegate=self.delegate,
        )
