"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry product data out to the CLI as plain ints and strings, without
exposing value objects or the mutable record.
"""

from __future__ import annotations

from dataclasses import dataclass

from provenance.domain.model.product import ProductSnapshot


@dataclass(frozen=True)
class ProductDTO:
    """Output: a product as displayed to the user."""

    id: int
    code: int
    state: str
    owner: str
    delegate: str | None

    @staticmethod
    def from_snapshot(snapshot: ProductSnapshot) -> ProductDTO:
        return ProductDTO(
            id=snapshot.id,
            code=snapshot.code.value,
            state=snapshot.state.value,
            owner=str(snapshot.owner),
            delegate=str(snapshot.delegate) if snapshot.delegate is not None else None,
        )
