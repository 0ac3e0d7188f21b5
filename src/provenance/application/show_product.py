"""Application services: product queries."""

from __future__ import annotations

from provenance.application.dto import ProductDTO
from provenance.domain.service.product_store import ProductStore


class ShowProductHandler:

    def __init__(self, store: ProductStore) -> None:
        self._store = store

    def handle(self, product_id: int) -> ProductDTO:
        return ProductDTO.from_snapshot(self._store.get_by_id(product_id))


class ShowLastProductHandler:

    def __init__(self, store: ProductStore) -> None:
        self._store = store

    def handle(self) -> ProductDTO:
        """Return the most recently created product."""
        return ProductDTO.from_snapshot(self._store.get_last())


class ListProductsHandler:

    def __init__(self, store: ProductStore) -> None:
        self._store = store

    def handle(self) -> list[ProductDTO]:
        """Return every product in identifier order."""
        return [
            ProductDTO.from_snapshot(self._store.get_by_id(product_id))
            for product_id in range(len(self._store))
        ]
