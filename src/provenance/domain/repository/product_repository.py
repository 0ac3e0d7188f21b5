"""Abstract repository for the Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, in-memory) live
outside the domain layer.

Products are append-only: a repository never removes or renumbers a
record, so ``count()`` is always the next identifier to assign.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator

from provenance.domain.model.product import ProductRecord


class ProductRepository(ABC):

    @abstractmethod
    def count(self) -> int:
        """Return the number of products created so far."""

    @abstractmethod
    def get_by_id(self, product_id: int) -> ProductRecord | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def append(self, product: ProductRecord) -> None:
        """Persist a new product; its ID must equal ``count()``."""

    @abstractmethod
    def save(self, product: ProductRecord) -> None:
        """Persist an updated product."""

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold exclusive access to the backing storage.

        The store wraps each read-check-write in this context. Backends
        shared between processes override it; in-process backends need
        nothing beyond the store's own lock.
        """
        yield
