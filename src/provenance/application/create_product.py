"""Application service: Create Product use case."""

from __future__ import annotations

from provenance.application.dto import ProductDTO
from provenance.domain.caller import CallerContext
from provenance.domain.model.value_objects import ProductCode
from provenance.domain.service.product_store import ProductStore


class CreateProductHandler:

    def __init__(self, store: ProductStore, caller_context: CallerContext) -> None:
        self._store = store
        self._caller_context = caller_context

    def handle(self, code: int) -> ProductDTO:
        """Create a product owned by the current caller."""
        product_code = ProductCode(code)
        caller = self._caller_context.current_caller()
        return ProductDTO.from_snapshot(self._store.create(product_code, caller))
