"""Application service: Accept Product use case."""

from __future__ import annotations

from provenance.domain.caller import CallerContext
from provenance.domain.service.product_store import ProductStore


class AcceptProductHandler:

    def __init__(self, store: ProductStore, caller_context: CallerContext) -> None:
        self._store = store
        self._caller_context = caller_context

    def handle(self, product_id: int) -> None:
        """Take ownership of a product delegated to the current caller."""
        caller = self._caller_context.current_caller()
        self._store.accept(product_id, caller)
