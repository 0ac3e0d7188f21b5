"""Application service: Delegate Product use case.

The current caller offers one of its products to another principal.
Ownership does not change until that principal accepts.
"""

from __future__ import annotations

from provenance.domain.caller import CallerContext
from provenance.domain.model.value_objects import Principal
from provenance.domain.service.product_store import ProductStore


class DelegateProductHandler:

    def __init__(self, store: ProductStore, caller_context: CallerContext) -> None:
        self._store = store
        self._caller_context = caller_context

    def handle(self, product_id: int, delegate_to: str | Principal) -> None:
        target = delegate_to if isinstance(delegate_to, Principal) else Principal(delegate_to)
        caller = self._caller_context.current_caller()
        self._store.delegate(product_id, caller, target)
