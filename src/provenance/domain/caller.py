"""Caller identity port.

The domain never looks up who is calling. Each application handler asks
its ``CallerContext`` once per invocation and passes the principal
explicitly into the store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from provenance.domain.model.value_objects import Principal


class CallerContext(ABC):

    @abstractmethod
    def current_caller(self) -> Principal:
        """Return the principal making the current call."""


class StaticCallerContext(CallerContext):
    """A context that always reports the same principal."""

    def __init__(self, principal: Principal) -> None:
        self._principal = principal

    def current_caller(self) -> Principal:
        return self._principal
