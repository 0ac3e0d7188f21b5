"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass

from provenance.domain.exceptions import ValidationError

CODE_MIN = 0
CODE_MAX = 0xFFFF


@dataclass(frozen=True)
class Principal:
    """The identity of a calling party.

    Opaque to the domain beyond equality: two principals are the same
    party exactly when their names are equal.
    """

    name: str

    def __post_init__(self) -> None:
        if not isinstance(self.name, str):
            raise ValidationError(
                f"Principal must be a string, got {type(self.name).__name__}"
            )
        stripped = self.name.strip()
        if not stripped:
            raise ValidationError("Principal name is required")
        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "name", stripped)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ProductCode:
    """A 16-bit unsigned product code."""

    value: int

    def __post_init__(self) -> None:
        # bool is an int subclass; True is not a product code
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise ValidationError(
                f"Product code must be an integer, got {type(self.value).__name__}"
            )
        if not CODE_MIN <= self.value <= CODE_MAX:
            raise ValidationError(
                f"Product code must be between {CODE_MIN} and {CODE_MAX}, "
                f"got {self.value}"
            )

    def __str__(self) -> str:
        return str(self.value)
