"""Resource counters for the ledger.

A :class:`Resource` holds the current amount of a single resource type. The
same implementation serves both numeric kinds: ``INTEGER`` mirrors a signed
32-bit counter while ``BIG_INTEGER`` is unbounded. Amounts never drop below
zero; spending more than is available clamps the counter to zero.
"""
from __future__ import annotations

from dataclasses import dataclass
from numbers import Integral
from typing import Generic, Hashable, Optional, TypeVar

from .errors import InvalidAmountError
from .signals import Signal

E = TypeVar("E", bound=Hashable)


@dataclass(frozen=True)
class NumericKind:
    """Describes the numeric representation backing a resource.

    Attributes:
        name: Identifier used in error messages and snapshots.
        maximum: Largest representable amount (``None`` for unbounded).
    """

    name: str
    maximum: Optional[int] = None

    def coerce(self, amount: object) -> int:
        """Return ``amount`` as an ``int`` or raise :class:`InvalidAmountError`."""

        if isinstance(amount, bool) or not isinstance(amount, Integral):
            raise InvalidAmountError(
                amount, f"The amount must be an integer, got {type(amount).__name__}"
            )
        return int(amount)

    def check_result(self, value: int) -> int:
        if self.maximum is not None and value > self.maximum:
            raise OverflowError(
                f"The resulting amount {value} exceeds the {self.name} maximum of {self.maximum}"
            )
        return value


INTEGER = NumericKind("integer", maximum=2**31 - 1)
BIG_INTEGER = NumericKind("big_integer")


class Resource(Generic[E]):
    """Counter for a single resource type.

    ``updated`` fires with ``(old_amount, new_amount, initiator)`` after every
    successful :meth:`add` or :meth:`spend`, even when the amount did not
    change. Subscribe through :class:`ledger.controller.ResourceController`
    instead of connecting here: handlers attached to a resource are dropped
    when the controller replaces it.

    A plain ``Resource`` is a big integer resource unless ``kind`` is given.
    Construct :class:`IntegerResource` or :class:`BigIntegerResource` so the
    controller files the resource under the intended mapping.
    """

    kind: NumericKind = BIG_INTEGER

    def __init__(
        self,
        resource_type: E,
        default_amount: int = 0,
        kind: NumericKind | None = None,
    ) -> None:
        if kind is not None:
            self.kind = kind
        amount = self.kind.check_result(self.kind.coerce(default_amount))
        if amount < 0:
            raise InvalidAmountError(amount, "The starting amount must not be negative")
        self._type = resource_type
        self._amount = amount
        self.updated = Signal()

    @property
    def type(self) -> E:
        return self._type

    # ------------------------------------------------------------------
    def add(self, amount: int, initiator: object = None) -> None:
        """Increase the amount by ``amount``.

        Raises:
            InvalidAmountError: ``amount`` is negative or not an integer.
            OverflowError: the result does not fit the numeric kind.
        """

        value = self.kind.coerce(amount)
        if value < 0:
            raise InvalidAmountError(value, "The add amount must not be negative")

        old_amount = self._amount
        self._amount = self.kind.check_result(old_amount + value)
        self.updated.emit(old_amount, self._amount, initiator)

    def spend(self, amount: int, initiator: object = None) -> None:
        """Decrease the amount by ``amount``, flooring the result at zero.

        Raises:
            InvalidAmountError: ``amount`` is negative or not an integer.
        """

        value = self.kind.coerce(amount)
        if value < 0:
            raise InvalidAmountError(value, "The spend amount must not be negative")

        old_amount = self._amount
        self._amount = max(0, old_amount - value)
        self.updated.emit(old_amount, self._amount, initiator)

    def get_amount(self) -> int:
        return self._amount

    def has_amount(self, amount: int) -> bool:
        """Return ``True`` when the current amount is greater than or equal to ``amount``."""

        return self._amount >= amount

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(type={self._type!r}, amount={self._amount}, "
            f"kind={self.kind.name})"
        )


class IntegerResource(Resource[E]):
    """Resource backed by a signed 32-bit counter."""

    kind = INTEGER


class BigIntegerResource(Resource[E]):
    """Resource backed by an unbounded integer."""

    kind = BIG_INTEGER


__all__ = [
    "BIG_INTEGER",
    "BigIntegerResource",
    "INTEGER",
    "IntegerResource",
    "NumericKind",
    "Resource",
]
