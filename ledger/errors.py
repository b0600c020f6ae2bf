"""Exceptions raised by the resource ledger."""
from __future__ import annotations

from typing import Hashable


class LedgerError(Exception):
    """Base class for ledger contract violations."""


class UnknownResourceTypeError(LedgerError, LookupError):
    """Raised when an operation targets a resource type that is not registered."""

    def __init__(self, resource_type: Hashable, kind: str | None = None):
        self.resource_type = resource_type
        self.kind = kind
        if kind is None:
            message = f"There is no resource with type ({resource_type}) in resources"
        else:
            message = (
                f"There is no {kind} resource with type ({resource_type}) in resources"
            )
        super().__init__(message)


class InvalidAmountError(LedgerError, ValueError):
    """Raised when an add/spend amount is negative or not an integer."""

    def __init__(self, amount: object, message: str):
        self.amount = amount
        super().__init__(message)


__all__ = ["InvalidAmountError", "LedgerError", "UnknownResourceTypeError"]
