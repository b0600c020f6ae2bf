"""Registry routing add/spend/query calls to resources by type."""
from __future__ import annotations

from typing import Callable, Dict, Generic, Hashable, Iterable, List, Tuple, TypeVar

from .errors import UnknownResourceTypeError
from .resource import BIG_INTEGER, INTEGER, NumericKind, Resource
from .signals import Signal

E = TypeVar("E", bound=Hashable)

_Relay = Callable[[int, int, object], None]


class _ResourceTable(Generic[E]):
    """One mapping of resource type to resource plus the relays attached to it."""

    def __init__(self, kind: NumericKind, updated: Signal) -> None:
        self.kind = kind
        self.updated = updated
        self.resources: Dict[E, Resource[E]] = {}
        self._relays: List[Tuple[Resource[E], _Relay]] = []

    def replace(self, resources: Iterable[Resource[E]]) -> None:
        incoming = list(resources)
        for resource in incoming:
            if resource.kind is not self.kind:
                raise TypeError(
                    f"Expected {self.kind.name} resources, got {resource!r}"
                )

        mapping: Dict[E, Resource[E]] = {}
        for resource in incoming:
            mapping[resource.type] = resource

        for resource, relay in self._relays:
            resource.updated.disconnect(relay)
        self._relays = []
        self.resources = mapping
        for resource_type, resource in mapping.items():
            relay = self._make_relay(resource_type)
            resource.updated.connect(relay)
            self._relays.append((resource, relay))

    def _make_relay(self, resource_type: E) -> _Relay:
        def relay(old_amount: int, new_amount: int, initiator: object) -> None:
            self.updated.emit(resource_type, old_amount, new_amount, initiator)

        return relay

    def get(self, resource_type: E) -> Resource[E]:
        resource = self.resources.get(resource_type)
        if resource is None:
            raise UnknownResourceTypeError(resource_type, self.kind.name)
        return resource


class ResourceController(Generic[E]):
    """Controller for integer and big integer resources.

    Resources are registered through :meth:`initialize_integer_resources` and
    :meth:`initialize_big_integer_resources`; each call replaces the whole
    mapping for that kind. Every operation checks that the type is registered
    before touching any resource and raises
    :class:`~ledger.errors.UnknownResourceTypeError` otherwise.

    ``resource_integer_updated`` and ``resource_big_integer_updated`` fire with
    ``(resource_type, old_amount, new_amount, initiator)`` whenever a resource
    of that kind changes. Handlers connected to these signals survive
    re-initialization; handlers connected to an individual resource do not.
    """

    def __init__(self) -> None:
        self.resource_integer_updated = Signal()
        self.resource_big_integer_updated = Signal()
        self._integer: _ResourceTable[E] = _ResourceTable(
            INTEGER, self.resource_integer_updated
        )
        self._big_integer: _ResourceTable[E] = _ResourceTable(
            BIG_INTEGER, self.resource_big_integer_updated
        )

    # Initialisation ----------------------------------------------------
    def initialize_integer_resources(self, resources: Iterable[Resource[E]]) -> None:
        """Replace the integer resources. Later duplicates of a type win."""

        self._integer.replace(resources)

    def initialize_big_integer_resources(self, resources: Iterable[Resource[E]]) -> None:
        """Replace the big integer resources. Later duplicates of a type win."""

        self._big_integer.replace(resources)

    def initialize_resources(self, resources: Iterable[Resource[E]]) -> None:
        """Replace the mapping matching the kind of ``resources``.

        The kind is inferred from the resources themselves, so the iterable
        must be non-empty and must not mix kinds.
        """

        incoming = list(resources)
        if not incoming:
            raise ValueError(
                "Cannot infer the resource kind of an empty list; use "
                "initialize_integer_resources or initialize_big_integer_resources"
            )
        kinds = {resource.kind for resource in incoming}
        if len(kinds) > 1:
            raise TypeError("Cannot initialise integer and big integer resources together")
        self._table_for_kind(kinds.pop()).replace(incoming)

    def _table_for_kind(self, kind: NumericKind) -> _ResourceTable[E]:
        if kind is INTEGER:
            return self._integer
        if kind is BIG_INTEGER:
            return self._big_integer
        raise TypeError(f"Unsupported resource kind: {kind.name}")

    def _table_for_type(self, resource_type: E) -> _ResourceTable[E]:
        if resource_type in self._integer.resources:
            return self._integer
        if resource_type in self._big_integer.resources:
            return self._big_integer
        raise UnknownResourceTypeError(resource_type)

    # Integer resources -------------------------------------------------
    def add_integer_amount(
        self, resource_type: E, amount: int, initiator: object = None
    ) -> None:
        self._integer.get(resource_type).add(amount, initiator)

    def spend_integer_amount(
        self, resource_type: E, amount: int, initiator: object = None
    ) -> None:
        self._integer.get(resource_type).spend(amount, initiator)

    def has_integer_amount(self, resource_type: E, amount: int) -> bool:
        return self._integer.get(resource_type).has_amount(amount)

    def get_integer_amount(self, resource_type: E) -> int:
        return self._integer.get(resource_type).get_amount()

    # Big integer resources ---------------------------------------------
    def add_big_integer_amount(
        self, resource_type: E, amount: int, initiator: object = None
    ) -> None:
        self._big_integer.get(resource_type).add(amount, initiator)

    def spend_big_integer_amount(
        self, resource_type: E, amount: int, initiator: object = None
    ) -> None:
        self._big_integer.get(resource_type).spend(amount, initiator)

    def has_big_integer_amount(self, resource_type: E, amount: int) -> bool:
        return self._big_integer.get(resource_type).has_amount(amount)

    def get_big_integer_amount(self, resource_type: E) -> int:
        return self._big_integer.get(resource_type).get_amount()

    # Kind-agnostic helpers ---------------------------------------------
    def add_amount(self, resource_type: E, amount: int, initiator: object = None) -> None:
        """Add to ``resource_type`` in whichever mapping holds it."""

        self._table_for_type(resource_type).get(resource_type).add(amount, initiator)

    def spend_amount(
        self, resource_type: E, amount: int, initiator: object = None
    ) -> None:
        """Spend from ``resource_type`` in whichever mapping holds it."""

        self._table_for_type(resource_type).get(resource_type).spend(amount, initiator)

    def has_amount(self, resource_type: E, amount: int) -> bool:
        return self._table_for_type(resource_type).get(resource_type).has_amount(amount)

    def get_amount(self, resource_type: E) -> int:
        return self._table_for_type(resource_type).get(resource_type).get_amount()

    def has_resource(self, resource_type: E) -> bool:
        return (
            resource_type in self._integer.resources
            or resource_type in self._big_integer.resources
        )

    def integer_types(self) -> List[E]:
        return list(self._integer.resources.keys())

    def big_integer_types(self) -> List[E]:
        return list(self._big_integer.resources.keys())

    def snapshot(self) -> Dict[str, Dict[E, int]]:
        """Return the current amounts grouped by numeric kind."""

        return {
            INTEGER.name: {
                resource_type: resource.get_amount()
                for resource_type, resource in self._integer.resources.items()
            },
            BIG_INTEGER.name: {
                resource_type: resource.get_amount()
                for resource_type, resource in self._big_integer.resources.items()
            },
        }


__all__ = ["ResourceController"]
