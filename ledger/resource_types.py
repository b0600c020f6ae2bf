"""Resource type identifiers used by the game host."""
from __future__ import annotations

from enum import Enum
from typing import Dict, List


class ResourceType(str, Enum):
    """Enumeration of all resource keys tracked by the ledger."""

    GOLD = "GOLD"
    GEMS = "GEMS"
    ENERGY = "ENERGY"
    STARS = "STARS"


ALL_RESOURCE_TYPES: List[ResourceType] = list(ResourceType)


_RESOURCE_LOOKUP: Dict[str, ResourceType] = {}
for _resource_type in ALL_RESOURCE_TYPES:
    _RESOURCE_LOOKUP[_resource_type.value.lower()] = _resource_type
    _RESOURCE_LOOKUP[_resource_type.name.lower()] = _resource_type


def resource_from_id(identifier: str) -> ResourceType:
    """Return the resource type associated with ``identifier``.

    The lookup ignores capitalisation and surrounding whitespace. A
    :class:`KeyError` is raised if the identifier is unknown.
    """

    resource_type = _RESOURCE_LOOKUP.get(str(identifier).strip().lower())
    if resource_type is None:
        raise KeyError(f"Unknown resource type: {identifier}")
    return resource_type


def normalise_resource_type(value: ResourceType | str) -> ResourceType:
    """Coerce ``value`` into a :class:`ResourceType` instance."""

    if isinstance(value, ResourceType):
        return value
    return resource_from_id(value)


__all__ = [
    "ALL_RESOURCE_TYPES",
    "ResourceType",
    "normalise_resource_type",
    "resource_from_id",
]
