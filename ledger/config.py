"""Centralised configuration for the resource ledger host."""
from __future__ import annotations

from typing import Dict

from .resource_types import ResourceType

# ---------------------------------------------------------------------------
# Starting balances

# Integer resources use the signed 32-bit counter.
STARTING_INTEGER_RESOURCES: Dict[ResourceType, int] = {
    ResourceType.GOLD: 0,
    ResourceType.GEMS: 0,
    ResourceType.ENERGY: 100,
}

# Big integer resources have no upper bound.
STARTING_BIG_INTEGER_RESOURCES: Dict[ResourceType, int] = {
    ResourceType.STARS: 0,
}

# ---------------------------------------------------------------------------
# Change log

NOTIFICATION_QUEUE_LIMIT = 50
