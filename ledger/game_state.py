"""Session singleton owning the resource ledger."""

from __future__ import annotations

import logging
import threading
import uuid
from collections import deque
from datetime import datetime, timezone
from typing import Deque, Dict, List, Optional

from . import config
from .controller import ResourceController
from .errors import UnknownResourceTypeError
from .resource import BIG_INTEGER, INTEGER, BigIntegerResource, IntegerResource
from .resource_types import ResourceType, normalise_resource_type


logger = logging.getLogger(__name__)


class GameState:
    """Central storage for the session's resource balances.

    The controller is created once and re-populated on :meth:`reset`; the
    change log listens on the controller's aggregate signals so it keeps
    working across resets.
    """

    _instance: Optional["GameState"] = None

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._state_version = 0
        self.changes: Deque[Dict[str, object]] = deque(
            maxlen=config.NOTIFICATION_QUEUE_LIMIT
        )
        self.controller: ResourceController[ResourceType] = ResourceController()
        self.controller.resource_integer_updated.connect(self._on_integer_updated)
        self.controller.resource_big_integer_updated.connect(
            self._on_big_integer_updated
        )
        self._initialise_state()

    # ------------------------------------------------------------------
    @classmethod
    def get_instance(cls) -> "GameState":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def reset(self) -> None:
        self._initialise_state()

    def _initialise_state(self) -> None:
        with self._lock:
            self._state_version = 0
            self.changes.clear()
            self.controller.initialize_integer_resources(
                IntegerResource(resource_type, amount)
                for resource_type, amount in config.STARTING_INTEGER_RESOURCES.items()
            )
            self.controller.initialize_big_integer_resources(
                BigIntegerResource(resource_type, amount)
                for resource_type, amount in config.STARTING_BIG_INTEGER_RESOURCES.items()
            )
        logger.info(
            "Ledger initialised integer=%s big_integer=%s",
            [resource.value for resource in self.controller.integer_types()],
            [resource.value for resource in self.controller.big_integer_types()],
        )

    # ------------------------------------------------------------------
    def _on_integer_updated(
        self, resource_type: ResourceType, old_amount: int, new_amount: int, initiator: object
    ) -> None:
        self._record_change(INTEGER.name, resource_type, old_amount, new_amount, initiator)

    def _on_big_integer_updated(
        self, resource_type: ResourceType, old_amount: int, new_amount: int, initiator: object
    ) -> None:
        self._record_change(BIG_INTEGER.name, resource_type, old_amount, new_amount, initiator)

    def _record_change(
        self,
        kind: str,
        resource_type: ResourceType,
        old_amount: int,
        new_amount: int,
        initiator: object,
    ) -> None:
        with self._lock:
            self._state_version += 1
            self.changes.append(
                {
                    "resource": resource_type.value,
                    "kind": kind,
                    "old_amount": old_amount,
                    "new_amount": new_amount,
                    "delta": new_amount - old_amount,
                    "initiator": _describe_initiator(initiator),
                    "version": self._state_version,
                }
            )

    def consume_change(self) -> Optional[Dict[str, object]]:
        with self._lock:
            if not self.changes:
                return None
            return self.changes.popleft()

    def list_changes(self) -> List[Dict[str, object]]:
        with self._lock:
            return list(self.changes)

    # ------------------------------------------------------------------
    def resolve_type(self, resource_type: ResourceType | str) -> ResourceType:
        try:
            return normalise_resource_type(resource_type)
        except KeyError:
            raise UnknownResourceTypeError(resource_type) from None

    def add(
        self, resource_type: ResourceType | str, amount: int, initiator: object = None
    ) -> int:
        """Add ``amount`` to ``resource_type`` and return the new balance."""

        canonical = self.resolve_type(resource_type)
        with self._lock:
            before = self.controller.get_amount(canonical)
            self.controller.add_amount(canonical, amount, initiator)
            after = self.controller.get_amount(canonical)
        logger.info(
            "Resource add resource=%s amount=%s before=%s after=%s initiator=%s",
            canonical.value,
            amount,
            before,
            after,
            _describe_initiator(initiator),
        )
        return after

    def spend(
        self, resource_type: ResourceType | str, amount: int, initiator: object = None
    ) -> int:
        """Spend ``amount`` of ``resource_type`` and return the new balance."""

        canonical = self.resolve_type(resource_type)
        with self._lock:
            before = self.controller.get_amount(canonical)
            self.controller.spend_amount(canonical, amount, initiator)
            after = self.controller.get_amount(canonical)
        if after == 0 and before < amount:
            logger.info(
                "Resource spend clamped resource=%s requested=%s available=%s",
                canonical.value,
                amount,
                before,
            )
        logger.info(
            "Resource spend resource=%s amount=%s before=%s after=%s initiator=%s",
            canonical.value,
            amount,
            before,
            after,
            _describe_initiator(initiator),
        )
        return after

    def has(self, resource_type: ResourceType | str, amount: int) -> bool:
        canonical = self.resolve_type(resource_type)
        with self._lock:
            return self.controller.has_amount(canonical, amount)

    def amount(self, resource_type: ResourceType | str) -> int:
        canonical = self.resolve_type(resource_type)
        with self._lock:
            return self.controller.get_amount(canonical)

    # ------------------------------------------------------------------
    def resources_snapshot(self) -> Dict[str, int]:
        with self._lock:
            snapshot = self.controller.snapshot()
        resources: Dict[str, int] = {}
        for amounts in snapshot.values():
            for resource_type, amount in amounts.items():
                resources[resource_type.value] = amount
        return resources

    def kinds_snapshot(self) -> Dict[str, str]:
        with self._lock:
            snapshot = self.controller.snapshot()
        return {
            resource_type.value: kind
            for kind, amounts in snapshot.items()
            for resource_type in amounts
        }

    def snapshot_state(self) -> Dict[str, object]:
        with self._lock:
            version = int(self._state_version)
            payload: Dict[str, object] = {
                "resources": self.resources_snapshot(),
                "kinds": self.kinds_snapshot(),
                "changes": self.list_changes(),
            }
        payload.update(self.response_metadata(version))
        return payload

    def response_metadata(self, version: Optional[int] = None) -> Dict[str, object]:
        if version is None:
            with self._lock:
                version_value = int(self._state_version)
        else:
            version_value = int(version)
        timestamp = (
            datetime.now(timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z")
        )
        return {
            "request_id": uuid.uuid4().hex,
            "server_time": timestamp,
            "version": version_value,
        }


def _describe_initiator(initiator: object) -> Optional[str]:
    if initiator is None or isinstance(initiator, str):
        return initiator
    return type(initiator).__name__


def get_game_state() -> GameState:
    return GameState.get_instance()
