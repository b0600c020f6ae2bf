"""Public API between the UI layer and the resource ledger."""
from __future__ import annotations

from typing import Dict

from ledger.errors import InvalidAmountError, UnknownResourceTypeError
from ledger.game_state import get_game_state


def _success_response(**payload: object) -> Dict[str, object]:
    response: Dict[str, object] = {"ok": True}
    response.update(payload)
    return response


def _error_response(
    code: str, message: str, *, http_status: int | None = None
) -> Dict[str, object]:
    payload: Dict[str, object] = {
        "ok": False,
        "error_code": code,
        "error_message": message,
        "error": message,
    }
    if http_status is not None:
        payload["http_status"] = int(http_status)
    return payload


def _should_reset(flag: object) -> bool:
    if flag is None:
        return True
    if isinstance(flag, str):
        return flag.strip().lower() not in {"0", "false", "no"}
    return bool(flag)


def _parse_amount(value: object) -> int:
    """Convert a request amount into an ``int`` or raise ``ValueError``."""

    if isinstance(value, bool) or value is None:
        raise ValueError(f"The amount must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"The amount must be an integer, got {value!r}")
        return int(value)
    if isinstance(value, str):
        return int(value.strip())
    raise ValueError(f"The amount must be an integer, got {value!r}")


def _state_payload(state) -> Dict[str, object]:
    return state.snapshot_state()


# ---------------------------------------------------------------------------
# Initialisation and snapshots


def init_game(force_reset: object = None) -> Dict[str, object]:
    """Initialise or reset the ledger using configuration defaults."""

    state = get_game_state()
    if _should_reset(force_reset):
        state.reset()
    return _success_response(**_state_payload(state))


def get_state() -> Dict[str, object]:
    """Return a snapshot of every balance and the recent change log."""

    state = get_game_state()
    return _success_response(**_state_payload(state))


def get_changes() -> Dict[str, object]:
    state = get_game_state()
    return _success_response(changes=state.list_changes(), **state.response_metadata())


# ---------------------------------------------------------------------------
# Balance operations


def _mutate(
    operation: str, resource_id: str, amount: object, initiator: object
) -> Dict[str, object]:
    state = get_game_state()
    try:
        value = _parse_amount(amount)
    except (TypeError, ValueError):
        error = _error_response(
            "invalid_amount",
            f"The amount must be an integer, got {amount!r}",
            http_status=400,
        )
        error.update(state.response_metadata())
        return error

    mutate = state.add if operation == "add" else state.spend
    try:
        before = state.amount(resource_id)
        after = mutate(resource_id, value, initiator)
    except UnknownResourceTypeError as exc:
        error = _error_response("unknown_resource", str(exc), http_status=404)
        error.update(state.response_metadata())
        return error
    except InvalidAmountError as exc:
        error = _error_response("invalid_amount", str(exc), http_status=400)
        error.update(state.response_metadata())
        return error
    except OverflowError as exc:
        error = _error_response("amount_overflow", str(exc), http_status=409)
        error.update(state.response_metadata())
        return error

    canonical = state.resolve_type(resource_id)
    payload: Dict[str, object] = {
        "resource": canonical.value,
        "operation": operation,
        "amount": value,
        "before": before,
        "after": after,
        "state": _state_payload(state),
        "http_status": 200,
    }
    payload.update(state.response_metadata())
    return _success_response(**payload)


def add_resource(
    resource_id: str, amount: object, initiator: object = None
) -> Dict[str, object]:
    return _mutate("add", resource_id, amount, initiator)


def spend_resource(
    resource_id: str, amount: object, initiator: object = None
) -> Dict[str, object]:
    return _mutate("spend", resource_id, amount, initiator)


def check_resource(resource_id: str, amount: object = None) -> Dict[str, object]:
    """Report the balance of ``resource_id`` and whether it covers ``amount``."""

    state = get_game_state()
    try:
        value = 0 if amount is None else _parse_amount(amount)
    except (TypeError, ValueError):
        error = _error_response(
            "invalid_amount",
            f"The amount must be an integer, got {amount!r}",
            http_status=400,
        )
        error.update(state.response_metadata())
        return error

    try:
        current = state.amount(resource_id)
        has_amount = state.has(resource_id, value)
    except UnknownResourceTypeError as exc:
        error = _error_response("unknown_resource", str(exc), http_status=404)
        error.update(state.response_metadata())
        return error

    canonical = state.resolve_type(resource_id)
    payload: Dict[str, object] = {
        "resource": canonical.value,
        "amount": current,
        "requested": value,
        "has_amount": has_amount,
        "http_status": 200,
    }
    payload.update(state.response_metadata())
    return _success_response(**payload)
