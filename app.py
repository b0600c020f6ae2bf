import logging
import time
import uuid
from datetime import datetime, timezone

from flask import Flask, jsonify, request

from api import ui_bridge

app = Flask(__name__)

logger = logging.getLogger(__name__)


def _generate_request_metadata() -> tuple[str, str]:
    request_id = str(uuid.uuid4())
    server_time = datetime.now(timezone.utc).isoformat()
    return request_id, server_time


def _enrich_payload(payload: dict, request_id: str, server_time: str) -> dict:
    body = dict(payload or {})
    body["request_id"] = request_id
    body["server_time"] = server_time
    nested_state = body.get("state")
    if isinstance(nested_state, dict):
        nested_copy = dict(nested_state)
        nested_copy.setdefault("request_id", request_id)
        nested_copy.setdefault("server_time", server_time)
        body["state"] = nested_copy
    return body


def _json_response(payload: dict, status: int = 200, *, request_id: str, server_time: str):
    body = _enrich_payload(payload, request_id, server_time)
    response = jsonify(body)
    response.status_code = status
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"
    return response


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return {}
    return payload


def _status_for(response: dict) -> int:
    if response.get("ok", False):
        return 200
    return int(response.get("http_status", 400))


@app.post("/api/init")
def api_init():
    """Initialise the ledger, optionally forcing a reset."""

    reset_flag = request.args.get("reset")
    if reset_flag is None:
        payload = _json_body()
        reset_flag = payload.get("reset")
        if reset_flag is None:
            reset_flag = payload.get("force_reset")

    response = ui_bridge.init_game(reset_flag)
    request_id, server_time = _generate_request_metadata()
    return _json_response(response, request_id=request_id, server_time=server_time)


@app.get("/api/state")
def api_state():
    """Return every balance together with the recent change log."""

    response = ui_bridge.get_state()
    request_id, server_time = _generate_request_metadata()
    return _json_response(response, request_id=request_id, server_time=server_time)


@app.get("/api/changes")
def api_changes():
    response = ui_bridge.get_changes()
    request_id, server_time = _generate_request_metadata()
    return _json_response(response, request_id=request_id, server_time=server_time)


@app.get("/api/resources/<resource_id>")
def api_check_resource(resource_id: str):
    """Return the balance of a resource and whether it covers ``?amount=``."""

    response = ui_bridge.check_resource(resource_id, request.args.get("amount"))
    request_id, server_time = _generate_request_metadata()
    return _json_response(
        response,
        _status_for(response),
        request_id=request_id,
        server_time=server_time,
    )


def _handle_mutation(operation: str, resource_id: str):
    payload = _json_body()
    amount = payload.get("amount")
    initiator = payload.get("initiator")
    request_id, server_time = _generate_request_metadata()
    logger.info(
        "Resource handler enter route=/api/resources/%s/%s request_id=%s amount=%s initiator=%s timestamp=%s",
        resource_id,
        operation,
        request_id,
        amount,
        initiator,
        server_time,
    )
    start = time.perf_counter()
    if operation == "add":
        response = ui_bridge.add_resource(resource_id, amount, initiator)
    else:
        response = ui_bridge.spend_resource(resource_id, amount, initiator)
    status = _status_for(response)
    duration_ms = (time.perf_counter() - start) * 1000.0
    logger.info(
        "Resource handler exit route=/api/resources/%s/%s request_id=%s before=%s after=%s status=%s error_code=%s duration_ms=%.2f",
        resource_id,
        operation,
        request_id,
        response.get("before"),
        response.get("after"),
        status,
        response.get("error_code"),
        duration_ms,
    )
    return _json_response(
        response,
        status,
        request_id=request_id,
        server_time=server_time,
    )


@app.post("/api/resources/<resource_id>/add")
def api_add_resource(resource_id: str):
    """Add ``amount`` to a resource."""

    return _handle_mutation("add", resource_id)


@app.post("/api/resources/<resource_id>/spend")
def api_spend_resource(resource_id: str):
    """Spend ``amount`` of a resource; the balance never drops below zero."""

    return _handle_mutation("spend", resource_id)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(debug=True)
