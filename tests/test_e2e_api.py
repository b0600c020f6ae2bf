"""End-to-end API verification for the ledger HTTP endpoints."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import app
from ledger import config
from ledger.resource_types import ResourceType


@pytest.fixture()
def client():
    app.config.update(TESTING=True)
    with app.test_client() as test_client:
        test_client.post("/api/init?reset=1")
        yield test_client


def _assert_starting_resources(resources: Dict[str, int]) -> None:
    for resource_type in ResourceType:
        amount = resources.get(resource_type.value)
        assert amount is not None, f"Missing resource {resource_type.value}"
        expected = config.STARTING_INTEGER_RESOURCES.get(
            resource_type, config.STARTING_BIG_INTEGER_RESOURCES.get(resource_type)
        )
        assert amount == expected, (
            f"Expected {resource_type.value} to start at {expected}, got {amount}"
        )


def test_init_returns_starting_balances(client):
    response = client.post("/api/init?reset=1")
    assert response.status_code == 200
    payload = response.get_json()
    assert payload["ok"] is True
    assert payload["request_id"]
    assert payload["server_time"]
    assert response.headers["Cache-Control"].startswith("no-store")
    _assert_starting_resources(payload["resources"])


def test_gold_round_trip_over_http(client):
    added = client.post("/api/resources/gold/add", json={"amount": 100})
    assert added.status_code == 200
    assert added.get_json()["after"] == 100

    spent = client.post("/api/resources/GOLD/spend", json={"amount": 30})
    assert spent.get_json()["after"] == 70

    floored = client.post(
        "/api/resources/gold/spend", json={"amount": 1000, "initiator": "shop"}
    )
    assert floored.status_code == 200
    assert floored.get_json()["after"] == 0

    check = client.get("/api/resources/gold?amount=0").get_json()
    assert check["has_amount"] is True
    check = client.get("/api/resources/gold?amount=1").get_json()
    assert check["has_amount"] is False

    changes = client.get("/api/changes").get_json()["changes"]
    assert [change["new_amount"] for change in changes] == [100, 70, 0]
    assert changes[-1]["initiator"] == "shop"


def test_unknown_resource_is_not_found(client):
    response = client.post("/api/resources/wood/add", json={"amount": 1})
    assert response.status_code == 404
    payload = response.get_json()
    assert payload["ok"] is False
    assert payload["error_code"] == "unknown_resource"

    lookup = client.get("/api/resources/wood")
    assert lookup.status_code == 404


def test_negative_amount_is_bad_request(client):
    response = client.post("/api/resources/energy/spend", json={"amount": -1})
    assert response.status_code == 400
    assert response.get_json()["error_code"] == "invalid_amount"

    state = client.get("/api/state").get_json()
    assert state["resources"]["ENERGY"] == config.STARTING_INTEGER_RESOURCES[ResourceType.ENERGY]


def test_missing_amount_is_bad_request(client):
    response = client.post("/api/resources/gold/add", json={})
    assert response.status_code == 400
    assert response.get_json()["error_code"] == "invalid_amount"


def test_integer_overflow_is_conflict(client):
    response = client.post("/api/resources/gems/add", json={"amount": 2**31})
    assert response.status_code == 409
    assert response.get_json()["error_code"] == "amount_overflow"


def test_big_integer_resource_accepts_large_amounts(client):
    response = client.post("/api/resources/stars/add", json={"amount": 10**25})
    assert response.status_code == 200
    assert response.get_json()["after"] == 10**25
    state = client.get("/api/state").get_json()
    assert state["kinds"]["STARS"] == "big_integer"


@pytest.mark.parametrize("body", [{"reset": False}, {"force_reset": False}])
def test_init_with_false_flag_keeps_balances(client, body):
    client.post("/api/resources/gold/add", json={"amount": 40})
    response = client.post("/api/init", json=body)
    assert response.status_code == 200
    assert response.get_json()["resources"]["GOLD"] == 40


def test_init_with_true_flag_resets_balances(client):
    client.post("/api/resources/gold/add", json={"amount": 40})
    response = client.post("/api/init", json={"reset": True})
    assert response.get_json()["resources"]["GOLD"] == 0


@pytest.mark.parametrize("path", ["/api/resources/gold/add", "/api/resources/gold/spend"])
def test_non_object_body_is_bad_request(client, path):
    response = client.post(path, json=[1])
    assert response.status_code == 400
    assert response.get_json()["error_code"] == "invalid_amount"


def test_init_with_non_object_body_resets(client):
    client.post("/api/resources/gold/add", json={"amount": 40})
    response = client.post("/api/init", json=[1])
    assert response.status_code == 200
    assert response.get_json()["resources"]["GOLD"] == 0
