"""Tests for the fake JSON-RPC node."""

import pytest

from .sample_rpc import create_app


@pytest.fixture
def client():
    return create_app().test_client()


def call(client, method, params=None, request_id=1):
    return client.post("/", json={"jsonrpc": "2.0", "id": request_id, "method": method, "params": params or []})


def test_block_number(client):
    resp = call(client, "eth_blockNumber")
    assert resp.status_code == 200
    assert resp.get_json() == {"jsonrpc": "2.0", "id": 1, "result": "0x10"}


def test_latest_block_advances(client):
    first = call(client, "eth_getBlockByNumber", ["latest", False]).get_json()["result"]
    second = call(client, "eth_getBlockByNumber", ["latest", False], request_id=2).get_json()["result"]
    assert int(second["number"], 16) == int(first["number"], 16) + 1


def test_unknown_method(client):
    body = call(client, "eth_sendRawTransaction").get_json()
    assert body["error"]["code"] == -32601


def test_invalid_body(client):
    resp = client.post("/", data="not json", content_type="application/json")
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == -32700


def test_forced_failures(client):
    client.post("/settings", json={"failure_rate": 1.0})
    resp = call(client, "eth_blockNumber")
    assert resp.status_code == 503


def test_unknown_setting_rejected(client):
    resp = client.post("/settings", json={"colour": "blue"})
    assert resp.status_code == 400


def test_health_counts_calls(client):
    call(client, "eth_blockNumber")
    assert client.get("/health").get_json()["calls"] == 1
