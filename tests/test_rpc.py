"""Tests for the Sui JSON-RPC client."""

from __future__ import annotations

import base64
import json
from typing import Any

import httpx
import pytest

from deepbook_client.errors import RpcError, RpcTransportError
from deepbook_client.models import Ownership
from deepbook_client.rpc import SuiRpcClient, parse_owner

URL = "http://fullnode.test"
OBJECT_ID = "0x" + "a" * 64


def _client(handler) -> SuiRpcClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SuiRpcClient(URL, http_client=http)


def _reply(result: Any) -> httpx.Response:
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": result})


def _object(owner: Any) -> dict[str, Any]:
    return {"data": {"objectId": OBJECT_ID, "version": "42", "digest": "D1G", "owner": owner}}


@pytest.mark.parametrize(
    ("owner", "ownership", "initial_version"),
    [
        ({"Shared": {"initial_shared_version": 8}}, Ownership.SHARED, 8),
        ({"AddressOwner": "0x1"}, Ownership.ADDRESS_OWNED, None),
        ({"ObjectOwner": "0x1"}, Ownership.OBJECT_OWNED, None),
        ("Immutable", Ownership.IMMUTABLE, None),
    ],
)
def test_parse_owner(owner: Any, ownership: Ownership, initial_version: int | None) -> None:
    assert parse_owner(owner) == (ownership, initial_version)


def test_parse_owner_rejects_unknown_shapes() -> None:
    with pytest.raises(RpcTransportError):
        parse_owner({"Mystery": {}})


@pytest.mark.asyncio
async def test_get_object_metadata_requests_owner() -> None:
    requests: list[dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(json.loads(request.content))
        return _reply(_object({"Shared": {"initial_shared_version": "8"}}))

    async with _client(handler) as client:
        metadata = await client.get_object_metadata(OBJECT_ID)

    assert requests[0]["method"] == "sui_getObject"
    assert requests[0]["params"] == [OBJECT_ID, {"showOwner": True}]
    assert metadata.ownership is Ownership.SHARED
    assert metadata.version == 42
    assert metadata.initial_shared_version == 8
    assert metadata.digest == "D1G"


@pytest.mark.asyncio
async def test_missing_object_is_an_rpc_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return _reply({"error": {"code": "notExists", "object_id": OBJECT_ID}})

    async with _client(handler) as client:
        with pytest.raises(RpcError, match="notExists"):
            await client.get_object_metadata(OBJECT_ID)


@pytest.mark.asyncio
async def test_json_rpc_error_object() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32602, "message": "bad"}}
        )

    async with _client(handler) as client:
        with pytest.raises(RpcError) as excinfo:
            await client.call("sui_getObject", [OBJECT_ID])

    assert excinfo.value.code == -32602
    assert excinfo.value.method == "sui_getObject"


@pytest.mark.asyncio
async def test_http_failure_is_a_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    async with _client(handler) as client:
        with pytest.raises(RpcTransportError):
            await client.get_object_metadata(OBJECT_ID)


@pytest.mark.asyncio
async def test_non_json_reply_is_a_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>")

    async with _client(handler) as client:
        with pytest.raises(RpcTransportError):
            await client.call("sui_getObject", [])


@pytest.mark.asyncio
async def test_malformed_object_data() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return _reply({"data": {"objectId": OBJECT_ID, "owner": "Immutable"}})

    async with _client(handler) as client:
        with pytest.raises(RpcTransportError, match="Malformed"):
            await client.get_object_metadata(OBJECT_ID)


@pytest.mark.asyncio
async def test_dev_inspect_sends_base64_transaction() -> None:
    requests: list[dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(json.loads(request.content))
        return _reply({"results": []})

    async with _client(handler) as client:
        response = await client.dev_inspect("0x1", b"\x00\x01")

    assert response == {"results": []}
    params = requests[0]["params"]
    assert requests[0]["method"] == "sui_devInspectTransactionBlock"
    assert params[0] == "0x1"
    assert base64.b64decode(params[1]) == b"\x00\x01"
    assert params[2:] == [None, None]


@pytest.mark.asyncio
async def test_injected_http_client_is_not_closed() -> None:
    http = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: _reply({})))
    client = SuiRpcClient(URL, http_client=http)

    await client.aclose()

    assert not http.is_closed
    await http.aclose()
