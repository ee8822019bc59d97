"""Sui fullnode JSON-RPC access used for object resolution and dry runs."""

from __future__ import annotations

import base64
import itertools
from typing import Any, Protocol

import httpx
from loguru import logger

from deepbook_client.errors import AddressParseError, RpcError, RpcTransportError
from deepbook_client.models import ObjectMetadata, Ownership
from deepbook_client.utils import normalize_address


class LedgerReader(Protocol):
    """Read-only view of the remote object ledger."""

    async def get_object_metadata(self, object_id: str) -> ObjectMetadata:
        """Fetch ownership, version and digest of one object."""

    async def dev_inspect(self, sender: str, tx_bytes: bytes) -> dict[str, Any]:
        """Dry-run a serialized transaction kind without committing it."""


def parse_owner(owner: Any) -> tuple[Ownership, int | None]:
    """Map the ``owner`` field of an object response to an ownership kind."""
    if owner == "Immutable":
        return Ownership.IMMUTABLE, None
    if isinstance(owner, dict):
        if "Shared" in owner:
            return Ownership.SHARED, int(owner["Shared"]["initial_shared_version"])
        if "AddressOwner" in owner:
            return Ownership.ADDRESS_OWNED, None
        if "ObjectOwner" in owner:
            return Ownership.OBJECT_OWNED, None
    raise RpcTransportError(f"Unrecognised object owner: {owner!r}")


class SuiRpcClient:
    """Minimal async JSON-RPC 2.0 client for a Sui fullnode."""

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Create a client.

        Args:
            url: Fullnode JSON-RPC endpoint
            timeout: Per-request timeout in seconds
            http_client: Optional injected HTTP client (primarily for testing)
        """
        self.url = url
        self.timeout = timeout
        self._http = http_client or httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None
        self._ids = itertools.count(1)

    async def __aenter__(self) -> SuiRpcClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    async def call(self, method: str, params: list[Any]) -> Any:
        """Send one JSON-RPC request and return its ``result`` member.

        Raises:
            RpcTransportError: On network failures, HTTP errors or malformed replies.
            RpcError: When the node answers with a JSON-RPC error object.
        """
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        logger.debug("RPC {} -> {}", method, self.url)
        try:
            response = await self._http.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as exc:
            raise RpcTransportError(f"{method} request to {self.url} failed: {exc}") from exc
        except ValueError as exc:
            raise RpcTransportError(f"{method} returned a non-JSON response") from exc

        if not isinstance(body, dict):
            raise RpcTransportError(f"{method} returned an unexpected payload: {body!r}")
        error = body.get("error")
        if error is not None:
            raise RpcError(method, error.get("code"), error.get("message", str(error)))
        if "result" not in body:
            raise RpcTransportError(f"{method} response has neither result nor error")
        return body["result"]

    async def get_object_metadata(self, object_id: str) -> ObjectMetadata:
        """Fetch an object's ownership, version and digest via ``sui_getObject``."""
        result = await self.call("sui_getObject", [object_id, {"showOwner": True}])
        if not isinstance(result, dict):
            raise RpcTransportError(f"sui_getObject returned an unexpected payload: {result!r}")
        if result.get("error") is not None:
            error = result["error"]
            raise RpcError("sui_getObject", None, f"{error.get('code', 'error')} for {object_id}")

        data = result.get("data")
        if not data:
            raise RpcTransportError(f"sui_getObject returned no data for {object_id}")
        try:
            ownership, initial_shared_version = parse_owner(data.get("owner"))
            return ObjectMetadata(
                object_id=normalize_address(data["objectId"]),
                ownership=ownership,
                version=int(data["version"]),
                digest=data["digest"],
                initial_shared_version=initial_shared_version,
            )
        except (AddressParseError, KeyError, TypeError, ValueError) as exc:
            raise RpcTransportError(f"Malformed object data for {object_id}: {data!r}") from exc

    async def dev_inspect(self, sender: str, tx_bytes: bytes) -> dict[str, Any]:
        """Run ``sui_devInspectTransactionBlock`` on BCS ``TransactionKind`` bytes."""
        encoded = base64.b64encode(tx_bytes).decode("ascii")
        result = await self.call("sui_devInspectTransactionBlock", [sender, encoded, None, None])
        if not isinstance(result, dict):
            raise RpcTransportError(
                f"sui_devInspectTransactionBlock returned an unexpected payload: {result!r}"
            )
        return result
