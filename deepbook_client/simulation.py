"""Read-only execution of composed transactions through dev-inspect."""

from __future__ import annotations

from typing import Any

from loguru import logger

from deepbook_client.bcs import BcsType, decode
from deepbook_client.errors import (
    DecodeError,
    MissingCallResultError,
    MissingReturnValueError,
    NoResultsError,
    SimulationFailedError,
)
from deepbook_client.rpc import LedgerReader
from deepbook_client.transactions.builder import TransactionBuilder
from deepbook_client.transactions.serialize import serialize_transaction_kind
from deepbook_client.utils import normalize_address


def _execution_error(response: dict[str, Any]) -> str | None:
    error = response.get("error")
    if error:
        return str(error)
    status = (response.get("effects") or {}).get("status") or {}
    if status.get("status") == "failure":
        return str(status.get("error") or "execution failed")
    return None


def first_return_value(response: dict[str, Any]) -> bytes:
    """Extract the raw bytes of the first value returned by the first command.

    Raises:
        NoResultsError: If the response carries no ``results`` at all.
        MissingCallResultError: If ``results`` has no entry for the first command.
        MissingReturnValueError: If the first command returned nothing.
        DecodeError: If the results or the value are malformed.
    """
    results = response.get("results")
    if results is None:
        raise NoResultsError("Dry run returned no results")
    if not isinstance(results, list):
        raise DecodeError(f"Dry run results must be a list, got {results!r}")
    if not results:
        raise MissingCallResultError("Dry run has no result for the first command")
    first = results[0]
    if not isinstance(first, dict):
        raise DecodeError(f"Malformed result for the first command: {first!r}")
    return_values = first.get("returnValues") or []
    if not return_values:
        raise MissingReturnValueError("First command returned no values")
    try:
        return bytes(return_values[0][0])
    except (IndexError, KeyError, TypeError, ValueError) as exc:
        raise DecodeError(f"Malformed return value: {return_values[0]!r}") from exc


class SimulationExecutor:
    """Dry-runs finished transactions as ``sender`` and decodes their results."""

    def __init__(self, ledger: LedgerReader, sender: str) -> None:
        self.ledger = ledger
        self.sender = normalize_address(sender)

    async def inspect(self, builder: TransactionBuilder) -> dict[str, Any]:
        """Finish ``builder`` and dry-run it, returning the raw dev-inspect response.

        Raises:
            SimulationFailedError: If the ledger reports an execution error.
        """
        transaction = builder.finish()
        tx_bytes = serialize_transaction_kind(transaction)
        logger.info(
            "Simulating {} command(s) as {}", len(transaction.commands), self.sender
        )
        response = await self.ledger.dev_inspect(self.sender, tx_bytes)
        error = _execution_error(response)
        if error is not None:
            logger.warning("Simulation failed: {}", error)
            raise SimulationFailedError(error)
        return response

    async def simulate(self, builder: TransactionBuilder, shape: BcsType) -> Any:
        """Dry-run ``builder`` and decode the first return value of the first command."""
        response = await self.inspect(builder)
        raw = first_return_value(response)
        try:
            value = decode(shape, raw)
        except DecodeError as exc:
            raise DecodeError(f"Could not decode return value as {shape!r}: {exc}") from exc
        logger.debug("Decoded {} from {} bytes", shape, len(raw))
        return value
