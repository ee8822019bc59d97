"""Pytest configuration for shared fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from loguru import logger

from deepbook_client.core.tables import TESTNET_POOLS
from deepbook_client.errors import RpcError
from deepbook_client.models import BalanceManager, ObjectMetadata, Ownership
from deepbook_client.registry import DeepBookConfig
from deepbook_client.resolver import ObjectResolver
from deepbook_client.transactions.builder import TransactionBuilder
from deepbook_client.utils import normalize_address

SENDER = normalize_address("0x5e4d")
OWNER_MANAGER_ID = "0x" + "a" * 64
TRADER_MANAGER_ID = "0x" + "d" * 64
TRADE_CAP_ID = "0x" + "b" * 64
COIN_OBJECT_ID = "0x" + "c" * 64
CLOCK_ID = normalize_address("0x6")
# 32 zero bytes in base58
DIGEST = "1" * 32


@pytest.fixture(scope="session", autouse=True)
def silence_loguru_handlers() -> None:
    """Route Loguru output to a no-op sink during tests to avoid closed stream errors."""
    logger.remove()
    logger.add(lambda _: None, catch=True)
    yield


def shared_object(object_id: str, initial_shared_version: int = 1) -> ObjectMetadata:
    return ObjectMetadata(
        object_id=object_id,
        ownership=Ownership.SHARED,
        version=initial_shared_version + 10,
        digest=DIGEST,
        initial_shared_version=initial_shared_version,
    )


def owned_object(object_id: str, version: int = 7) -> ObjectMetadata:
    return ObjectMetadata(
        object_id=object_id,
        ownership=Ownership.ADDRESS_OWNED,
        version=version,
        digest=DIGEST,
    )


@pytest.fixture
def ledger_objects() -> dict[str, ObjectMetadata]:
    """Ledger state keyed by normalized object id; tests may edit it."""
    objects = {pool.address: shared_object(pool.address, 3) for pool in TESTNET_POOLS.values()}
    objects[OWNER_MANAGER_ID] = shared_object(OWNER_MANAGER_ID, 5)
    objects[TRADER_MANAGER_ID] = shared_object(TRADER_MANAGER_ID, 6)
    objects[CLOCK_ID] = shared_object(CLOCK_ID, 1)
    objects[TRADE_CAP_ID] = owned_object(TRADE_CAP_ID, 9)
    objects[COIN_OBJECT_ID] = owned_object(COIN_OBJECT_ID, 12)
    return objects


@pytest.fixture
def ledger(ledger_objects: dict[str, ObjectMetadata]) -> MagicMock:
    """Ledger reader double backed by ``ledger_objects``."""

    async def _get_object_metadata(object_id: str) -> ObjectMetadata:
        try:
            return ledger_objects[object_id]
        except KeyError:
            raise RpcError("sui_getObject", None, f"notExists for {object_id}") from None

    ledger_mock = MagicMock()
    ledger_mock.get_object_metadata = AsyncMock(side_effect=_get_object_metadata)
    ledger_mock.dev_inspect = AsyncMock()
    return ledger_mock


@pytest.fixture
def config() -> DeepBookConfig:
    return DeepBookConfig(
        env="testnet",
        address=SENDER,
        balance_managers={
            "owner": BalanceManager(address=OWNER_MANAGER_ID),
            "trader": BalanceManager(address=TRADER_MANAGER_ID, trade_cap=TRADE_CAP_ID),
        },
    )


@pytest.fixture
def resolver(ledger: MagicMock) -> ObjectResolver:
    return ObjectResolver(ledger)


@pytest.fixture
def builder() -> TransactionBuilder:
    return TransactionBuilder()
