"""Tests for pool call composition."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from conftest import CLOCK_ID, OWNER_MANAGER_ID, owned_object

from deepbook_client.core.constants import MAX_TIMESTAMP
from deepbook_client.core.tables import TESTNET_COINS, TESTNET_POOLS
from deepbook_client.errors import (
    CompositionError,
    IdentifierParseError,
    KeyLookupError,
    OwnershipMismatchError,
)
from deepbook_client.models import ObjectMetadata, OrderType, SelfMatchingOption
from deepbook_client.registry import DeepBookConfig
from deepbook_client.resolver import ObjectResolver
from deepbook_client.transactions.builder import TransactionBuilder
from deepbook_client.transactions.deepbook import DeepBookContract
from deepbook_client.transactions.types import (
    Input,
    MoveCall,
    ObjectInput,
    PureInput,
    Result,
    SharedObjectArg,
)

POOL_ID = TESTNET_POOLS["SUI_DBUSDC"].address


@pytest.fixture
def contract(config: DeepBookConfig, resolver: ObjectResolver) -> DeepBookContract:
    return DeepBookContract(config, resolver)


def _u64(value: int) -> PureInput:
    return PureInput(value=value.to_bytes(8, "little"), move_type="u64")


def _u8(value: int) -> PureInput:
    return PureInput(value=bytes([value]), move_type="u8")


def _bool(value: bool) -> PureInput:
    return PureInput(value=bytes([value]), move_type="bool")


def _shared(object_id: str, version: int, mutable: bool) -> ObjectInput:
    return ObjectInput(
        SharedObjectArg(object_id=object_id, initial_shared_version=version, mutable=mutable)
    )


@pytest.mark.asyncio
async def test_limit_order_arguments_follow_declared_order(
    contract: DeepBookContract, builder: TransactionBuilder, config: DeepBookConfig
) -> None:
    result = await contract.place_limit_order(
        builder,
        pool_key="SUI_DBUSDC",
        manager_key="owner",
        client_order_id="42",
        price="1.5",
        quantity="2",
        is_bid=True,
    )

    assert result == Result(1)
    assert builder.inputs == (
        _shared(POOL_ID, 3, True),
        _shared(OWNER_MANAGER_ID, 5, True),
        _u64(42),
        _u8(OrderType.NO_RESTRICTION),
        _u8(SelfMatchingOption.SELF_MATCHING_ALLOWED),
        _u64(1_500_000),
        _u64(2_000_000_000),
        _bool(True),
        _bool(True),
        _u64(MAX_TIMESTAMP),
        _shared(CLOCK_ID, 1, False),
    )
    proof, order = builder.commands
    assert isinstance(proof, MoveCall) and isinstance(order, MoveCall)
    assert proof.function == "generate_proof_as_owner"
    assert order.target == f"{config.deepbook_package_id}::pool::place_limit_order"
    assert order.arguments == (
        Input(0),
        Input(1),
        Result(0),
        *(Input(index) for index in range(2, 11)),
    )
    assert order.type_arguments == (TESTNET_COINS["SUI"].type, TESTNET_COINS["DBUSDC"].type)


@pytest.mark.asyncio
async def test_limit_order_explicit_options(
    contract: DeepBookContract, builder: TransactionBuilder
) -> None:
    await contract.place_limit_order(
        builder,
        "SUI_DBUSDC",
        "owner",
        client_order_id=7,
        price="2",
        quantity="0.5",
        is_bid=False,
        expiration="1700000000000",
        order_type=OrderType.POST_ONLY,
        self_matching_option=2,
        pay_with_deep=False,
    )

    assert builder.inputs[3] == _u8(3)
    assert builder.inputs[4] == _u8(2)
    assert builder.inputs[7] == _bool(False)
    assert builder.inputs[8] == _bool(False)
    assert builder.inputs[9] == _u64(1_700_000_000_000)


@pytest.mark.asyncio
async def test_delegated_limit_order_adds_trade_cap(
    contract: DeepBookContract, builder: TransactionBuilder
) -> None:
    await contract.place_limit_order(builder, "SUI_DBUSDC", "trader", 1, "1", "1", True)

    proof, order = builder.commands
    assert isinstance(proof, MoveCall) and isinstance(order, MoveCall)
    assert proof.function == "generate_proof_as_trader"
    assert proof.arguments == (Input(1), Input(2))
    assert order.arguments[:3] == (Input(0), Input(1), Result(0))
    assert len(order.arguments) == 12


@pytest.mark.asyncio
async def test_bad_identifier_fails_before_any_fetch(
    contract: DeepBookContract, builder: TransactionBuilder, ledger: MagicMock
) -> None:
    with pytest.raises(CompositionError) as excinfo:
        await contract.place_limit_order(builder, "SUI_DBUSDC", "owner", "12a", "1", "1", True)

    assert isinstance(excinfo.value.__cause__, IdentifierParseError)
    ledger.get_object_metadata.assert_not_awaited()
    assert builder.inputs == ()


@pytest.mark.asyncio
async def test_invalid_order_type(contract: DeepBookContract, builder: TransactionBuilder) -> None:
    with pytest.raises(CompositionError, match="order_type"):
        await contract.place_limit_order(
            builder, "SUI_DBUSDC", "owner", 1, "1", "1", True, order_type=9
        )


@pytest.mark.asyncio
async def test_unknown_pool_key(contract: DeepBookContract, builder: TransactionBuilder) -> None:
    with pytest.raises(CompositionError, match="place_limit_order: NOPE") as excinfo:
        await contract.place_limit_order(builder, "NOPE", "owner", 1, "1", "1", True)

    assert isinstance(excinfo.value.__cause__, KeyLookupError)
    assert excinfo.value.__cause__.kind == "Pool"


@pytest.mark.asyncio
async def test_owned_pool_leaves_builder_unchanged(
    contract: DeepBookContract,
    builder: TransactionBuilder,
    ledger_objects: dict[str, ObjectMetadata],
) -> None:
    await contract.whitelisted(builder, "DEEP_SUI")
    inputs_before, commands_before = builder.inputs, builder.commands
    ledger_objects[POOL_ID] = owned_object(POOL_ID)

    with pytest.raises(CompositionError) as excinfo:
        await contract.place_limit_order(builder, "SUI_DBUSDC", "owner", 1, "1", "1", True)

    assert isinstance(excinfo.value.__cause__, OwnershipMismatchError)
    assert builder.inputs == inputs_before
    assert builder.commands == commands_before


@pytest.mark.asyncio
async def test_two_orders_share_pool_and_clock_inputs(
    contract: DeepBookContract, builder: TransactionBuilder
) -> None:
    await contract.place_limit_order(builder, "SUI_DBUSDC", "owner", 1, "1", "1", True)
    await contract.place_limit_order(builder, "SUI_DBUSDC", "owner", 2, "1.1", "1", False)

    objects = [arg for arg in builder.inputs if isinstance(arg, ObjectInput)]
    assert len(objects) == 3
    second_order = builder.commands[3]
    assert isinstance(second_order, MoveCall)
    assert second_order.arguments[0] == Input(0)
    assert second_order.arguments[2] == Result(2)


@pytest.mark.asyncio
async def test_market_order(contract: DeepBookContract, builder: TransactionBuilder) -> None:
    result = await contract.place_market_order(builder, "DEEP_SUI", "owner", "5", "10", False)

    order = builder.commands[result.index]
    assert isinstance(order, MoveCall)
    assert order.function == "place_market_order"
    assert len(order.arguments) == 9
    # 10 DEEP at six decimals
    assert builder.inputs[4] == _u64(10_000_000)


@pytest.mark.asyncio
async def test_cancel_order_uses_u128_id(
    contract: DeepBookContract, builder: TransactionBuilder
) -> None:
    order_id = 2**100 + 3

    await contract.cancel_order(builder, "SUI_DBUSDC", "owner", str(order_id))

    assert builder.inputs[2] == PureInput(value=order_id.to_bytes(16, "little"), move_type="u128")
    cancel = builder.commands[1]
    assert isinstance(cancel, MoveCall)
    assert cancel.function == "cancel_order"


@pytest.mark.asyncio
async def test_cancel_all_and_withdraw_settled(
    contract: DeepBookContract, builder: TransactionBuilder
) -> None:
    await contract.cancel_all_orders(builder, "SUI_DBUSDC", "owner")
    await contract.withdraw_settled_amounts(builder, "SUI_DBUSDC", "owner")

    functions = [command.function for command in builder.commands if isinstance(command, MoveCall)]
    assert functions == [
        "generate_proof_as_owner",
        "cancel_all_orders",
        "generate_proof_as_owner",
        "withdraw_settled_amounts",
    ]


@pytest.mark.asyncio
async def test_account_open_orders_reads_immutably(
    contract: DeepBookContract, builder: TransactionBuilder
) -> None:
    await contract.account_open_orders(builder, "SUI_DBUSDC", "owner")

    assert builder.inputs == (
        _shared(POOL_ID, 3, False),
        _shared(OWNER_MANAGER_ID, 5, False),
    )
    assert len(builder.commands) == 1


@pytest.mark.asyncio
async def test_mid_price_reads_pool_and_clock(
    contract: DeepBookContract, builder: TransactionBuilder
) -> None:
    result = await contract.mid_price(builder, "SUI_DBUSDC")

    assert result == Result(0)
    assert builder.inputs == (_shared(POOL_ID, 3, False), _shared(CLOCK_ID, 1, False))
