"""Balance manager calls: account lifecycle, funds and trade proofs."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from loguru import logger

from deepbook_client.amounts import AmountLike, to_units
from deepbook_client.core.constants import SUI_FRAMEWORK_ADDRESS
from deepbook_client.errors import CompositionError
from deepbook_client.models import BalanceManager, Coin, DelegatedAccess, OwnerAccess
from deepbook_client.registry import DeepBookConfig
from deepbook_client.transactions.builder import (
    COIN,
    OBJECT,
    RESULT,
    Signature,
    TransactionBuilder,
    composing,
)
from deepbook_client.transactions.serialize import StructTag, parse_type_tag
from deepbook_client.transactions.types import Argument, Input, NestedResult, Result
from deepbook_client.utils import normalize_address

if TYPE_CHECKING:
    from deepbook_client.resolver import ObjectResolver

MODULE = "balance_manager"

SIGNATURES: dict[str, Signature] = {
    "new": (),
    "deposit": (OBJECT, COIN),
    "withdraw": (OBJECT, "u64"),
    "withdraw_all": (OBJECT,),
    "balance": (OBJECT,),
    "generate_proof_as_owner": (OBJECT,),
    "generate_proof_as_trader": (OBJECT, OBJECT),
    "owner": (OBJECT,),
    "id": (OBJECT,),
    "mint_trade_cap": (OBJECT,),
}

_SUI_TYPE = StructTag(normalize_address(SUI_FRAMEWORK_ADDRESS), "sui", "SUI")


def _call(
    builder: TransactionBuilder,
    package_id: str,
    function: str,
    arguments: Sequence[Argument] = (),
    type_arguments: Sequence[str] = (),
) -> Result:
    return builder.move_call(
        f"{package_id}::{MODULE}::{function}",
        arguments,
        type_arguments,
        signature=SIGNATURES[function],
    )


def derive_proof(
    builder: TransactionBuilder,
    package_id: str,
    manager_arg: Argument,
    trade_cap_arg: Argument | None = None,
) -> Result:
    """Append the call that proves authority over a balance manager.

    Owners prove directly; delegated traders present their trade cap. The
    returned reference is the ``TradeProof`` consumed by the next pool call.
    """
    if trade_cap_arg is None:
        return _call(builder, package_id, "generate_proof_as_owner", [manager_arg])
    return _call(builder, package_id, "generate_proof_as_trader", [manager_arg, trade_cap_arg])


def is_sui(coin: Coin) -> bool:
    """Return True when ``coin`` is the native gas coin."""
    return parse_type_tag(coin.type) == _SUI_TYPE


class BalanceManagerContract:
    """Composes ``balance_manager`` module calls into a transaction builder."""

    def __init__(self, config: DeepBookConfig, resolver: ObjectResolver) -> None:
        self.config = config
        self.resolver = resolver

    @property
    def package_id(self) -> str:
        return self.config.deepbook_package_id

    async def manager_input(
        self, builder: TransactionBuilder, manager: BalanceManager, mutable: bool = True
    ) -> Input:
        """Resolve the shared manager object and add it as an input."""
        return builder.object(await self.resolver.resolve_shared(manager.address, mutable))

    async def manager_and_proof(
        self, builder: TransactionBuilder, manager: BalanceManager
    ) -> tuple[Input, Result]:
        """Add the manager input followed by its trade proof."""
        manager_arg = await self.manager_input(builder, manager)
        match manager.access:
            case DelegatedAccess(trade_cap=trade_cap):
                cap_arg = builder.object(await self.resolver.resolve_owned(trade_cap))
                proof = derive_proof(builder, self.package_id, manager_arg, cap_arg)
            case OwnerAccess():
                proof = derive_proof(builder, self.package_id, manager_arg)
        return manager_arg, proof

    def _recipient(self, builder: TransactionBuilder, recipient: str | None) -> Input:
        return builder.pure(normalize_address(recipient or self.config.address), "address")

    def create_and_share_balance_manager(self, builder: TransactionBuilder) -> None:
        """Create a new balance manager and share it."""
        with composing(builder, "create_and_share_balance_manager", self.config.address):
            manager = _call(builder, self.package_id, "new")
            builder.move_call(
                f"{SUI_FRAMEWORK_ADDRESS}::transfer::public_share_object",
                [manager],
                [f"{self.package_id}::{MODULE}::BalanceManager"],
                signature=(RESULT,),
            )

    async def deposit_into_manager(
        self,
        builder: TransactionBuilder,
        manager_key: str,
        coin_key: str,
        amount: AmountLike,
        coin_object_id: str | None = None,
    ) -> None:
        """Deposit ``amount`` of a coin into a balance manager.

        SUI is split off the gas coin unless ``coin_object_id`` is given; any
        other coin is split off the owned coin object ``coin_object_id``.
        """
        operation = "deposit_into_manager"
        with composing(builder, operation, manager_key):
            manager = self.config.require_balance_manager(manager_key)
            coin = self.config.require_coin(coin_key)
            units = to_units(amount, coin)
            if coin_object_id is None and not is_sui(coin):
                raise CompositionError(operation, f"{coin_key} deposits need a coin object id")

            manager_arg = await self.manager_input(builder, manager)
            if coin_object_id is None:
                source: Argument = builder.gas()
            else:
                source = builder.object(await self.resolver.resolve_owned(coin_object_id))
            split = builder.split_coins(source, [builder.pure(units, "u64")])
            _call(
                builder,
                self.package_id,
                "deposit",
                [manager_arg, NestedResult(split.index, 0)],
                [coin.type],
            )

    async def withdraw_from_manager(
        self,
        builder: TransactionBuilder,
        manager_key: str,
        coin_key: str,
        amount: AmountLike,
        recipient: str | None = None,
    ) -> None:
        """Withdraw ``amount`` of a coin and send it to ``recipient`` (default: caller)."""
        with composing(builder, "withdraw_from_manager", manager_key):
            manager = self.config.require_balance_manager(manager_key)
            coin = self.config.require_coin(coin_key)
            units = to_units(amount, coin)
            manager_arg = await self.manager_input(builder, manager)
            withdrawn = _call(
                builder,
                self.package_id,
                "withdraw",
                [manager_arg, builder.pure(units, "u64")],
                [coin.type],
            )
            builder.transfer_objects([withdrawn], self._recipient(builder, recipient))

    async def withdraw_all_from_manager(
        self,
        builder: TransactionBuilder,
        manager_key: str,
        coin_key: str,
        recipient: str | None = None,
    ) -> None:
        """Withdraw the whole balance of a coin and send it to ``recipient``."""
        with composing(builder, "withdraw_all_from_manager", manager_key):
            manager = self.config.require_balance_manager(manager_key)
            coin = self.config.require_coin(coin_key)
            manager_arg = await self.manager_input(builder, manager)
            withdrawn = _call(builder, self.package_id, "withdraw_all", [manager_arg], [coin.type])
            builder.transfer_objects([withdrawn], self._recipient(builder, recipient))

    async def check_manager_balance(
        self, builder: TransactionBuilder, manager_key: str, coin_key: str
    ) -> Result:
        """Append a read of the manager's balance of one coin (returns ``u64``)."""
        with composing(builder, "check_manager_balance", manager_key):
            manager = self.config.require_balance_manager(manager_key)
            coin = self.config.require_coin(coin_key)
            manager_arg = await self.manager_input(builder, manager, mutable=False)
            return _call(builder, self.package_id, "balance", [manager_arg], [coin.type])

    async def generate_proof(self, builder: TransactionBuilder, manager_key: str) -> Result:
        """Append the trade proof for a configured manager, owner or delegated."""
        with composing(builder, "generate_proof", manager_key):
            manager = self.config.require_balance_manager(manager_key)
            _, proof = await self.manager_and_proof(builder, manager)
            logger.debug("Derived {} proof for {}", manager.access.kind, manager_key)
            return proof

    async def generate_proof_as_owner(
        self, builder: TransactionBuilder, manager_id: str
    ) -> Result:
        """Append an owner proof for the manager object ``manager_id``."""
        with composing(builder, "generate_proof_as_owner", manager_id):
            manager_arg = builder.object(await self.resolver.resolve_shared(manager_id))
            return derive_proof(builder, self.package_id, manager_arg)

    async def generate_proof_as_trader(
        self, builder: TransactionBuilder, manager_id: str, trade_cap_id: str
    ) -> Result:
        """Append a trader proof for ``manager_id`` backed by ``trade_cap_id``."""
        with composing(builder, "generate_proof_as_trader", manager_id):
            manager_arg = builder.object(await self.resolver.resolve_shared(manager_id))
            cap_arg = builder.object(await self.resolver.resolve_owned(trade_cap_id))
            return derive_proof(builder, self.package_id, manager_arg, cap_arg)

    async def owner(self, builder: TransactionBuilder, manager_key: str) -> Result:
        """Append a read of the manager's owner address."""
        with composing(builder, "owner", manager_key):
            manager = self.config.require_balance_manager(manager_key)
            manager_arg = await self.manager_input(builder, manager, mutable=False)
            return _call(builder, self.package_id, "owner", [manager_arg])

    async def id(self, builder: TransactionBuilder, manager_key: str) -> Result:
        """Append a read of the manager's object id."""
        with composing(builder, "id", manager_key):
            manager = self.config.require_balance_manager(manager_key)
            manager_arg = await self.manager_input(builder, manager, mutable=False)
            return _call(builder, self.package_id, "id", [manager_arg])

    async def mint_trade_cap(self, builder: TransactionBuilder, manager_key: str) -> Result:
        """Append the mint of a new trade cap; the result must be transferred."""
        with composing(builder, "mint_trade_cap", manager_key):
            manager = self.config.require_balance_manager(manager_key)
            manager_arg = await self.manager_input(builder, manager)
            return _call(builder, self.package_id, "mint_trade_cap", [manager_arg])

    async def mint_and_transfer_trade_cap(
        self, builder: TransactionBuilder, manager_key: str, recipient: str
    ) -> None:
        """Mint a trade cap and hand it to ``recipient``."""
        with composing(builder, "mint_and_transfer_trade_cap", manager_key):
            manager = self.config.require_balance_manager(manager_key)
            manager_arg = await self.manager_input(builder, manager)
            trade_cap = _call(builder, self.package_id, "mint_trade_cap", [manager_arg])
            builder.transfer_objects([trade_cap], self._recipient(builder, recipient))
