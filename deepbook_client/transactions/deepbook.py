"""Pool calls: order placement, cancellation, settlement and pool reads."""

from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum
from typing import TYPE_CHECKING, TypeVar

from deepbook_client.amounts import AmountLike, price_to_input, to_units
from deepbook_client.core.constants import MAX_TIMESTAMP, SUI_CLOCK_OBJECT_ID
from deepbook_client.errors import IdentifierParseError
from deepbook_client.models import Coin, OrderType, Pool, SelfMatchingOption
from deepbook_client.registry import DeepBookConfig
from deepbook_client.transactions.balance_manager import BalanceManagerContract
from deepbook_client.transactions.builder import (
    OBJECT,
    RESULT,
    Signature,
    TransactionBuilder,
    composing,
)
from deepbook_client.transactions.types import Argument, Input, Result
from deepbook_client.utils import parse_unsigned

if TYPE_CHECKING:
    from deepbook_client.resolver import ObjectResolver

MODULE = "pool"

E = TypeVar("E", bound=IntEnum)

# Parameter lists of the pool entry points, in declaration order.
SIGNATURES: dict[str, Signature] = {
    "place_limit_order": (
        OBJECT,
        OBJECT,
        RESULT,
        "u64",
        "u8",
        "u8",
        "u64",
        "u64",
        "bool",
        "bool",
        "u64",
        OBJECT,
    ),
    "place_market_order": (
        OBJECT,
        OBJECT,
        RESULT,
        "u64",
        "u8",
        "u64",
        "bool",
        "bool",
        OBJECT,
    ),
    "cancel_order": (OBJECT, OBJECT, RESULT, "u128", OBJECT),
    "cancel_all_orders": (OBJECT, OBJECT, RESULT, OBJECT),
    "withdraw_settled_amounts": (OBJECT, OBJECT, RESULT),
    "account_open_orders": (OBJECT, OBJECT),
    "whitelisted": (OBJECT,),
    "mid_price": (OBJECT, OBJECT),
}


def _option(enum_type: type[E], value: int | None, default: E, field: str) -> E:
    if value is None:
        return default
    try:
        return enum_type(value)
    except ValueError as exc:
        raise IdentifierParseError(
            f"{field} {value!r} is not a valid {enum_type.__name__}"
        ) from exc


class DeepBookContract:
    """Composes ``pool`` module calls into a transaction builder.

    Every public operation is all-or-nothing: on failure the builder is left
    exactly as it was and a ``CompositionError`` naming the operation and key
    is raised.
    """

    def __init__(
        self,
        config: DeepBookConfig,
        resolver: ObjectResolver,
        balance_manager: BalanceManagerContract | None = None,
    ) -> None:
        self.config = config
        self.resolver = resolver
        self.balance_manager = balance_manager or BalanceManagerContract(config, resolver)

    def _pool_and_coins(self, pool_key: str) -> tuple[Pool, Coin, Coin]:
        pool = self.config.require_pool(pool_key)
        return (
            pool,
            self.config.require_coin(pool.base_coin),
            self.config.require_coin(pool.quote_coin),
        )

    def _call(
        self,
        builder: TransactionBuilder,
        function: str,
        arguments: Sequence[Argument],
        pool_types: tuple[Coin, Coin],
    ) -> Result:
        base, quote = pool_types
        return builder.move_call(
            f"{self.config.deepbook_package_id}::{MODULE}::{function}",
            arguments,
            [base.type, quote.type],
            signature=SIGNATURES[function],
        )

    async def _pool(self, builder: TransactionBuilder, pool: Pool, mutable: bool = True) -> Input:
        return builder.object(await self.resolver.resolve_shared(pool.address, mutable))

    async def _clock(self, builder: TransactionBuilder) -> Input:
        return builder.object(await self.resolver.resolve_shared(SUI_CLOCK_OBJECT_ID, False))

    async def place_limit_order(
        self,
        builder: TransactionBuilder,
        pool_key: str,
        manager_key: str,
        client_order_id: str | int,
        price: AmountLike,
        quantity: AmountLike,
        is_bid: bool,
        expiration: str | int | None = None,
        order_type: OrderType | int | None = None,
        self_matching_option: SelfMatchingOption | int | None = None,
        pay_with_deep: bool | None = None,
    ) -> Result:
        """Append a limit order on ``pool_key`` for the balance manager ``manager_key``.

        Args:
            builder: Transaction being composed.
            pool_key: Registry key of the pool.
            manager_key: Registry key of the balance manager.
            client_order_id: Caller-chosen order id (u64, digits accepted as text).
            price: Quote per base, human units.
            quantity: Base quantity, human units.
            is_bid: True to buy base, False to sell.
            expiration: Expiry timestamp in ms; defaults to the maximum timestamp.
            order_type: Order restriction; defaults to ``NO_RESTRICTION``.
            self_matching_option: Self-match policy; defaults to allowed.
            pay_with_deep: Pay fees in DEEP; defaults to True.

        Returns:
            Reference to the order info returned by the pool.

        Raises:
            CompositionError: On any lookup, parsing, resolution or ordering failure.
        """
        with composing(builder, "place_limit_order", pool_key):
            pool, base, quote = self._pool_and_coins(pool_key)
            manager = self.config.require_balance_manager(manager_key)
            order_id = parse_unsigned(client_order_id, field="client_order_id")
            expire_timestamp = (
                MAX_TIMESTAMP
                if expiration is None
                else parse_unsigned(expiration, field="expiration")
            )
            restriction = _option(OrderType, order_type, OrderType.NO_RESTRICTION, "order_type")
            self_matching = _option(
                SelfMatchingOption,
                self_matching_option,
                SelfMatchingOption.SELF_MATCHING_ALLOWED,
                "self_matching_option",
            )
            input_price = price_to_input(price, base, quote)
            input_quantity = to_units(quantity, base)

            pool_arg = await self._pool(builder, pool)
            manager_arg, proof = await self.balance_manager.manager_and_proof(builder, manager)
            arguments = [
                pool_arg,
                manager_arg,
                proof,
                builder.pure(order_id, "u64"),
                builder.pure(int(restriction), "u8"),
                builder.pure(int(self_matching), "u8"),
                builder.pure(input_price, "u64"),
                builder.pure(input_quantity, "u64"),
                builder.pure(is_bid, "bool"),
                builder.pure(True if pay_with_deep is None else pay_with_deep, "bool"),
                builder.pure(expire_timestamp, "u64"),
                await self._clock(builder),
            ]
            return self._call(builder, "place_limit_order", arguments, (base, quote))

    async def place_market_order(
        self,
        builder: TransactionBuilder,
        pool_key: str,
        manager_key: str,
        client_order_id: str | int,
        quantity: AmountLike,
        is_bid: bool,
        self_matching_option: SelfMatchingOption | int | None = None,
        pay_with_deep: bool | None = None,
    ) -> Result:
        """Append a market order; defaults match :meth:`place_limit_order`."""
        with composing(builder, "place_market_order", pool_key):
            pool, base, quote = self._pool_and_coins(pool_key)
            manager = self.config.require_balance_manager(manager_key)
            order_id = parse_unsigned(client_order_id, field="client_order_id")
            self_matching = _option(
                SelfMatchingOption,
                self_matching_option,
                SelfMatchingOption.SELF_MATCHING_ALLOWED,
                "self_matching_option",
            )
            input_quantity = to_units(quantity, base)

            pool_arg = await self._pool(builder, pool)
            manager_arg, proof = await self.balance_manager.manager_and_proof(builder, manager)
            arguments = [
                pool_arg,
                manager_arg,
                proof,
                builder.pure(order_id, "u64"),
                builder.pure(int(self_matching), "u8"),
                builder.pure(input_quantity, "u64"),
                builder.pure(is_bid, "bool"),
                builder.pure(True if pay_with_deep is None else pay_with_deep, "bool"),
                await self._clock(builder),
            ]
            return self._call(builder, "place_market_order", arguments, (base, quote))

    async def cancel_order(
        self,
        builder: TransactionBuilder,
        pool_key: str,
        manager_key: str,
        order_id: str | int,
    ) -> Result:
        """Append the cancellation of one order by its protocol order id (u128)."""
        with composing(builder, "cancel_order", pool_key):
            pool, base, quote = self._pool_and_coins(pool_key)
            manager = self.config.require_balance_manager(manager_key)
            parsed_id = parse_unsigned(order_id, field="order_id", bits=128)

            pool_arg = await self._pool(builder, pool)
            manager_arg, proof = await self.balance_manager.manager_and_proof(builder, manager)
            arguments = [
                pool_arg,
                manager_arg,
                proof,
                builder.pure(parsed_id, "u128"),
                await self._clock(builder),
            ]
            return self._call(builder, "cancel_order", arguments, (base, quote))

    async def cancel_all_orders(
        self, builder: TransactionBuilder, pool_key: str, manager_key: str
    ) -> Result:
        """Append the cancellation of every open order of the manager in the pool."""
        with composing(builder, "cancel_all_orders", pool_key):
            pool, base, quote = self._pool_and_coins(pool_key)
            manager = self.config.require_balance_manager(manager_key)
            pool_arg = await self._pool(builder, pool)
            manager_arg, proof = await self.balance_manager.manager_and_proof(builder, manager)
            arguments = [pool_arg, manager_arg, proof, await self._clock(builder)]
            return self._call(builder, "cancel_all_orders", arguments, (base, quote))

    async def withdraw_settled_amounts(
        self, builder: TransactionBuilder, pool_key: str, manager_key: str
    ) -> Result:
        """Append the withdrawal of settled balances back into the manager."""
        with composing(builder, "withdraw_settled_amounts", pool_key):
            pool, base, quote = self._pool_and_coins(pool_key)
            manager = self.config.require_balance_manager(manager_key)
            pool_arg = await self._pool(builder, pool)
            manager_arg, proof = await self.balance_manager.manager_and_proof(builder, manager)
            return self._call(
                builder, "withdraw_settled_amounts", [pool_arg, manager_arg, proof], (base, quote)
            )

    async def account_open_orders(
        self, builder: TransactionBuilder, pool_key: str, manager_key: str
    ) -> Result:
        """Append a read of the manager's open order ids (``VecSet<u128>``)."""
        with composing(builder, "account_open_orders", pool_key):
            pool, base, quote = self._pool_and_coins(pool_key)
            manager = self.config.require_balance_manager(manager_key)
            pool_arg = await self._pool(builder, pool, mutable=False)
            manager_arg = await self.balance_manager.manager_input(builder, manager, mutable=False)
            return self._call(
                builder, "account_open_orders", [pool_arg, manager_arg], (base, quote)
            )

    async def whitelisted(self, builder: TransactionBuilder, pool_key: str) -> Result:
        """Append a read of the pool's whitelist flag."""
        with composing(builder, "whitelisted", pool_key):
            pool, base, quote = self._pool_and_coins(pool_key)
            pool_arg = await self._pool(builder, pool, mutable=False)
            return self._call(builder, "whitelisted", [pool_arg], (base, quote))

    async def mid_price(self, builder: TransactionBuilder, pool_key: str) -> Result:
        """Append a read of the pool's mid price (fixed-point ``u64``)."""
        with composing(builder, "mid_price", pool_key):
            pool, base, quote = self._pool_and_coins(pool_key)
            pool_arg = await self._pool(builder, pool, mutable=False)
            clock = await self._clock(builder)
            return self._call(builder, "mid_price", [pool_arg, clock], (base, quote))
