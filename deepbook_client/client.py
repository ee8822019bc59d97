"""High-level DeepBook client: composers, resolver and dry-run reads."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from loguru import logger

from deepbook_client.amounts import input_to_price, to_decimal
from deepbook_client.bcs import BOOL, U64, U128, vec_set
from deepbook_client.models import ManagerBalance
from deepbook_client.registry import DeepBookConfig
from deepbook_client.resolver import ObjectResolver
from deepbook_client.rpc import LedgerReader, SuiRpcClient
from deepbook_client.simulation import SimulationExecutor
from deepbook_client.transactions.balance_manager import BalanceManagerContract
from deepbook_client.transactions.builder import TransactionBuilder
from deepbook_client.transactions.deepbook import DeepBookContract

if TYPE_CHECKING:
    from deepbook_client.core.config import DeepBookSettings


class DeepBookClient:
    """Entry point tying the registry, ledger access and composers together.

    Write operations are composed through :attr:`balance_manager` and
    :attr:`deepbook` into a :class:`TransactionBuilder` that the caller hands to
    a signer. Read helpers compose a one-call transaction, dry-run it and
    decode the result.
    """

    def __init__(self, config: DeepBookConfig, ledger: LedgerReader) -> None:
        """Initialize the client.

        Args:
            config: Registry for the selected network
            ledger: Remote ledger reader (a ``SuiRpcClient`` or a test double)
        """
        self.config = config
        self.ledger = ledger
        self.resolver = ObjectResolver(ledger)
        self.balance_manager = BalanceManagerContract(config, self.resolver)
        self.deepbook = DeepBookContract(config, self.resolver, self.balance_manager)
        self.simulator = SimulationExecutor(ledger, config.address)

    @classmethod
    def from_settings(cls, settings: DeepBookSettings) -> DeepBookClient:
        """Build a client talking JSON-RPC to the configured fullnode."""
        config = DeepBookConfig.from_settings(settings)
        ledger = SuiRpcClient(settings.resolved_rpc_url, timeout=settings.request_timeout)
        logger.info("DeepBook client for {} via {}", config.env, ledger.url)
        return cls(config, ledger)

    async def __aenter__(self) -> DeepBookClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the ledger connection when it holds one."""
        if isinstance(self.ledger, SuiRpcClient):
            await self.ledger.aclose()

    def new_transaction(self) -> TransactionBuilder:
        return TransactionBuilder()

    async def check_manager_balance(self, manager_key: str, coin_key: str) -> ManagerBalance:
        """Return the balance of ``coin_key`` held by a balance manager."""
        builder = self.new_transaction()
        await self.balance_manager.check_manager_balance(builder, manager_key, coin_key)
        units = await self.simulator.simulate(builder, U64)
        coin = self.config.require_coin(coin_key)
        return ManagerBalance(coin_type=coin.type, balance=to_decimal(units, coin))

    async def account_open_orders(self, pool_key: str, manager_key: str) -> list[int]:
        """Return the ids of the manager's open orders in a pool."""
        builder = self.new_transaction()
        await self.deepbook.account_open_orders(builder, pool_key, manager_key)
        order_ids = await self.simulator.simulate(builder, vec_set(U128))
        return list(order_ids["contents"])

    async def whitelisted(self, pool_key: str) -> bool:
        """Return whether a pool is whitelisted (trades without DEEP fees)."""
        builder = self.new_transaction()
        await self.deepbook.whitelisted(builder, pool_key)
        return bool(await self.simulator.simulate(builder, BOOL))

    async def mid_price(self, pool_key: str) -> Decimal:
        """Return the pool's mid price in quote per base."""
        builder = self.new_transaction()
        await self.deepbook.mid_price(builder, pool_key)
        input_price = await self.simulator.simulate(builder, U64)
        pool = self.config.require_pool(pool_key)
        return input_to_price(
            input_price,
            self.config.require_coin(pool.base_coin),
            self.config.require_coin(pool.quote_coin),
        )
