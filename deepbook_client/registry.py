"""Configuration registry: coins, pools, balance managers and contract ids."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from loguru import logger

from deepbook_client.core.constants import MAINNET, TESTNET
from deepbook_client.core.tables import network_defaults
from deepbook_client.errors import InvalidConfigError, KeyLookupError
from deepbook_client.models import BalanceManager, Coin, Pool
from deepbook_client.utils import normalize_address

if TYPE_CHECKING:
    from deepbook_client.core.config import DeepBookSettings


class DeepBookConfig:
    """Immutable snapshot of the registry for one network.

    Lookups are pure and return ``None`` on a miss; callers decide whether a
    missing key is fatal.
    """

    def __init__(
        self,
        env: str,
        address: str,
        admin_cap: str | None = None,
        balance_managers: Mapping[str, BalanceManager] | None = None,
        coins: Mapping[str, Coin] | None = None,
        pools: Mapping[str, Pool] | None = None,
    ) -> None:
        """Select the default tables for ``env`` and apply overrides.

        Args:
            env: Network name. ``"mainnet"`` selects mainnet; any other value
                falls back to testnet.
            address: Caller address.
            admin_cap: Optional DeepBook admin capability id.
            balance_managers: Balance managers by key.
            coins: Optional coin table replacing the network default.
            pools: Optional pool table replacing the network default.

        Raises:
            InvalidConfigError: If a pool references a coin key that is not registered.
        """
        default_coins, default_pools, package_ids = network_defaults(env)
        if env not in (MAINNET, TESTNET):
            logger.debug("Unknown environment '{}' - using testnet defaults", env)

        self.env = MAINNET if env == MAINNET else TESTNET
        self.address = normalize_address(address)
        self.admin_cap = normalize_address(admin_cap) if admin_cap else None
        self.coins: Mapping[str, Coin] = MappingProxyType(
            dict(default_coins if coins is None else coins)
        )
        self.pools: Mapping[str, Pool] = MappingProxyType(
            dict(default_pools if pools is None else pools)
        )
        self.balance_managers: Mapping[str, BalanceManager] = MappingProxyType(
            dict(balance_managers or {})
        )
        self.deepbook_package_id = package_ids.deepbook_package_id
        self.registry_id = package_ids.registry_id
        self.deep_treasury_id = package_ids.deep_treasury_id

        self._validate_pools()

    @classmethod
    def from_settings(cls, settings: DeepBookSettings) -> DeepBookConfig:
        """Build a registry from environment settings."""
        return cls(
            env=settings.env,
            address=settings.address,
            admin_cap=settings.admin_cap,
            balance_managers=settings.balance_managers,
        )

    def _validate_pools(self) -> None:
        for key, pool in self.pools.items():
            for coin_key in (pool.base_coin, pool.quote_coin):
                if coin_key not in self.coins:
                    raise InvalidConfigError(
                        f"Pool {key} references unknown coin key: {coin_key}"
                    )

    def get_coin(self, key: str) -> Coin | None:
        """Retrieve a coin by its key."""
        return self.coins.get(key)

    def get_pool(self, key: str) -> Pool | None:
        """Retrieve a pool by its key."""
        return self.pools.get(key)

    def get_balance_manager(self, key: str) -> BalanceManager | None:
        """Retrieve a balance manager by its key."""
        return self.balance_managers.get(key)

    def require_coin(self, key: str) -> Coin:
        """Like :meth:`get_coin` but raise ``KeyLookupError`` on a miss."""
        coin = self.get_coin(key)
        if coin is None:
            raise KeyLookupError("Coin", key)
        return coin

    def require_pool(self, key: str) -> Pool:
        """Like :meth:`get_pool` but raise ``KeyLookupError`` on a miss."""
        pool = self.get_pool(key)
        if pool is None:
            raise KeyLookupError("Pool", key)
        return pool

    def require_balance_manager(self, key: str) -> BalanceManager:
        """Like :meth:`get_balance_manager` but raise ``KeyLookupError`` on a miss."""
        manager = self.get_balance_manager(key)
        if manager is None:
            raise KeyLookupError("Balance manager", key)
        return manager

    def __repr__(self) -> str:
        return (
            f"DeepBookConfig(env={self.env!r}, address={self.address!r}, "
            f"coins={len(self.coins)}, pools={len(self.pools)}, "
            f"balance_managers={len(self.balance_managers)})"
        )
