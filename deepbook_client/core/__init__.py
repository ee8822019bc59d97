"""Core infrastructure modules for the DeepBook client."""

from .config import DeepBookSettings, load_settings
from .constants import (
    DISPLAY_PRECISION,
    FLOAT_SCALAR,
    MAINNET_PACKAGE_IDS,
    MAX_TIMESTAMP,
    SUI_CLOCK_OBJECT_ID,
    TESTNET_PACKAGE_IDS,
    U64_MAX,
    PackageIds,
)
from .tables import (
    MAINNET_COINS,
    MAINNET_POOLS,
    TESTNET_COINS,
    TESTNET_POOLS,
    CoinMap,
    PoolMap,
    network_defaults,
)

__all__ = [
    "DeepBookSettings",
    "load_settings",
    "FLOAT_SCALAR",
    "DISPLAY_PRECISION",
    "MAX_TIMESTAMP",
    "U64_MAX",
    "SUI_CLOCK_OBJECT_ID",
    "PackageIds",
    "MAINNET_PACKAGE_IDS",
    "TESTNET_PACKAGE_IDS",
    "CoinMap",
    "PoolMap",
    "MAINNET_COINS",
    "MAINNET_POOLS",
    "TESTNET_COINS",
    "TESTNET_POOLS",
    "network_defaults",
]
