"""Default coin and pool tables per network.

Tables are read-only mappings built once at import; a registry copies the one
it selects, so nothing here is ever mutated.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from deepbook_client.core.constants import (
    MAINNET,
    MAINNET_PACKAGE_IDS,
    TESTNET_PACKAGE_IDS,
    PackageIds,
)
from deepbook_client.models import Coin, Pool

CoinMap = Mapping[str, Coin]
PoolMap = Mapping[str, Pool]


def _coin(address: str, suffix: str, scalar: int) -> Coin:
    return Coin(address=address, type=f"{address}::{suffix}", scalar=scalar)


TESTNET_COINS: CoinMap = MappingProxyType(
    {
        "DEEP": _coin(
            "0x36dbef866a1d62bf7328989a10fb2f07d769f4ee587c0de4a0a256e57e0a58a8",
            "deep::DEEP",
            1_000_000,
        ),
        "SUI": _coin(
            "0x0000000000000000000000000000000000000000000000000000000000000002",
            "sui::SUI",
            1_000_000_000,
        ),
        "DBUSDC": _coin(
            "0xf7152c05930480cd740d7311b5b8b45c6f488e3a53a11c3f74a6fac36a52e0d7",
            "DBUSDC::DBUSDC",
            1_000_000,
        ),
        "DBUSDT": _coin(
            "0xf7152c05930480cd740d7311b5b8b45c6f488e3a53a11c3f74a6fac36a52e0d7",
            "DBUSDT::DBUSDT",
            1_000_000,
        ),
    }
)

TESTNET_POOLS: PoolMap = MappingProxyType(
    {
        "DEEP_SUI": Pool(
            address="0x0d1b1746d220bd5ebac5231c7685480a16f1c707a46306095a4c67dc7ce4dcae",
            base_coin="DEEP",
            quote_coin="SUI",
        ),
        "SUI_DBUSDC": Pool(
            address="0x520c89c6c78c566eed0ebf24f854a8c22d8fdd06a6f16ad01f108dad7f1baaea",
            base_coin="SUI",
            quote_coin="DBUSDC",
        ),
        "DEEP_DBUSDC": Pool(
            address="0xee4bb0db95dc571b960354713388449f0158317e278ee8cda59ccf3dcd4b5288",
            base_coin="DEEP",
            quote_coin="DBUSDC",
        ),
        "DBUSDT_DBUSDC": Pool(
            address="0x69cbb39a3821d681648469ff2a32b4872739d2294d30253ab958f85ace9e0491",
            base_coin="DBUSDT",
            quote_coin="DBUSDC",
        ),
    }
)

MAINNET_COINS: CoinMap = MappingProxyType(
    {
        "DEEP": _coin(
            "0xdeeb7a4662eec9f2f3def03fb937a663dddaa2e215b8078a284d026b7946c270",
            "deep::DEEP",
            1_000_000,
        ),
        "SUI": _coin(
            "0x0000000000000000000000000000000000000000000000000000000000000002",
            "sui::SUI",
            1_000_000_000,
        ),
        "USDC": _coin(
            "0xdba34672e30cb065b1f93e3ab55318768fd6fef66c15942c9f7cb846e2f900e7",
            "usdc::USDC",
            1_000_000,
        ),
        "WUSDC": _coin(
            "0x5d4b302506645c37ff133b98c4b50a5ae14841659738d6d733d59d0d217a93bf",
            "coin::COIN",
            1_000_000,
        ),
        "WETH": _coin(
            "0xaf8cd5edc19c4512f4259f0bee101a40d41ebed738ade5874359610ef8eeced5",
            "coin::COIN",
            100_000_000,
        ),
        "BETH": _coin(
            "0xd0e89b2af5e4910726fbcd8b8dd37bb79b29e5f83f7491bca830e94f7f226d29",
            "eth::ETH",
            100_000_000,
        ),
        "WBTC": _coin(
            "0x027792d9fed7f9844eb4839566001bb6f6cb4804f66aa2da6fe1ee242d896881",
            "coin::COIN",
            100_000_000,
        ),
        "WUSDT": _coin(
            "0xc060006111016b8a020ad5b33834984a437aaa7d3c74c18e09a95d48aceab08c",
            "coin::COIN",
            1_000_000,
        ),
        "NS": _coin(
            "0x5145494a5f5100e645e4b0aa950fa6b68f614e8c59e17bc5ded3495123a79178",
            "ns::NS",
            1_000_000,
        ),
        "TYPUS": _coin(
            "0xf82dc05634970553615eef6112a1ac4fb7bf10272bf6cbe0f80ef44a6c489385",
            "typus::TYPUS",
            1_000_000_000,
        ),
        "AUSD": _coin(
            "0x2053d08c1e2bd02791056171aab0fd12bd7cd7efad2ab8f6b9c8902f14df2ff2",
            "ausd::AUSD",
            1_000_000,
        ),
        "DRF": _coin(
            "0x294de7579d55c110a00a7c4946e09a1b5cbeca2592fbb83fd7bfacba3cfeaf0e",
            "drf::DRF",
            1_000_000,
        ),
    }
)

MAINNET_POOLS: PoolMap = MappingProxyType(
    {
        "DEEP_SUI": Pool(
            address="0xb663828d6217467c8a1838a03793da896cbe745b150ebd57d82f814ca579fc22",
            base_coin="DEEP",
            quote_coin="SUI",
        ),
        "SUI_USDC": Pool(
            address="0xe05dafb5133bcffb8d59f4e12465dc0e9faeaa05e3e342a08fe135800e3e4407",
            base_coin="SUI",
            quote_coin="USDC",
        ),
        "DEEP_USDC": Pool(
            address="0xf948981b806057580f91622417534f491da5f61aeaf33d0ed8e69fd5691c95ce",
            base_coin="DEEP",
            quote_coin="USDC",
        ),
        "WUSDT_USDC": Pool(
            address="0x4e2ca3988246e1d50b9bf209abb9c1cbfec65bd95afdacc620a36c67bdb8452f",
            base_coin="WUSDT",
            quote_coin="USDC",
        ),
        "WUSDC_USDC": Pool(
            address="0xa0b9ebefb38c963fd115f52d71fa64501b79d1adcb5270563f92ce0442376545",
            base_coin="WUSDC",
            quote_coin="USDC",
        ),
        "BETH_USDC": Pool(
            address="0x1109352b9112717bd2a7c3eb9a416fff1ba6951760f5bdd5424cf5e4e5b3e65c",
            base_coin="BETH",
            quote_coin="USDC",
        ),
        "NS_USDC": Pool(
            address="0x0c0fdd4008740d81a8a7d4281322aee71a1b62c449eb5b142656753d89ebc060",
            base_coin="NS",
            quote_coin="USDC",
        ),
        "NS_SUI": Pool(
            address="0x27c4fdb3b846aa3ae4a65ef5127a309aa3c1f466671471a806d8912a18b253e8",
            base_coin="NS",
            quote_coin="SUI",
        ),
        "TYPUS_SUI": Pool(
            address="0xe8e56f377ab5a261449b92ac42c8ddaacd5671e9fec2179d7933dd1a91200eec",
            base_coin="TYPUS",
            quote_coin="SUI",
        ),
        "SUI_AUSD": Pool(
            address="0x183df694ebc852a5f90a959f0f563b82ac9691e42357e9a9fe961d71a1b809c8",
            base_coin="SUI",
            quote_coin="AUSD",
        ),
        "AUSD_USDC": Pool(
            address="0x5661fc7f88fbeb8cb881150a810758cf13700bb4e1f31274a244581b37c303c3",
            base_coin="AUSD",
            quote_coin="USDC",
        ),
    }
)


def network_defaults(env: str) -> tuple[CoinMap, PoolMap, PackageIds]:
    """Return the default tables for ``env``; anything but mainnet means testnet."""
    if env == MAINNET:
        return MAINNET_COINS, MAINNET_POOLS, MAINNET_PACKAGE_IDS
    return TESTNET_COINS, TESTNET_POOLS, TESTNET_PACKAGE_IDS
