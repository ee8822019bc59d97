"""Protocol constants shared across the DeepBook client."""

from __future__ import annotations

from typing import NamedTuple

FLOAT_SCALAR = 1_000_000_000
U64_MAX = (1 << 64) - 1
MAX_TIMESTAMP = U64_MAX
DISPLAY_PRECISION = 9

SUI_CLOCK_OBJECT_ID = "0x6"
SUI_FRAMEWORK_ADDRESS = "0x2"

MAINNET = "mainnet"
TESTNET = "testnet"

DEFAULT_RPC_URLS = {
    MAINNET: "https://fullnode.mainnet.sui.io:443",
    TESTNET: "https://fullnode.testnet.sui.io:443",
}


class PackageIds(NamedTuple):
    """Deployed DeepBook contract coordinates for one network."""

    deepbook_package_id: str
    registry_id: str
    deep_treasury_id: str


TESTNET_PACKAGE_IDS = PackageIds(
    deepbook_package_id="0xcbf4748a965d469ea3a36cf0ccc5743b96c2d0ae6dee0762ed3eca65fac07f7e",
    registry_id="0x98dace830ebebd44b7a3331c00750bf758f8a4b17a27380f5bb3fbe68cb984a7",
    deep_treasury_id="0x69fffdae0075f8f71f4fa793549c11079266910e8905169845af1f5d00e09dcb",
)

MAINNET_PACKAGE_IDS = PackageIds(
    deepbook_package_id="0x2c8d603bc51326b8c13cef9dd07031a408a48dddb541963357661df5d3204809",
    registry_id="0xaf16199a2dff736e9f07a845f23c5da6df6f756eddb631aed9d24a93efc4549d",
    deep_treasury_id="0x032abf8948dda67a271bcc18e776dbbcfb0d58c8d288a700ff0d5521e57a1ffe",
)
