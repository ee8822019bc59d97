"""DeepBook Client - compose and dry-run DeepBook transactions on Sui."""

__version__ = "0.1.0"

from deepbook_client.amounts import (
    AMOUNT_ROUNDING,
    input_to_price,
    price_to_input,
    to_decimal,
    to_units,
)
from deepbook_client.client import DeepBookClient
from deepbook_client.core.config import DeepBookSettings, load_settings
from deepbook_client.errors import (
    CompositionError,
    DeepBookError,
    KeyLookupError,
    OwnershipMismatchError,
    SimulationError,
)
from deepbook_client.models import (
    BalanceManager,
    Coin,
    DelegatedAccess,
    ManagerBalance,
    ObjectMetadata,
    OrderType,
    OwnerAccess,
    Ownership,
    Pool,
    SelfMatchingOption,
)
from deepbook_client.registry import DeepBookConfig
from deepbook_client.resolver import ObjectResolver
from deepbook_client.rpc import LedgerReader, SuiRpcClient
from deepbook_client.simulation import SimulationExecutor
from deepbook_client.transactions import (
    BalanceManagerContract,
    DeepBookContract,
    TransactionBuilder,
    derive_proof,
)

__all__ = [
    "AMOUNT_ROUNDING",
    "input_to_price",
    "price_to_input",
    "to_decimal",
    "to_units",
    "DeepBookClient",
    "DeepBookSettings",
    "load_settings",
    "CompositionError",
    "DeepBookError",
    "KeyLookupError",
    "OwnershipMismatchError",
    "SimulationError",
    "BalanceManager",
    "Coin",
    "DelegatedAccess",
    "ManagerBalance",
    "ObjectMetadata",
    "OrderType",
    "OwnerAccess",
    "Ownership",
    "Pool",
    "SelfMatchingOption",
    "DeepBookConfig",
    "ObjectResolver",
    "LedgerReader",
    "SuiRpcClient",
    "SimulationExecutor",
    "BalanceManagerContract",
    "DeepBookContract",
    "TransactionBuilder",
    "derive_proof",
]
