"""Programmable transaction composition for DeepBook."""

from .balance_manager import BalanceManagerContract, derive_proof
from .builder import TransactionBuilder, composing
from .deepbook import DeepBookContract
from .serialize import parse_type_tag, serialize_transaction_kind
from .types import (
    GasCoin,
    Input,
    MoveCall,
    NestedResult,
    ObjectInput,
    OwnedObjectArg,
    ProgrammableTransaction,
    PureInput,
    Result,
    SharedObjectArg,
    SplitCoins,
    TransferObjects,
)

__all__ = [
    "BalanceManagerContract",
    "DeepBookContract",
    "TransactionBuilder",
    "composing",
    "derive_proof",
    "parse_type_tag",
    "serialize_transaction_kind",
    "GasCoin",
    "Input",
    "MoveCall",
    "NestedResult",
    "ObjectInput",
    "OwnedObjectArg",
    "ProgrammableTransaction",
    "PureInput",
    "Result",
    "SharedObjectArg",
    "SplitCoins",
    "TransferObjects",
]
