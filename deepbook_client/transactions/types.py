"""Value types for programmable transactions."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GasCoin:
    """The gas coin of the transaction."""


@dataclass(frozen=True, slots=True)
class Input:
    """Reference to the transaction input at ``index``."""

    index: int


@dataclass(frozen=True, slots=True)
class Result:
    """Reference to the (single) result of command ``index``."""

    index: int


@dataclass(frozen=True, slots=True)
class NestedResult:
    """Reference to result ``result_index`` of command ``index``."""

    index: int
    result_index: int


Argument = GasCoin | Input | Result | NestedResult


@dataclass(frozen=True, slots=True)
class SharedObjectArg:
    """Shared object input; the ledger sequences conflicting writers."""

    object_id: str
    initial_shared_version: int
    mutable: bool


@dataclass(frozen=True, slots=True)
class OwnedObjectArg:
    """Address-owned or immutable object input pinned to an exact version."""

    object_id: str
    version: int
    digest: str


ObjectArg = SharedObjectArg | OwnedObjectArg


@dataclass(frozen=True, slots=True)
class PureInput:
    """BCS-encoded primitive input together with its Move type."""

    value: bytes
    move_type: str


@dataclass(frozen=True, slots=True)
class ObjectInput:
    """Object input."""

    arg: ObjectArg


CallArg = PureInput | ObjectInput


@dataclass(frozen=True, slots=True)
class MoveCall:
    """Invocation of ``package::module::function``."""

    package: str
    module: str
    function: str
    type_arguments: tuple[str, ...]
    arguments: tuple[Argument, ...]

    @property
    def target(self) -> str:
        return f"{self.package}::{self.module}::{self.function}"


@dataclass(frozen=True, slots=True)
class TransferObjects:
    """Transfer ``objects`` to the address held by ``address``."""

    objects: tuple[Argument, ...]
    address: Argument


@dataclass(frozen=True, slots=True)
class SplitCoins:
    """Split ``amounts`` off ``coin``; yields one coin per amount."""

    coin: Argument
    amounts: tuple[Argument, ...]


Command = MoveCall | TransferObjects | SplitCoins


@dataclass(frozen=True, slots=True)
class ProgrammableTransaction:
    """Finalized, immutable call sequence."""

    inputs: tuple[CallArg, ...]
    commands: tuple[Command, ...]
