"""Registry and protocol models using Pydantic v2."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from deepbook_client.utils import normalize_address


class OrderType(IntEnum):
    """Order restriction, encoded as ``u8`` by the pool module."""

    NO_RESTRICTION = 0
    IMMEDIATE_OR_CANCEL = 1
    FILL_OR_KILL = 2
    POST_ONLY = 3


class SelfMatchingOption(IntEnum):
    """Self-match policy, encoded as ``u8`` by the pool module."""

    SELF_MATCHING_ALLOWED = 0
    CANCEL_TAKER = 1
    CANCEL_MAKER = 2


class Ownership(str, Enum):
    """Ownership kind of a ledger object."""

    SHARED = "shared"
    ADDRESS_OWNED = "address_owned"
    OBJECT_OWNED = "object_owned"
    IMMUTABLE = "immutable"


class Coin(BaseModel):
    """Coin definition (asset descriptor)."""

    model_config = ConfigDict(frozen=True)

    address: str = Field(..., description="Package address defining the coin")
    type: str = Field(..., description="Fully qualified Move type, e.g. 0x2::sui::SUI")
    scalar: int = Field(..., gt=0, description="Smallest units per whole coin")

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Normalize the package address."""
        return normalize_address(v)


class Pool(BaseModel):
    """Pool definition (venue descriptor)."""

    model_config = ConfigDict(frozen=True)

    address: str = Field(..., description="Shared pool object id")
    base_coin: str = Field(..., description="Registry key of the base coin")
    quote_coin: str = Field(..., description="Registry key of the quote coin")

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Normalize the pool object id."""
        return normalize_address(v)


class OwnerAccess(BaseModel):
    """The configured caller owns the balance manager directly."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["owner"] = "owner"


class DelegatedAccess(BaseModel):
    """The caller trades through a trade cap minted by the owner."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["delegated"] = "delegated"
    trade_cap: str = Field(..., description="Owned TradeCap object id")

    @field_validator("trade_cap")
    @classmethod
    def validate_trade_cap(cls, v: str) -> str:
        """Normalize the trade cap object id."""
        return normalize_address(v)


ManagerAccess = Annotated[OwnerAccess | DelegatedAccess, Field(discriminator="kind")]


class BalanceManager(BaseModel):
    """Balance manager reference (account).

    Accepts ``{"address": ..., "trade_cap": ...}`` as shorthand for a delegated
    manager, which is the layout used in environment configuration.
    """

    model_config = ConfigDict(frozen=True)

    address: str = Field(..., description="Shared BalanceManager object id")
    access: ManagerAccess = Field(default_factory=OwnerAccess)

    @model_validator(mode="before")
    @classmethod
    def expand_trade_cap(cls, data: Any) -> Any:
        """Translate the ``trade_cap`` shorthand into an access variant."""
        if isinstance(data, dict) and "trade_cap" in data:
            data = dict(data)
            trade_cap = data.pop("trade_cap")
            if trade_cap is not None:
                if "access" in data:
                    raise ValueError("Specify either trade_cap or access, not both")
                data["access"] = {"kind": "delegated", "trade_cap": trade_cap}
        return data

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Normalize the manager object id."""
        return normalize_address(v)

    @property
    def trade_cap(self) -> str | None:
        """Trade cap id for delegated managers, ``None`` for owned ones."""
        if isinstance(self.access, DelegatedAccess):
            return self.access.trade_cap
        return None


class ManagerBalance(BaseModel):
    """Decoded balance of one coin inside a balance manager."""

    coin_type: str
    balance: Decimal


@dataclass(frozen=True, slots=True)
class ObjectMetadata:
    """Ownership and version of a ledger object at the time it was fetched."""

    object_id: str
    ownership: Ownership
    version: int
    digest: str
    initial_shared_version: int | None = None
