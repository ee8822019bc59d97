"""Exception hierarchy for DeepBook transaction composition."""

from __future__ import annotations


class DeepBookError(Exception):
    """Base error for all client failures."""


class InvalidConfigError(DeepBookError):
    """Raised when registry tables violate their invariants."""


class KeyLookupError(DeepBookError):
    """Raised when a symbolic coin, pool or balance manager key is unknown."""

    def __init__(self, kind: str, key: str) -> None:
        super().__init__(f"{kind} not found for key: {key}")
        self.kind = kind
        self.key = key


class AddressParseError(DeepBookError):
    """Raised when an object or account address is malformed."""


class ObjectFetchError(DeepBookError):
    """Raised when object metadata cannot be fetched from the ledger."""


class OwnershipMismatchError(DeepBookError):
    """Raised when an object's ownership kind differs from what the call needs."""

    def __init__(self, object_id: str, expected: str, actual: str) -> None:
        super().__init__(
            f"Object {object_id} must be {expected}, ledger reports {actual}"
        )
        self.object_id = object_id
        self.expected = expected
        self.actual = actual


class AmountParseError(DeepBookError):
    """Raised when a quantity or price is not a finite, non-negative number."""


class AmountOverflowError(AmountParseError):
    """Raised when a scaled amount does not fit in an unsigned 64-bit integer."""


class IdentifierParseError(DeepBookError):
    """Raised when a textual order identifier is not an unsigned integer."""


class ArgumentOrderError(DeepBookError):
    """Raised when call arguments do not match the declared parameter list."""


class BuilderFinalizedError(DeepBookError):
    """Raised when a finished transaction builder is modified or finished again."""


class CompositionError(DeepBookError):
    """Raised when a logical operation cannot be appended to a bundle."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation


class RpcError(DeepBookError):
    """Raised when the JSON-RPC endpoint answers with an error object."""

    def __init__(self, method: str, code: int | None, message: str) -> None:
        super().__init__(f"{method} failed (code={code}): {message}")
        self.method = method
        self.code = code


class RpcTransportError(DeepBookError):
    """Raised when the JSON-RPC endpoint cannot be reached or returns garbage."""


class SimulationError(DeepBookError):
    """Base error for dry-run simulation failures."""


class SimulationFailedError(SimulationError):
    """Raised when the ledger reports an execution error for the dry run."""


class NoResultsError(SimulationError):
    """Raised when the dry run returns no command results at all."""


class MissingCallResultError(SimulationError):
    """Raised when the first command has no result entry."""


class MissingReturnValueError(SimulationError):
    """Raised when the first command returned no values."""


class EncodeError(DeepBookError):
    """Raised when a value cannot be BCS-encoded as the requested type."""


class DecodeError(DeepBookError):
    """Raised when BCS bytes cannot be decoded into the requested shape."""
