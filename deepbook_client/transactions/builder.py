"""Append-only builder for programmable transactions."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import cast

from loguru import logger

from deepbook_client.bcs import PURE_TYPES, encode
from deepbook_client.errors import (
    ArgumentOrderError,
    BuilderFinalizedError,
    CompositionError,
    DeepBookError,
    OwnershipMismatchError,
)
from deepbook_client.transactions.types import (
    Argument,
    CallArg,
    Command,
    GasCoin,
    Input,
    MoveCall,
    NestedResult,
    ObjectArg,
    ObjectInput,
    ProgrammableTransaction,
    PureInput,
    Result,
    SharedObjectArg,
    SplitCoins,
    TransferObjects,
)
from deepbook_client.utils import normalize_address

# Parameter kinds used in call signatures, besides the pure Move types.
OBJECT = "object"
RESULT = "result"
COIN = "coin"

Signature = tuple[str, ...]


class TransactionBuilder:
    """Single-use, ordered buffer of inputs and commands.

    Appending is the only way to change the buffer. Each logical operation
    should run inside :meth:`atomic` so a failure leaves no partial arguments
    behind. :meth:`finish` freezes the buffer and may be called once.
    """

    def __init__(self) -> None:
        self._inputs: list[CallArg] = []
        self._commands: list[Command] = []
        self._object_inputs: dict[str, int] = {}
        self._finished = False

    @property
    def inputs(self) -> tuple[CallArg, ...]:
        return tuple(self._inputs)

    @property
    def commands(self) -> tuple[Command, ...]:
        return tuple(self._commands)

    @property
    def is_finished(self) -> bool:
        return self._finished

    def _ensure_open(self) -> None:
        if self._finished:
            raise BuilderFinalizedError("Transaction builder has already been finished")

    def pure(self, value: object, move_type: str) -> Input:
        """Append a primitive input encoded as ``move_type`` (u8, u64, bool, ...)."""
        self._ensure_open()
        shape = PURE_TYPES.get(move_type)
        if shape is None:
            raise ArgumentOrderError(f"Unsupported pure input type: {move_type}")
        self._inputs.append(PureInput(value=encode(shape, value), move_type=move_type))
        return Input(len(self._inputs) - 1)

    def object(self, arg: ObjectArg) -> Input:
        """Append an object input, reusing the slot if the object is already present.

        A shared object referenced twice keeps one input whose mutability is the
        union of both uses.
        """
        self._ensure_open()
        existing_index = self._object_inputs.get(arg.object_id)
        if existing_index is None:
            self._inputs.append(ObjectInput(arg))
            index = len(self._inputs) - 1
            self._object_inputs[arg.object_id] = index
            return Input(index)

        current = cast(ObjectInput, self._inputs[existing_index]).arg
        if isinstance(current, SharedObjectArg) and isinstance(arg, SharedObjectArg):
            if arg.mutable and not current.mutable:
                self._inputs[existing_index] = ObjectInput(
                    SharedObjectArg(
                        object_id=current.object_id,
                        initial_shared_version=current.initial_shared_version,
                        mutable=True,
                    )
                )
        elif type(current) is not type(arg):
            raise OwnershipMismatchError(
                arg.object_id,
                expected=_describe(current),
                actual=_describe(arg),
            )
        return Input(existing_index)

    def gas(self) -> GasCoin:
        """Reference the gas coin."""
        self._ensure_open()
        return GasCoin()

    def move_call(
        self,
        target: str,
        arguments: Sequence[Argument] = (),
        type_arguments: Sequence[str] = (),
        *,
        signature: Signature | None = None,
    ) -> Result:
        """Append ``package::module::function`` and return a reference to its result.

        Args:
            target: Fully qualified function name.
            arguments: Call arguments in declared parameter order.
            type_arguments: Move type arguments.
            signature: Declared parameter kinds; when given, arguments are checked
                against it before anything is appended.

        Raises:
            ArgumentOrderError: If the target is malformed or the arguments do not
                match the signature.
        """
        self._ensure_open()
        package, module, function = _split_target(target)
        arguments = tuple(arguments)
        for argument in arguments:
            self._check_reference(target, argument)
        if signature is not None:
            self._check_signature(target, arguments, signature)

        self._commands.append(
            MoveCall(
                package=package,
                module=module,
                function=function,
                type_arguments=tuple(type_arguments),
                arguments=arguments,
            )
        )
        logger.debug(
            "Appended move call #{} {}::{}::{} with {} arguments",
            len(self._commands) - 1,
            package,
            module,
            function,
            len(arguments),
        )
        return Result(len(self._commands) - 1)

    def split_coins(self, coin: Argument, amounts: Sequence[Argument]) -> Result:
        """Append a split of ``amounts`` off ``coin``."""
        self._ensure_open()
        for argument in (coin, *amounts):
            self._check_reference("SplitCoins", argument)
        self._commands.append(SplitCoins(coin=coin, amounts=tuple(amounts)))
        return Result(len(self._commands) - 1)

    def transfer_objects(self, objects: Sequence[Argument], address: Argument) -> None:
        """Append a transfer of ``objects`` to ``address``."""
        self._ensure_open()
        for argument in (*objects, address):
            self._check_reference("TransferObjects", argument)
        self._commands.append(TransferObjects(objects=tuple(objects), address=address))

    @contextmanager
    def atomic(self) -> Iterator[TransactionBuilder]:
        """Roll the buffer back to its current state if the block raises."""
        self._ensure_open()
        inputs = list(self._inputs)
        commands = list(self._commands)
        object_inputs = dict(self._object_inputs)
        try:
            yield self
        except BaseException:
            dropped = len(self._commands) - len(commands)
            self._inputs = inputs
            self._commands = commands
            self._object_inputs = object_inputs
            logger.debug("Rolled back {} command(s) after failed operation", dropped)
            raise

    def finish(self) -> ProgrammableTransaction:
        """Freeze the buffer into an immutable transaction."""
        self._ensure_open()
        self._finished = True
        return ProgrammableTransaction(inputs=tuple(self._inputs), commands=tuple(self._commands))

    def _check_reference(self, target: str, argument: Argument) -> None:
        if isinstance(argument, Input):
            if not 0 <= argument.index < len(self._inputs):
                raise ArgumentOrderError(f"{target}: unknown input #{argument.index}")
        elif isinstance(argument, (Result, NestedResult)):
            if not 0 <= argument.index < len(self._commands):
                raise ArgumentOrderError(f"{target}: unknown result #{argument.index}")
        elif not isinstance(argument, GasCoin):
            raise ArgumentOrderError(f"{target}: not a transaction argument: {argument!r}")

    def _kind_of(self, argument: Argument) -> str:
        if isinstance(argument, GasCoin):
            return COIN
        if isinstance(argument, Input):
            call_arg = self._inputs[argument.index]
            if isinstance(call_arg, PureInput):
                return call_arg.move_type
            return OBJECT
        return RESULT

    def _check_signature(
        self, target: str, arguments: tuple[Argument, ...], signature: Signature
    ) -> None:
        if len(arguments) != len(signature):
            raise ArgumentOrderError(
                f"{target} expects {len(signature)} arguments, got {len(arguments)}"
            )
        for position, (argument, expected) in enumerate(zip(arguments, signature, strict=True)):
            actual = self._kind_of(argument)
            if actual == expected:
                continue
            if expected == COIN and actual in (OBJECT, RESULT):
                continue
            raise ArgumentOrderError(
                f"{target} argument {position} must be {expected}, got {actual}"
            )


def _split_target(target: str) -> tuple[str, str, str]:
    parts = target.split("::")
    if len(parts) != 3 or not all(parts):
        raise ArgumentOrderError(f"Invalid move call target: {target!r}")
    package, module, function = parts
    return normalize_address(package), module, function


def _describe(arg: ObjectArg) -> str:
    return "shared" if isinstance(arg, SharedObjectArg) else "owned"


@contextmanager
def composing(
    builder: TransactionBuilder, operation: str, key: str
) -> Iterator[TransactionBuilder]:
    """Run one logical operation atomically, reporting failures as ``CompositionError``.

    The buffer is rolled back on any failure. Client errors are re-raised as
    ``CompositionError`` naming ``operation`` and ``key`` with the cause chained.
    """
    try:
        with builder.atomic():
            yield builder
    except CompositionError:
        raise
    except DeepBookError as exc:
        logger.warning("Could not compose {} for {}: {}", operation, key, exc)
        raise CompositionError(operation, f"{key}: {exc}") from exc
    logger.info("Composed {} for {}", operation, key)
