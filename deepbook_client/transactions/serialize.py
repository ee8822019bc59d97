"""BCS serialization of programmable transactions and Move type tags."""

from __future__ import annotations

import re
from dataclasses import dataclass

import base58

from deepbook_client.bcs import BcsWriter
from deepbook_client.errors import AddressParseError, EncodeError
from deepbook_client.transactions.types import (
    Argument,
    CallArg,
    Command,
    GasCoin,
    Input,
    MoveCall,
    NestedResult,
    ProgrammableTransaction,
    PureInput,
    Result,
    SharedObjectArg,
    SplitCoins,
    TransferObjects,
)
from deepbook_client.utils import normalize_address

PRIMITIVE_TYPE_TAGS = {
    "bool": 0,
    "u8": 1,
    "u64": 2,
    "u128": 3,
    "address": 4,
    "signer": 5,
    "u16": 8,
    "u32": 9,
    "u256": 10,
}
_VECTOR_TAG = 6
_STRUCT_TAG = 7
_DIGEST_LENGTH = 32
_IDENT = re.compile(r"[A-Za-z0-9_]+")


@dataclass(frozen=True, slots=True)
class VectorTag:
    inner: TypeTag


@dataclass(frozen=True, slots=True)
class StructTag:
    address: str
    module: str
    name: str
    type_params: tuple[TypeTag, ...] = ()


TypeTag = str | VectorTag | StructTag


class _TypeTagParser:
    def __init__(self, text: str) -> None:
        self._source = text
        self._text = text.replace(" ", "")
        self._pos = 0

    def _fail(self, reason: str) -> EncodeError:
        return EncodeError(f"Invalid type tag {self._source!r}: {reason}")

    def _peek(self, token: str) -> bool:
        return self._text.startswith(token, self._pos)

    def _expect(self, token: str) -> None:
        if not self._peek(token):
            raise self._fail(f"expected {token!r} at position {self._pos}")
        self._pos += len(token)

    def _ident(self) -> str:
        match = _IDENT.match(self._text, self._pos)
        if match is None:
            raise self._fail(f"expected identifier at position {self._pos}")
        self._pos = match.end()
        return match.group()

    def parse(self) -> TypeTag:
        if self._peek("vector<"):
            self._pos += len("vector<")
            inner = self.parse()
            self._expect(">")
            return VectorTag(inner)
        token = self._ident()
        if token in PRIMITIVE_TYPE_TAGS and not self._peek("::"):
            return token
        try:
            address = normalize_address(token)
        except AddressParseError as exc:
            raise self._fail(f"bad address {token!r}") from exc
        self._expect("::")
        module = self._ident()
        self._expect("::")
        name = self._ident()
        params: list[TypeTag] = []
        if self._peek("<"):
            self._pos += 1
            params.append(self.parse())
            while self._peek(","):
                self._pos += 1
                params.append(self.parse())
            self._expect(">")
        return StructTag(address, module, name, tuple(params))

    def parse_all(self) -> TypeTag:
        tag = self.parse()
        if self._pos != len(self._text):
            raise self._fail(f"unexpected trailing input at position {self._pos}")
        return tag


def parse_type_tag(text: str) -> TypeTag:
    """Parse a Move type such as ``0x2::coin::Coin<0x2::sui::SUI>``."""
    return _TypeTagParser(text).parse_all()


def _write_type_tag(writer: BcsWriter, tag: TypeTag) -> None:
    if isinstance(tag, str):
        writer.uleb128(PRIMITIVE_TYPE_TAGS[tag])
    elif isinstance(tag, VectorTag):
        writer.uleb128(_VECTOR_TAG)
        _write_type_tag(writer, tag.inner)
    else:
        writer.uleb128(_STRUCT_TAG)
        writer.address(tag.address)
        writer.string(tag.module)
        writer.string(tag.name)
        writer.sequence(tag.type_params, lambda param: _write_type_tag(writer, param))


def _digest_bytes(digest: str) -> bytes:
    try:
        raw = base58.b58decode(digest)
    except ValueError as exc:
        raise EncodeError(f"Invalid object digest {digest!r}") from exc
    if len(raw) != _DIGEST_LENGTH:
        raise EncodeError(f"Object digest {digest!r} must decode to {_DIGEST_LENGTH} bytes")
    return raw


def _write_call_arg(writer: BcsWriter, call_arg: CallArg) -> None:
    if isinstance(call_arg, PureInput):
        writer.uleb128(0)
        writer.bytes(call_arg.value)
        return
    writer.uleb128(1)
    arg = call_arg.arg
    if isinstance(arg, SharedObjectArg):
        writer.uleb128(1)
        writer.address(arg.object_id)
        writer.uint(arg.initial_shared_version, 64)
        writer.bool(arg.mutable)
    else:
        writer.uleb128(0)
        writer.address(arg.object_id)
        writer.uint(arg.version, 64)
        writer.bytes(_digest_bytes(arg.digest))


def _write_argument(writer: BcsWriter, argument: Argument) -> None:
    if isinstance(argument, GasCoin):
        writer.uleb128(0)
    elif isinstance(argument, Input):
        writer.uleb128(1)
        writer.uint(argument.index, 16)
    elif isinstance(argument, Result):
        writer.uleb128(2)
        writer.uint(argument.index, 16)
    elif isinstance(argument, NestedResult):
        writer.uleb128(3)
        writer.uint(argument.index, 16)
        writer.uint(argument.result_index, 16)
    else:
        raise EncodeError(f"Unsupported argument: {argument!r}")


def _write_command(writer: BcsWriter, command: Command) -> None:
    if isinstance(command, MoveCall):
        writer.uleb128(0)
        writer.address(command.package)
        writer.string(command.module)
        writer.string(command.function)
        tags = [parse_type_tag(type_argument) for type_argument in command.type_arguments]
        writer.sequence(tags, lambda tag: _write_type_tag(writer, tag))
        writer.sequence(command.arguments, lambda argument: _write_argument(writer, argument))
    elif isinstance(command, TransferObjects):
        writer.uleb128(1)
        writer.sequence(command.objects, lambda argument: _write_argument(writer, argument))
        _write_argument(writer, command.address)
    elif isinstance(command, SplitCoins):
        writer.uleb128(2)
        _write_argument(writer, command.coin)
        writer.sequence(command.amounts, lambda argument: _write_argument(writer, argument))
    else:
        raise EncodeError(f"Unsupported command: {command!r}")


def serialize_transaction_kind(transaction: ProgrammableTransaction) -> bytes:
    """Serialize as ``TransactionKind::ProgrammableTransaction`` for dev-inspect."""
    writer = BcsWriter()
    writer.uleb128(0)
    writer.sequence(transaction.inputs, lambda call_arg: _write_call_arg(writer, call_arg))
    writer.sequence(transaction.commands, lambda command: _write_command(writer, command))
    return writer.getvalue()
