"""Binary Canonical Serialization (BCS) as used by Move and the Sui ledger.

Integers are little-endian, sequence lengths and enum tags are ULEB128, and
structs are the concatenation of their fields. Shapes (``U64``, ``Vector(U128)``,
``Struct(...)``) describe how to read a return value or write a pure input.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from deepbook_client.errors import AddressParseError, DecodeError, EncodeError
from deepbook_client.utils import ADDRESS_LENGTH, address_bytes

_MAX_ULEB128 = (1 << 32) - 1


class BcsWriter:
    """Append-only BCS byte sink."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def uleb128(self, value: int) -> BcsWriter:
        if value < 0 or value > _MAX_ULEB128:
            raise EncodeError(f"ULEB128 value out of range: {value}")
        while True:
            byte = value & 0x7F
            value >>= 7
            if value:
                self._buffer.append(byte | 0x80)
            else:
                self._buffer.append(byte)
                return self

    def uint(self, value: int, bits: int) -> BcsWriter:
        if isinstance(value, bool) or not isinstance(value, int):
            raise EncodeError(f"u{bits} expects an integer, got {value!r}")
        if value < 0 or value >= 1 << bits:
            raise EncodeError(f"Value {value} does not fit in u{bits}")
        self._buffer.extend(value.to_bytes(bits // 8, "little"))
        return self

    def bool(self, value: bool) -> BcsWriter:
        if not isinstance(value, bool):
            raise EncodeError(f"bool expects True/False, got {value!r}")
        self._buffer.append(1 if value else 0)
        return self

    def raw(self, data: bytes) -> BcsWriter:
        self._buffer.extend(data)
        return self

    def bytes(self, data: bytes) -> BcsWriter:
        self.uleb128(len(data))
        self._buffer.extend(data)
        return self

    def string(self, value: str) -> BcsWriter:
        return self.bytes(value.encode("utf-8"))

    def address(self, value: str) -> BcsWriter:
        try:
            return self.raw(address_bytes(value))
        except AddressParseError as exc:
            raise EncodeError(f"Invalid address {value!r}") from exc

    def sequence(self, items: Sequence[Any], write_item: Callable[[Any], object]) -> BcsWriter:
        self.uleb128(len(items))
        for item in items:
            write_item(item)
        return self

    def getvalue(self) -> bytes:
        return bytes(self._buffer)


class BcsReader:
    """Cursor over a BCS payload."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._offset = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def _take(self, size: int) -> bytes:
        if size > self.remaining:
            raise DecodeError(
                f"Unexpected end of input: need {size} bytes at offset {self._offset}, "
                f"have {self.remaining}"
            )
        chunk = self._data[self._offset : self._offset + size]
        self._offset += size
        return chunk

    def raw(self, size: int) -> bytes:
        return self._take(size)

    def uleb128(self) -> int:
        value = 0
        shift = 0
        while True:
            byte = self._take(1)[0]
            value |= (byte & 0x7F) << shift
            if not byte & 0x80:
                break
            shift += 7
            if shift > 28:
                raise DecodeError("ULEB128 value exceeds u32")
        if value > _MAX_ULEB128:
            raise DecodeError("ULEB128 value exceeds u32")
        return value

    def uint(self, bits: int) -> int:
        return int.from_bytes(self._take(bits // 8), "little")

    def bool(self) -> bool:
        byte = self._take(1)[0]
        if byte not in (0, 1):
            raise DecodeError(f"Invalid bool byte: {byte}")
        return byte == 1

    def bytes(self) -> bytes:
        return self._take(self.uleb128())

    def string(self) -> str:
        raw = self.bytes()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError("Invalid UTF-8 string") from exc

    def address(self) -> str:
        return "0x" + self._take(ADDRESS_LENGTH).hex()


class BcsType:
    """A shape that knows how to read and write one Move value."""

    name = "value"

    def read(self, reader: BcsReader) -> Any:
        raise NotImplementedError

    def write(self, writer: BcsWriter, value: Any) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return self.name


class _UInt(BcsType):
    def __init__(self, bits: int) -> None:
        self.bits = bits
        self.name = f"u{bits}"

    def read(self, reader: BcsReader) -> int:
        return reader.uint(self.bits)

    def write(self, writer: BcsWriter, value: Any) -> None:
        writer.uint(value, self.bits)


class _Bool(BcsType):
    name = "bool"

    def read(self, reader: BcsReader) -> bool:
        return reader.bool()

    def write(self, writer: BcsWriter, value: Any) -> None:
        writer.bool(value)


class _Address(BcsType):
    name = "address"

    def read(self, reader: BcsReader) -> str:
        return reader.address()

    def write(self, writer: BcsWriter, value: Any) -> None:
        writer.address(value)


class _String(BcsType):
    name = "string"

    def read(self, reader: BcsReader) -> str:
        return reader.string()

    def write(self, writer: BcsWriter, value: Any) -> None:
        writer.string(value)


class Vector(BcsType):
    """``vector<T>``; ``vector<u8>`` is exposed as ``bytes``."""

    def __init__(self, inner: BcsType) -> None:
        self.inner = inner
        self.name = f"vector<{inner.name}>"

    def read(self, reader: BcsReader) -> Any:
        length = reader.uleb128()
        if self.inner is U8:
            return reader.raw(length)
        return [self.inner.read(reader) for _ in range(length)]

    def write(self, writer: BcsWriter, value: Any) -> None:
        if self.inner is U8 and isinstance(value, (bytes, bytearray)):
            writer.bytes(bytes(value))
            return
        writer.sequence(list(value), lambda item: self.inner.write(writer, item))


class Option(BcsType):
    """``Option<T>``, encoded as a zero- or one-element vector."""

    def __init__(self, inner: BcsType) -> None:
        self.inner = inner
        self.name = f"Option<{inner.name}>"

    def read(self, reader: BcsReader) -> Any:
        tag = reader.uleb128()
        if tag == 0:
            return None
        if tag == 1:
            return self.inner.read(reader)
        raise DecodeError(f"Invalid Option tag: {tag}")

    def write(self, writer: BcsWriter, value: Any) -> None:
        if value is None:
            writer.uleb128(0)
        else:
            writer.uleb128(1)
            self.inner.write(writer, value)


class Struct(BcsType):
    """Named struct; decodes to a ``dict`` keyed by field name."""

    def __init__(self, name: str, fields: Sequence[tuple[str, BcsType]]) -> None:
        self.name = name
        self.fields = tuple(fields)

    def read(self, reader: BcsReader) -> dict[str, Any]:
        return {field: shape.read(reader) for field, shape in self.fields}

    def write(self, writer: BcsWriter, value: Any) -> None:
        for field, shape in self.fields:
            try:
                item = value[field]
            except (KeyError, TypeError) as exc:
                raise EncodeError(f"{self.name} is missing field {field!r}") from exc
            shape.write(writer, item)


U8 = _UInt(8)
U16 = _UInt(16)
U32 = _UInt(32)
U64 = _UInt(64)
U128 = _UInt(128)
U256 = _UInt(256)
BOOL = _Bool()
ADDRESS = _Address()
STRING = _String()

PURE_TYPES: dict[str, BcsType] = {
    "u8": U8,
    "u16": U16,
    "u32": U32,
    "u64": U64,
    "u128": U128,
    "u256": U256,
    "bool": BOOL,
    "address": ADDRESS,
}


def vec_set(inner: BcsType) -> Struct:
    """``sui::vec_set::VecSet<T>``: a struct wrapping a ``contents`` vector."""
    return Struct("VecSet", [("contents", Vector(inner))])


def encode(shape: BcsType, value: Any) -> bytes:
    """Serialize ``value`` as ``shape``."""
    writer = BcsWriter()
    shape.write(writer, value)
    return writer.getvalue()


def decode(shape: BcsType, data: bytes) -> Any:
    """Deserialize ``data`` as ``shape``; trailing bytes are an error."""
    reader = BcsReader(data)
    value = shape.read(reader)
    if reader.remaining:
        raise DecodeError(f"{reader.remaining} trailing bytes after decoding {shape!r}")
    return value
