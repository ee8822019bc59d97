"""Parsing helpers shared by the registry, resolver and composers."""

from __future__ import annotations

import re

from deepbook_client.errors import AddressParseError, IdentifierParseError

ADDRESS_LENGTH = 32
_HEX_BODY = re.compile(r"[0-9a-fA-F]{1,64}")


def normalize_address(value: str) -> str:
    """Return the canonical ``0x``-prefixed, 64 hex digit form of an address.

    Short literals such as ``0x6`` are left-padded with zeros.

    Raises:
        AddressParseError: If the value is not a hex literal of at most 32 bytes.
    """
    if not isinstance(value, str) or not value.startswith("0x"):
        raise AddressParseError(f"Invalid address {value!r}: expected a 0x-prefixed hex literal")
    body = value[2:]
    if not _HEX_BODY.fullmatch(body):
        raise AddressParseError(f"Invalid address {value!r}: expected 1-64 hex digits")
    return "0x" + body.lower().rjust(ADDRESS_LENGTH * 2, "0")


def address_bytes(value: str) -> bytes:
    """Decode an address literal into its 32 raw bytes."""
    return bytes.fromhex(normalize_address(value)[2:])


def parse_unsigned(value: str | int, *, field: str, bits: int = 64) -> int:
    """Parse a decimal identifier into an unsigned integer of ``bits`` width."""
    if isinstance(value, bool):
        raise IdentifierParseError(f"{field} must be an unsigned integer, got {value!r}")
    if isinstance(value, int):
        number = value
    else:
        text = str(value).strip()
        if not (text.isascii() and text.isdigit()):
            raise IdentifierParseError(f"{field} must be an unsigned integer, got {value!r}")
        number = int(text)
    if number < 0 or number >= 1 << bits:
        raise IdentifierParseError(f"{field} {number} does not fit in u{bits}")
    return number
