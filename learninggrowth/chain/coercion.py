"""Conversion of request values into ABI argument types.

Contract integers (``uint256`` and friends) are plain Python ``int`` values
for web3; addresses must be EIP-55 checksummed. Callers may send numbers as
JSON integers or as strings (decimal or ``0x``-prefixed hex) so that values
beyond the JSON safe-integer range survive the trip.
"""

from __future__ import annotations

from typing import Any, Union

from web3 import Web3

from .errors import InvalidAddressError, ValueCoercionError

NumericValue = Union[int, str]

_PREFIXED_BASES = {"0x": 16, "0o": 8, "0b": 2}


def _parse_int_string(text: str, field: str) -> int:
    sign = 1
    body = text
    if body and body[0] in "+-":
        sign = -1 if body[0] == "-" else 1
        body = body[1:]

    if "_" in body or not body:
        raise ValueCoercionError(field, text, "is not a valid integer")

    base = _PREFIXED_BASES.get(body[:2].lower(), 10)
    digits = body[2:] if base != 10 else body
    try:
        return sign * int(digits, base)
    except ValueError as exc:
        raise ValueCoercionError(field, text, "is not a valid integer") from exc


def to_int(value: Any, field: str) -> int:
    """
    Convert ``value`` into an integer suitable for an ABI integer argument.

    Args:
        value: An ``int``, an integral ``float`` or a numeric string.
        field: Name of the request field, used in error messages.

    Returns:
        The integer value.

    Raises:
        ValueCoercionError: If the value is empty, fractional, boolean or not numeric.
    """
    if isinstance(value, bool):
        raise ValueCoercionError(field, value, "cannot be converted to an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueCoercionError(field, value, "must be an integer")
        return int(value)
    if isinstance(value, str):
        normalized = value.strip()
        if not normalized:
            raise ValueCoercionError(field, value, "cannot be an empty string")
        return _parse_int_string(normalized, field)
    raise ValueCoercionError(field, value, "cannot be converted to an integer")


def to_uint(value: Any, field: str, bits: int = 256) -> int:
    """
    Convert ``value`` with :func:`to_int` and check that it fits an unsigned ABI integer.

    Raises:
        ValueCoercionError: If the value is not an integer, is negative or exceeds ``uint<bits>``.
    """
    number = to_int(value, field)
    if number < 0:
        raise ValueCoercionError(field, value, "must not be negative")
    if number >= 1 << bits:
        raise ValueCoercionError(field, value, f"exceeds the uint{bits} range")
    return number


def to_address(value: Any, field: str) -> str:
    """Return the checksummed form of an address or raise :class:`InvalidAddressError`."""
    if not isinstance(value, str) or not Web3.is_address(value.strip()):
        raise InvalidAddressError(value, field=field)
    return Web3.to_checksum_address(value.strip())
