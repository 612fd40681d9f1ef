"""
Primitive little-endian packers for the staking program's fixed layouts

Every field kind has a fixed width. Packing validates range and type before
any bytes are produced; reading never truncates (u128 is two u64 halves).
"""

import struct
from typing import Any, Tuple, Union

from solders.pubkey import Pubkey

from ..errors import EncodingError
from .constants import (
    PUBKEY_SIZE,
    U8_MAX,
    U32_MAX,
    U64_MAX,
    U128_MAX,
    I64_MIN,
    I64_MAX,
)

# Field kinds
U8 = "u8"
BOOL = "bool"
U32 = "u32"
U64 = "u64"
I64 = "i64"
U128 = "u128"
PUBKEY = "pubkey"

FIELD_WIDTHS = {
    U8: 1,
    BOOL: 1,
    U32: 4,
    U64: 8,
    I64: 8,
    U128: 16,
    PUBKEY: PUBKEY_SIZE,
}

_INT_RANGES = {
    U8: (0, U8_MAX),
    U32: (0, U32_MAX),
    U64: (0, U64_MAX),
    I64: (I64_MIN, I64_MAX),
    U128: (0, U128_MAX),
}

_STRUCT_FORMATS = {
    U8: "<B",
    U32: "<I",
    U64: "<Q",
    I64: "<q",
}

_U64_MASK = (1 << 64) - 1


def combine_u128(low: int, high: int) -> int:
    """Combine two u64 halves (low first on the wire) into one u128"""
    return low | (high << 64)


def split_u128(value: int) -> Tuple[int, int]:
    """Split a u128 into (low, high) u64 halves"""
    return value & _U64_MASK, value >> 64


def to_pubkey(value: Union[Pubkey, str, bytes], field: str = "pubkey") -> Pubkey:
    """Coerce a Pubkey, base58 string or raw 32 bytes into a Pubkey"""
    if isinstance(value, Pubkey):
        return value
    if isinstance(value, str):
        try:
            return Pubkey.from_string(value)
        except ValueError as e:
            raise EncodingError.invalid_type(field, value, PUBKEY) from e
    if isinstance(value, (bytes, bytearray)) and len(value) == PUBKEY_SIZE:
        return Pubkey.from_bytes(bytes(value))
    raise EncodingError.invalid_type(field, value, PUBKEY)


def check_int(kind: str, value: Any, field: str) -> int:
    """Validate that value is an int inside the kind's range"""
    # bool is an int subclass; reject it for integer fields
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError.invalid_type(field, value, kind)
    low, high = _INT_RANGES[kind]
    if value < low or value > high:
        raise EncodingError.out_of_range(field, value, kind)
    return value


def pack_field(kind: str, value: Any, field: str) -> bytes:
    """
    Encode one field value at its fixed width.

    Raises:
        EncodingError: wrong type or value does not fit the width
    """
    if kind == PUBKEY:
        return bytes(to_pubkey(value, field))
    if kind == BOOL:
        if not isinstance(value, bool):
            raise EncodingError.invalid_type(field, value, kind)
        return b"\x01" if value else b"\x00"
    if kind == U128:
        low, high = split_u128(check_int(kind, value, field))
        return struct.pack("<QQ", low, high)
    if kind in _STRUCT_FORMATS:
        return struct.pack(_STRUCT_FORMATS[kind], check_int(kind, value, field))
    raise EncodingError.invalid_type(field, value, kind)


def read_field(kind: str, data: bytes, offset: int) -> Tuple[Any, int]:
    """
    Decode one field at offset.

    Returns:
        (value, next_offset)
    """
    if kind == PUBKEY:
        end = offset + PUBKEY_SIZE
        return Pubkey.from_bytes(bytes(data[offset:end])), end
    if kind == BOOL:
        # Any nonzero byte is true
        return data[offset] != 0, offset + 1
    if kind == U128:
        low, high = struct.unpack_from("<QQ", data, offset)
        return combine_u128(low, high), offset + 16
    value = struct.unpack_from(_STRUCT_FORMATS[kind], data, offset)[0]
    return value, offset + FIELD_WIDTHS[kind]
