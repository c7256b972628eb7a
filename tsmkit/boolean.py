"""Bit-packed encoding of boolean blocks."""

from typing import Iterable

from tsmkit.varint import VarintError, decode_varint, encode_varint

HEADER_LEN = 1
"""One header byte holding the compression type."""

BOOLEAN_COMPRESSED_BIT_PACKED = 1
"""Bit-packed format, the only boolean compression format."""

_HEADER = BOOLEAN_COMPRESSED_BIT_PACKED << 4


class BooleanDecodeError(ValueError):
    """Raised when a boolean block cannot be decoded."""


def encode(values: Iterable[bool]) -> bytes:
    """Encode booleans as a header, a varint count and one bit per value."""
    values = list(values)
    if not values:
        return b""
    packed = bytearray((len(values) + 7) // 8)
    for index, value in enumerate(values):
        if value:
            packed[index >> 3] |= 0x80 >> (index & 7)
    return bytes([_HEADER]) + encode_varint(len(values)) + bytes(packed)


def decode(data: bytes) -> list[bool]:
    """Decode a boolean block produced by :func:`encode`."""
    if not data:
        return []
    if data[0] != _HEADER:
        raise BooleanDecodeError(f"boolean decoder: unknown encoding {data[0]:#04x}")
    try:
        count, pos = decode_varint(data, HEADER_LEN)
    except VarintError as exc:
        raise BooleanDecodeError("boolean decoder: invalid count") from exc
    payload = data[pos:]
    # A truncated block yields only the values actually present.
    count = min(count, len(payload) * 8)
    return [bool(payload[i >> 3] & (0x80 >> (i & 7))) for i in range(count)]