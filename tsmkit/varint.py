"""Unsigned LEB128 variable-length integers, limited to 64 bits."""

MAX_VAR_INT_32 = 5
"""Max number of bytes needed to store a varint-encoded 32-bit integer."""

MAX_VAR_INT_64 = 10
"""Max number of bytes needed to store a varint-encoded 64-bit integer."""

_U64_LIMIT = 1 << 64


class VarintError(ValueError):
    """Raised when a varint cannot be encoded or decoded."""


def encode_varint(value: int) -> bytes:
    """Encode an unsigned 64-bit integer as a varint."""
    if value < 0 or value >= _U64_LIMIT:
        raise VarintError(f"value {value} does not fit in an unsigned 64-bit integer")
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def decode_varint(data: bytes, pos: int = 0) -> tuple[int, int]:
    """Decode a varint starting at ``pos``.

    Returns the decoded value and the position just after it.
    """
    value = 0
    shift = 0
    for offset, byte in enumerate(data[pos:pos + MAX_VAR_INT_64]):
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            if value >= _U64_LIMIT:
                raise VarintError("varint overflows 64 bits")
            return value, pos + offset + 1
        shift += 7
    if len(data) - pos >= MAX_VAR_INT_64:
        raise VarintError("varint is longer than 10 bytes")
    raise VarintError("unexpected end of data while reading varint")