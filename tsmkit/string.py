"""Snappy-compressed encoding of blocks of byte strings."""

from typing import Iterable, Union

from tsmkit import snappy
from tsmkit.snappy import SnappyError
from tsmkit.varint import MAX_VAR_INT_32, VarintError, decode_varint, encode_varint

STRING_COMPRESSED_SNAPPY = 1
"""Snappy compression, the only string compression format."""

HEADER_LEN = 1
"""One header byte holding the compression type."""

_MAX_I32 = (1 << 31) - 1


class StringCodecError(ValueError):
    """Raised when a string block cannot be encoded or decoded."""


def _as_bytes(value: Union[bytes, bytearray, memoryview, str]) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def encode(values: Iterable[Union[bytes, str]]) -> bytes:
    """Encode byte strings as length-prefixed entries compressed with Snappy.

    ``str`` items are stored as UTF-8.
    """
    items = [_as_bytes(v) for v in values]
    if not items:
        return b""
    for item in items:
        if len(item) >= _MAX_I32:
            raise StringCodecError("string is too long")
    source_size = 2 + len(items) * MAX_VAR_INT_32 + sum(len(item) for item in items)
    if snappy.max_compress_len(source_size) == 0:
        raise StringCodecError("source length too large")

    payload = b"".join(encode_varint(len(item)) + item for item in items)
    try:
        compressed = snappy.compress(payload)
    except SnappyError as exc:
        raise StringCodecError(str(exc)) from exc
    return bytes([STRING_COMPRESSED_SNAPPY << 4]) + compressed


def decode(data: bytes) -> list[bytes]:
    """Decode a block produced by :func:`encode` into byte strings."""
    if not data:
        return []
    # The header byte names the compression type; Snappy is the only one.
    try:
        payload = snappy.decompress(data[HEADER_LEN:])
    except SnappyError as exc:
        raise StringCodecError(str(exc)) from exc

    out = []
    pos = 0
    while pos < len(payload):
        try:
            length, start = decode_varint(payload, pos)
        except VarintError as exc:
            raise StringCodecError("invalid encoded string length") from exc
        end = start + length
        if end > len(payload):
            raise StringCodecError("short buffer")
        out.append(payload[start:end])
        pos = end
    return out