"""Delta, zig-zag and simple8b/RLE encoding of signed 64-bit integer blocks."""

import struct
from enum import IntEnum
from typing import Iterable

from tsmkit import simple8b
from tsmkit.simple8b import Simple8bError
from tsmkit.varint import VarintError, decode_varint, encode_varint

_U64 = struct.Struct(">Q")
_MASK64 = (1 << 64) - 1
_I64_MIN = -(1 << 63)
_I64_MAX = (1 << 63) - 1


class Encoding(IntEnum):
    """Encoding stored in the four high bits of an integer block's first byte."""

    UNCOMPRESSED = 0
    SIMPLE8B = 1
    RLE = 2


class DecodeError(ValueError):
    """Raised when an integer block cannot be decoded."""


def _wrap_i64(value: int) -> int:
    value &= _MASK64
    return value - (1 << 64) if value > _I64_MAX else value


def zig_zag_encode(value: int) -> int:
    """Map a signed 64-bit integer onto an unsigned one: 0, -1, 1, -2 -> 0, 1, 2, 3."""
    return ((value << 1) ^ (value >> 63)) & _MASK64


def zig_zag_decode(value: int) -> int:
    """Invert :func:`zig_zag_encode`."""
    return _wrap_i64((value >> 1) ^ -(value & 1))


def _check_range(values: list[int]) -> None:
    for value in values:
        if not _I64_MIN <= value <= _I64_MAX:
            raise ValueError(f"value {value} does not fit in a signed 64-bit integer")


def _encode_rle(first: int, delta: int, count: int) -> bytes:
    return (
        bytes([Encoding.RLE << 4])
        + _U64.pack(first)
        + encode_varint(delta)
        + encode_varint(count)
    )


def encode(values: Iterable[int]) -> bytes:
    """Encode signed integers, choosing RLE, simple8b or uncompressed storage."""
    values = list(values)
    if not values:
        return b""
    _check_range(values)

    deltas = [zig_zag_encode(values[0])]
    deltas.extend(
        zig_zag_encode(_wrap_i64(cur - prev)) for prev, cur in zip(values, values[1:])
    )
    largest = max(deltas[1:], default=0)

    if len(deltas) > 2 and all(d == deltas[1] for d in deltas[2:]):
        # The count is the number of repeated deltas, excluding the first value.
        return _encode_rle(deltas[0], deltas[1], len(deltas) - 1)

    if largest > simple8b.MAX_VALUE:
        return bytes([Encoding.UNCOMPRESSED << 4]) + b"".join(
            _U64.pack(d) for d in deltas
        )

    return (
        bytes([Encoding.SIMPLE8B << 4])
        + _U64.pack(deltas[0])
        + simple8b.encode(deltas[1:])
    )


def _decode_uncompressed(data: bytes) -> list[int]:
    if not data or len(data) % 8:
        raise DecodeError("invalid uncompressed block length")
    out = []
    prev = 0
    for (word,) in _U64.iter_unpack(data):
        prev = _wrap_i64(prev + zig_zag_decode(word))
        out.append(prev)
    return out


def _decode_rle(data: bytes) -> list[int]:
    if len(data) < 8:
        raise DecodeError("not enough data to decode using RLE")
    try:
        delta, pos = decode_varint(data, 8)
    except VarintError as exc:
        raise DecodeError("unable to decode delta") from exc
    try:
        count, _ = decode_varint(data, pos)
    except VarintError as exc:
        raise DecodeError("unable to decode count") from exc

    current = zig_zag_decode(_U64.unpack_from(data, 0)[0])
    step = zig_zag_decode(delta)
    out = [current]
    for _ in range(count):
        current = _wrap_i64(current + step)
        out.append(current)
    return out


def _decode_simple8b(data: bytes) -> list[int]:
    if len(data) < 8:
        raise DecodeError("not enough data to decode packed integer.")
    current = zig_zag_decode(_U64.unpack_from(data, 0)[0])
    try:
        packed = simple8b.decode(data[8:])
    except Simple8bError as exc:
        raise DecodeError(str(exc)) from exc
    out = [current]
    for value in packed:
        current = _wrap_i64(current + zig_zag_decode(value))
        out.append(current)
    return out


def decode(data: bytes) -> list[int]:
    """Decode an integer block produced by :func:`encode`."""
    if not data:
        return []
    encoding = data[0] >> 4
    if encoding == Encoding.UNCOMPRESSED:
        return _decode_uncompressed(data[1:])
    if encoding == Encoding.RLE:
        return _decode_rle(data[1:])
    if encoding == Encoding.SIMPLE8B:
        return _decode_simple8b(data[1:])
    raise DecodeError("invalid block encoding")