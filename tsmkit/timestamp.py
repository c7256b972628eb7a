"""Delta, scaled simple8b and RLE encoding of timestamp blocks."""

import struct
from itertools import pairwise
from typing import Iterable

from tsmkit import simple8b
from tsmkit.integer import Encoding
from tsmkit.simple8b import Simple8bError
from tsmkit.varint import VarintError, decode_varint, encode_varint

_U64 = struct.Struct(">Q")
_I64 = struct.Struct(">q")
_MASK64 = (1 << 64) - 1
_I64_MIN = -(1 << 63)
_I64_MAX = (1 << 63) - 1
_MAX_DIVISOR = 10**12


class TimestampDecodeError(ValueError):
    """Raised when a timestamp block cannot be decoded."""


def _wrap_i64(value: int) -> int:
    value &= _MASK64
    return value - (1 << 64) if value > _I64_MAX else value


def _check_range(values: list[int]) -> None:
    for value in values:
        if not _I64_MIN <= value <= _I64_MAX:
            raise ValueError(f"value {value} does not fit in a signed 64-bit integer")


def _largest_divisor(deltas: Iterable[int]) -> int:
    """Largest power of ten, up to 10**12, that divides every delta."""
    div = _MAX_DIVISOR
    for delta in deltas:
        if div <= 1:
            break
        while div > 1 and delta % div:
            div //= 10
    return div


def _exponent(div: int) -> int:
    return len(str(div)) - 1


def _encode_rle(first: int, delta: int, count: int) -> bytes:
    div = _largest_divisor([delta])
    header = Encoding.RLE << 4
    if div > 1:
        # The low four bits hold the number of trailing zeros of the divisor.
        header |= _exponent(div)
        delta //= div
    return bytes([header]) + _U64.pack(first) + encode_varint(delta) + encode_varint(count)


def encode(values: Iterable[int]) -> bytes:
    """Encode timestamps, choosing RLE, scaled simple8b or uncompressed storage.

    Ascending input compresses best.
    """
    values = list(values)
    if not values:
        return b""
    _check_range(values)

    deltas = [values[0] & _MASK64]
    deltas.extend((cur - prev) & _MASK64 for prev, cur in pairwise(values))

    if len(deltas) > 1 and all(d == deltas[1] for d in deltas[2:]):
        return _encode_rle(deltas[0], deltas[1], len(deltas))

    if max(deltas[1:], default=0) > simple8b.MAX_VALUE:
        return bytes([Encoding.UNCOMPRESSED << 4]) + b"".join(_U64.pack(d) for d in deltas)

    div = _largest_divisor(deltas[1:])
    packed = [d // div for d in deltas[1:]] if div > 1 else deltas[1:]
    header = (Encoding.SIMPLE8B << 4) | _exponent(div)
    return bytes([header]) + _U64.pack(deltas[0]) + simple8b.encode(packed)


def _decode_uncompressed(data: bytes) -> list[int]:
    if not data or len(data) % 8:
        raise TimestampDecodeError("invalid uncompressed block length")
    out = []
    prev = 0
    for (delta,) in _I64.iter_unpack(data):
        prev = _wrap_i64(prev + delta)
        out.append(prev)
    return out


def _decode_rle(data: bytes) -> list[int]:
    if len(data) < 9:
        raise TimestampDecodeError("not enough data to decode using RLE")
    scaler = 10 ** (data[0] & 0x0F)
    current = _I64.unpack_from(data, 1)[0]
    try:
        delta, pos = decode_varint(data, 9)
    except VarintError as exc:
        raise TimestampDecodeError("unable to decode delta") from exc
    try:
        count, _ = decode_varint(data, pos)
    except VarintError as exc:
        raise TimestampDecodeError("unable to decode count") from exc
    step = _wrap_i64(delta * scaler)
    out = []
    for _ in range(count):
        out.append(current)
        current = _wrap_i64(current + step)
    return out


def _decode_simple8b(data: bytes) -> list[int]:
    if len(data) < 9:
        raise TimestampDecodeError("not enough data to decode packed timestamp")
    scaler = 10 ** (data[0] & 0x0F)
    current = _I64.unpack_from(data, 1)[0]
    try:
        packed = simple8b.decode(data[9:])
    except Simple8bError as exc:
        raise TimestampDecodeError(str(exc)) from exc
    out = [current]
    for value in packed:
        current = _wrap_i64(current + value * scaler)
        out.append(current)
    return out


def decode(data: bytes) -> list[int]:
    """Decode a timestamp block produced by :func:`encode`."""
    if not data:
        return []
    encoding = data[0] >> 4
    if encoding == Encoding.UNCOMPRESSED:
        return _decode_uncompressed(data[1:])
    if encoding == Encoding.RLE:
        return _decode_rle(data)
    if encoding == Encoding.SIMPLE8B:
        return _decode_simple8b(data)
    raise TimestampDecodeError("invalid block encoding")