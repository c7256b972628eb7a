"""Encoding of unsigned 64-bit integer blocks via the signed integer codec."""

from typing import Iterable

from tsmkit import integer

_MASK64 = (1 << 64) - 1
_I64_MAX = (1 << 63) - 1


def _as_i64(value: int) -> int:
    if not 0 <= value <= _MASK64:
        raise ValueError(f"value {value} does not fit in an unsigned 64-bit integer")
    return value - (1 << 64) if value > _I64_MAX else value


def encode(values: Iterable[int]) -> bytes:
    """Encode unsigned integers by reinterpreting them as signed 64-bit values."""
    return integer.encode([_as_i64(v) for v in values])


def decode(data: bytes) -> list[int]:
    """Decode a block produced by :func:`encode` back into unsigned integers."""
    return [v & _MASK64 for v in integer.decode(data)]