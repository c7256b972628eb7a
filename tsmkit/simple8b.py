"""Simple8b packing of unsigned integers into 64-bit words."""

import struct
from itertools import islice, takewhile
from typing import Iterable

MAX_VALUE = (1 << 60) - 1
"""Largest value that simple8b can encode."""

_SELECTOR_SHIFT = 60
_WORD = struct.Struct(">Q")

# (values per word, bits per value) for selectors 2..15.
_LAYOUTS = (
    (60, 1),
    (30, 2),
    (20, 3),
    (15, 4),
    (12, 5),
    (10, 6),
    (8, 7),
    (7, 8),
    (6, 10),
    (5, 12),
    (4, 15),
    (3, 20),
    (2, 30),
    (1, 60),
)


class Simple8bError(ValueError):
    """Raised when values cannot be packed or a block cannot be unpacked."""


def _leading_ones(values: list[int], start: int, limit: int) -> int:
    window = islice(values, start, start + limit)
    return sum(1 for _ in takewhile(lambda v: v == 1, window))


def _pack_next(values: list[int], start: int) -> tuple[int, int]:
    remain = len(values) - start
    for selector, (count, width) in enumerate(_LAYOUTS, start=2):
        if count > remain:
            continue
        chunk = values[start:start + count]
        limit = 1 << width
        if not all(0 <= v < limit for v in chunk):
            continue
        word = selector << _SELECTOR_SHIFT
        for position, value in enumerate(chunk):
            word |= value << (position * width)
        return word, count
    raise Simple8bError("value out of bounds")


def encode(values: Iterable[int]) -> bytes:
    """Pack unsigned integers into big-endian simple8b words."""
    values = list(values)
    out = bytearray()
    i = 0
    while i < len(values):
        remain = len(values) - i
        if remain >= 120:
            run = _leading_ones(values, i, 240 if remain >= 240 else 120)
            if run == 240:
                out += _WORD.pack(0)
                i += 240
                continue
            if run >= 120:
                out += _WORD.pack(1 << _SELECTOR_SHIFT)
                i += 120
                continue
        word, consumed = _pack_next(values, i)
        out += _WORD.pack(word)
        i += consumed
    return bytes(out)


def _unpack_word(word: int) -> list[int]:
    selector = word >> _SELECTOR_SHIFT
    if selector == 0:
        return [1] * 240
    if selector == 1:
        return [1] * 120
    count, width = _LAYOUTS[selector - 2]
    mask = (1 << width) - 1
    return [(word >> (k * width)) & mask for k in range(count)]


def decode(data: bytes) -> list[int]:
    """Unpack big-endian simple8b words into unsigned integers."""
    if len(data) % _WORD.size:
        raise Simple8bError("simple8b block length is not a multiple of 8")
    out: list[int] = []
    for (word,) in _WORD.iter_unpack(data):
        out.extend(_unpack_word(word))
    return out