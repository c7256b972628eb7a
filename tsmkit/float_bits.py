"""Big-endian bit streams used by the float block codec."""

from typing import Union

_BytesLike = Union[bytes, bytearray, memoryview]


class FloatCodecError(ValueError):
    """Raised when a float block cannot be encoded or decoded."""


def _check_count(count: int) -> None:
    if not 0 <= count <= 64:
        raise ValueError(f"bit count must be between 0 and 64, got {count}")


class BitWriter:
    """Accumulates bits, most significant bit first, into bytes."""

    def __init__(self) -> None:
        self._buf = bytearray()
        self._pending = 0
        self._pending_bits = 0

    def __len__(self) -> int:
        """Number of bits written so far."""
        return len(self._buf) * 8 + self._pending_bits

    def write_bit(self, bit: Union[bool, int]) -> None:
        """Append a single bit; any true value writes a one."""
        self.write_bits(1 if bit else 0, 1)

    def write_bits(self, value: int, count: int) -> None:
        """Append the ``count`` low bits of ``value``, highest bit first."""
        _check_count(count)
        if not 0 <= value < (1 << count) and not (count == 0 and value == 0):
            raise ValueError(f"value {value} does not fit in {count} bits")
        if count == 0:
            return
        self._pending = (self._pending << count) | value
        self._pending_bits += count
        while self._pending_bits >= 8:
            self._pending_bits -= 8
            self._buf.append((self._pending >> self._pending_bits) & 0xFF)
        self._pending &= (1 << self._pending_bits) - 1

    def to_bytes(self) -> bytes:
        """Return the written bits, zero-padded up to a whole byte."""
        if not self._pending_bits:
            return bytes(self._buf)
        last = (self._pending << (8 - self._pending_bits)) & 0xFF
        return bytes(self._buf) + bytes([last])


class BitReader:
    """Reads bits, most significant bit first, from a byte string."""

    def __init__(self, data: _BytesLike) -> None:
        self._data = bytes(data)
        self._pos = 0
        self._limit = len(self._data) * 8

    @property
    def position(self) -> int:
        """Number of bits consumed so far."""
        return self._pos

    @property
    def bits_remaining(self) -> int:
        """Number of bits still available."""
        return self._limit - self._pos

    def read_bit(self) -> int:
        """Read one bit and return it as 0 or 1."""
        return self.read_bits(1)

    def read_bits(self, count: int) -> int:
        """Read ``count`` bits and return them as an unsigned integer."""
        _check_count(count)
        if count == 0:
            return 0
        end = self._pos + count
        if end > self._limit:
            raise FloatCodecError("unexpected end of block")
        first = self._pos >> 3
        last = (end + 7) >> 3
        chunk = int.from_bytes(self._data[first:last], "big")
        value = (chunk >> (last * 8 - end)) & ((1 << count) - 1)
        self._pos = end
        return value