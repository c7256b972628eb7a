"""Raw (unframed) Snappy block compression."""

from tsmkit.varint import VarintError, decode_varint, encode_varint

MAX_INPUT_SIZE = (1 << 32) - 1
"""Largest input, in bytes, that can be compressed or decompressed."""

MAX_BLOCK_SIZE = 1 << 16
"""Input is compressed in independent blocks of at most this size."""

_MAX_TABLE_SIZE = 1 << 14
_INPUT_MARGIN = 16 - 1
_MIN_NON_LITERAL_BLOCK_SIZE = 1 + 1 + _INPUT_MARGIN
_HASH_MULTIPLIER = 0x1E35A7BD

_TAG_LITERAL = 0
_TAG_COPY1 = 1
_TAG_COPY2 = 2
_TAG_COPY4 = 3


class SnappyError(ValueError):
    """Raised when data cannot be compressed or decompressed."""


def max_compress_len(source_len: int) -> int:
    """Upper bound on the compressed size of ``source_len`` bytes, or 0 if too large."""
    if source_len < 0:
        raise ValueError("source length must not be negative")
    if source_len > MAX_INPUT_SIZE:
        return 0
    bound = 32 + source_len + source_len // 6
    return 0 if bound > MAX_INPUT_SIZE else bound


def _emit_literal(out: bytearray, literal: bytes) -> None:
    n = len(literal)
    if n <= 60:
        out.append(((n - 1) << 2) | _TAG_LITERAL)
    elif n <= 256:
        out += bytes([(60 << 2) | _TAG_LITERAL, n - 1])
    else:
        out.append((61 << 2) | _TAG_LITERAL)
        out += (n - 1).to_bytes(2, "little")
    out += literal


def _emit_copy2(out: bytearray, offset: int, length: int) -> None:
    out.append(((length - 1) << 2) | _TAG_COPY2)
    out += offset.to_bytes(2, "little")


def _emit_copy(out: bytearray, offset: int, length: int) -> None:
    while length >= 68:
        _emit_copy2(out, offset, 64)
        length -= 64
    if length > 64:
        _emit_copy2(out, offset, 60)
        length -= 60
    if length <= 11 and offset <= 2047:
        out.append(((offset >> 8) << 5) | ((length - 4) << 2) | _TAG_COPY1)
        out.append(offset & 0xFF)
    else:
        _emit_copy2(out, offset, length)


def _extend_match(src: bytes, s: int, candidate: int) -> int:
    n = len(src)
    while s < n and src[s] == src[candidate]:
        s += 1
        candidate += 1
    return s


def _compress_block(src: bytes, out: bytearray) -> int:
    """Emit literals and copies for ``src``; return where the unemitted tail starts."""
    n = len(src)
    shift = 32 - 8
    table_size = 256
    while table_size < _MAX_TABLE_SIZE and table_size < n:
        shift -= 1
        table_size *= 2
    table = [0] * table_size

    def load32(i: int) -> int:
        return int.from_bytes(src[i:i + 4], "little")

    def hash32(x: int) -> int:
        return ((x * _HASH_MULTIPLIER) & 0xFFFFFFFF) >> shift

    s_limit = n - _INPUT_MARGIN
    next_emit = 0
    s = 1
    next_hash = hash32(load32(s))
    while True:
        skip = 32
        s_next = s
        while True:
            s = s_next
            step = skip >> 5
            s_next = s + step
            skip += step
            if s_next > s_limit:
                return next_emit
            candidate = table[next_hash]
            table[next_hash] = s
            next_hash = hash32(load32(s_next))
            if load32(s) == load32(candidate):
                break

        _emit_literal(out, src[next_emit:s])
        while True:
            base = s
            s = _extend_match(src, s + 4, candidate + 4)
            _emit_copy(out, base - candidate, s - base)
            next_emit = s
            if s >= s_limit:
                return next_emit
            x = int.from_bytes(src[s - 1:s + 7], "little")
            table[hash32(x & 0xFFFFFFFF)] = s - 1
            current = (x >> 8) & 0xFFFFFFFF
            current_hash = hash32(current)
            candidate = table[current_hash]
            table[current_hash] = s
            if current != load32(candidate):
                next_hash = hash32((x >> 16) & 0xFFFFFFFF)
                s += 1
                break


def compress(data: bytes) -> bytes:
    """Compress ``data`` into the raw Snappy format."""
    data = bytes(data)
    if max_compress_len(len(data)) == 0:
        raise SnappyError("snappy: input too large")
    if not data:
        return b"\x00"
    out = bytearray(encode_varint(len(data)))
    for start in range(0, len(data), MAX_BLOCK_SIZE):
        block = data[start:start + MAX_BLOCK_SIZE]
        if len(block) < _MIN_NON_LITERAL_BLOCK_SIZE:
            _emit_literal(out, block)
            continue
        tail = _compress_block(block, out)
        if tail < len(block):
            _emit_literal(out, block[tail:])
    return bytes(out)


def _read_le(data: bytes, pos: int, size: int) -> int:
    if pos + size > len(data):
        raise SnappyError("snappy: corrupt input, unexpected end of data")
    return int.from_bytes(data[pos:pos + size], "little")


def decompress(data: bytes) -> bytes:
    """Decompress raw Snappy ``data``."""
    data = bytes(data)
    if not data:
        raise SnappyError("snappy: corrupt input, empty")
    try:
        expected, pos = decode_varint(data, 0)
    except VarintError as exc:
        raise SnappyError("snappy: corrupt input, invalid header") from exc
    if expected > MAX_INPUT_SIZE:
        raise SnappyError("snappy: decompressed length too large")

    out = bytearray()
    while pos < len(data):
        tag = data[pos]
        pos += 1
        kind = tag & 3
        if kind == _TAG_LITERAL:
            length = tag >> 2
            if length >= 60:
                extra = length - 59
                length = _read_le(data, pos, extra)
                pos += extra
            length += 1
            if pos + length > len(data):
                raise SnappyError("snappy: corrupt input, literal exceeds input")
            if len(out) + length > expected:
                raise SnappyError("snappy: corrupt input, output exceeds declared length")
            out += data[pos:pos + length]
            pos += length
            continue

        if kind == _TAG_COPY1:
            length = ((tag >> 2) & 7) + 4
            offset = ((tag >> 5) << 8) | _read_le(data, pos, 1)
            pos += 1
        elif kind == _TAG_COPY2:
            length = (tag >> 2) + 1
            offset = _read_le(data, pos, 2)
            pos += 2
        else:
            length = (tag >> 2) + 1
            offset = _read_le(data, pos, 4)
            pos += 4
        if offset == 0 or offset > len(out):
            raise SnappyError(f"snappy: corrupt input, invalid copy offset {offset}")
        if len(out) + length > expected:
            raise SnappyError("snappy: corrupt input, output exceeds declared length")
        start = len(out) - offset
        if offset >= length:
            out += out[start:start + length]
        else:
            # Overlapping copy: the pattern repeats.
            pattern = bytes(out[start:])
            out += (pattern * (length // offset + 1))[:length]

    if len(out) != expected:
        raise SnappyError(
            f"snappy: corrupt input, expected {expected} bytes but got {len(out)}"
        )
    return bytes(out)