# tsmkit

Pure-Python codecs for the value blocks of a time-series storage file. Each
codec turns a list of values into compact bytes and back, using the TSM block
layouts: a header byte naming the encoding, followed by the encoded values.

## Codecs

| Module             | Values             | Technique                                     |
|--------------------|--------------------|-----------------------------------------------|
| `tsmkit.simple8b`  | unsigned, < 2**60  | Simple8b bit packing into 64-bit words        |
| `tsmkit.boolean`   | `bool`             | varint count, then one bit per value          |
| `tsmkit.integer`   | signed 64-bit      | delta + zig-zag, then RLE, simple8b or raw    |
| `tsmkit.unsigned`  | unsigned 64-bit    | same layout as `integer`                      |
| `tsmkit.timestamp` | signed 64-bit      | delta with power-of-ten scaling, RLE/simple8b/raw |
| `tsmkit.string`    | `bytes` or `str`   | varint length prefixes, Snappy compressed     |
| `tsmkit.float_encoder` / `tsmkit.float_decoder` | `float` | Gorilla XOR encoding |

Every codec module offers `decode(data) -> list`; all but `float_decoder`
offer `encode(values) -> bytes`, and floats are encoded with
`float_encoder.encode`. An empty input encodes to empty bytes, and empty
bytes decode to an empty list. `string.encode` stores `str` items as UTF-8;
`string.decode` always returns `bytes`.

`integer` also exposes `zig_zag_encode`, `zig_zag_decode` and the `Encoding`
enum (`UNCOMPRESSED`, `SIMPLE8B`, `RLE`) kept in the high four bits of the
first byte of integer, unsigned and timestamp blocks.

## Installing

```
pip install .
```

The package has no runtime dependencies. To run the tests:

```
pip install .[test]
pytest
```

## Examples

```python
from tsmkit import integer, timestamp, boolean, string
from tsmkit import float_encoder, float_decoder

data = integer.encode([1, 2, 3, 4, 5])
assert integer.decode(data) == [1, 2, 3, 4, 5]
assert data[0] >> 4 == integer.Encoding.RLE

ts = timestamp.encode([1_000, 2_000, 3_000])
assert timestamp.decode(ts) == [1_000, 2_000, 3_000]

assert boolean.encode([True]) == bytes([16, 1, 128])
assert string.decode(string.encode([b"v1"])) == [b"v1"]

values = [12.0, 12.0, 24.0, 13.0]
assert float_decoder.decode(float_encoder.encode(values)) == values
```

Float blocks end with a sentinel NaN bit pattern (`float_decoder.SENTINEL`).
Blocks that end with the legacy pattern `float_decoder.SENTINEL_INFLUXDB`
can be read with `float_decoder.decode_influxdb`, and
`float_decoder.decode_with_sentinel(data, sentinel)` accepts any terminator.
A float block shorter than nine bytes decodes to an empty list.

## Lower-level pieces

- `tsmkit.varint` — `encode_varint(value)` and `decode_varint(data, pos)`
  for unsigned 64-bit LEB128 varints; `decode_varint` returns the value and
  the position just after it.
- `tsmkit.snappy` — `compress`, `decompress` and `max_compress_len` for raw
  (unframed) Snappy blocks.
- `tsmkit.float_bits` — `BitWriter` (`write_bit`, `write_bits`, `to_bytes`,
  `len()` in bits) and `BitReader` (`read_bit`, `read_bits`, `position`,
  `bits_remaining`), most-significant-bit-first bit streams.

## Errors

Malformed input raises a codec-specific exception, each a subclass of
`ValueError`:

- `simple8b.Simple8bError` — a value too large to pack, or a block whose
  length is not a multiple of 8.
- `boolean.BooleanDecodeError` — an unknown header byte or an unreadable count.
- `integer.DecodeError` — an unknown block encoding or a block too short.
- `timestamp.TimestampDecodeError` — the same for timestamp blocks.
- `string.StringCodecError` — truncated or corrupt string data.
- `snappy.SnappyError` — corrupt compressed data.
- `varint.VarintError` — a varint that is truncated, too long or out of range.
- `float_bits.FloatCodecError` — a float block that ends early, or a value
  equal to the sentinel after the first position when encoding.

Integers outside the signed (or, for `unsigned`, unsigned) 64-bit range are
rejected with a plain `ValueError`.

## What this package does not do

tsmkit works on single value blocks only. It does not read or write whole
storage files: there is no file layout, block index, footer, checksum,
tombstone handling or reader/writer for files on disk. Callers supply and
keep the bytes themselves.