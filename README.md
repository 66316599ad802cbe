# pgsqltypes

Python values for PostgreSQL column types, with conversion to and from the
text form that the server sends and accepts. It needs nothing outside the
standard library.

Most types turn into a database value with `value()`. The matching `scan_*`
function builds the type back from what a query returns, which may be `str`,
`bytes` or `None`. Bad input raises an exception (a `ValueError` subclass such
as `ArrayError`, `DecimalError`, `GeometryError` or `TimestampError`, or a
`TypeError` for a source of the wrong kind); it never produces a half-filled
result.

## Installation

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `pgsqltypes.arrays`: one-dimensional arrays `BoolArray`, `BytesArray`,
  `Float64Array`, `Int64Array`, `StringArray` and `DecimalArray` (all `list`
  subclasses with a `value()` method). They are read back with
  `scan_bool_array`, `scan_bytes_array`, `scan_float64_array`,
  `scan_int64_array`, `scan_string_array` and `scan_decimal_array`.
  `GenericArray` writes a nested list or tuple of any depth.
  `scan_generic_array(src, element_type, length=None)` reads a one-dimensional
  array, building each element with a callable. `array()` wraps a non-empty
  flat list of bools, floats, ints or strings in its typed array, and anything
  else in a `GenericArray`.
- `pgsqltypes.arraytext`: the array text format underneath them.
  `parse_array` returns dimensions and raw elements, with NULL as `None`.
  `scan_linear_array` also refuses more than one dimension. `format_array`
  and `quote_array_element` write the format.
- `pgsqltypes.pgtext`: `bytea` in hex and escape form (`parse_bytea`,
  `encode_bytea`), `encode` for scalars, and timestamps (`parse_timestamp`,
  `parse_ts`, `format_timestamp`, `format_ts`). After
  `enable_infinity_ts(negative, positive)`, `infinity` and `-infinity` map to
  the given bounds. Calling it a second time raises `RuntimeError`, and
  `disable_infinity_ts` turns the mapping off again.
- `pgsqltypes.hstore`: `HStore` (a `dict` of strings to strings or `None`),
  `quote_hstore` and `scan_hstore`.
- `pgsqltypes.json`: `JSON`, a raw document held as `bytes`, with
  `unmarshal()`, `marshal_json()` and `value()`. `value()` checks that the
  document is valid. `json_from_object` and `scan_json` build one.
- `pgsqltypes.decimal`: `Decimal` (never null; scanning `None` raises
  `DecimalError`) and `NullDecimal`, plus `scan_decimal`, `scan_null_decimal`,
  `decimal_from_json`, `null_decimal_from_json` and `random_decimal`. NaN and
  infinity are refused by `value()`. `set_decimal_context` sets a
  `decimal.Context` applied to newly created values.
- `pgsqltypes.byte`: `Byte`, a single byte that reads and writes as a
  one-character string, with `byte_from_json`, `scan_byte` and `random_byte`.
- `pgsqltypes.pgeo.geometry`: `Point`, `Line`, `Lseg`, `Box`, `Path`,
  `Polygon` and `Circle`, their `scan_*` and `random_*` functions, and
  `GeometryError`.
- `pgsqltypes.pgeo.nullable`: `NullPoint`, `NullLine`, `NullLseg`, `NullBox`,
  `NullPath`, `NullPolygon` and `NullCircle`. Each holds a geometric value and
  a `valid` flag. `value()` gives `None` when the value is not valid.

## Examples

```python
from pgsqltypes.arrays import Int64Array, scan_string_array

Int64Array([1, 2, 3]).value()                    # '{1,2,3}'
scan_string_array('{"a\\\\b","c d",","}')        # ['a\\b', 'c d', ',']
```

```python
from datetime import datetime, timezone
from pgsqltypes.pgtext import encode_bytea, format_timestamp

encode_bytea(90000, b"\xde\xad")                 # b'\\xdead'
format_timestamp(datetime(2001, 2, 3, 4, 5, 6, tzinfo=timezone.utc))
                                                 # b'2001-02-03 04:05:06Z'
```

```python
from pgsqltypes.pgeo.geometry import Point, scan_circle

Point(1.5, -2).value()                           # '(1.5,-2)'
circle = scan_circle("<(1,2),3>")
circle.radius                                    # 3.0
```

```python
from pgsqltypes.hstore import scan_hstore

scan_hstore(b'"a"=>"1", "b"=>NULL')              # {'a': '1', 'b': None}
```

```python
from pgsqltypes.decimal import scan_decimal

scan_decimal("3.14").value()                     # '3.14'
```

The `random_*` functions build test values from a callable that returns
integers, which makes it easy to fill fixtures deterministically.

## What it does not do

This package only converts values. It does not connect to a server, run
queries or act as a database driver; you pass its values to, and take them
from, whatever driver you use. Generic arrays are read back in one dimension
only: nested arrays can be written but not scanned.