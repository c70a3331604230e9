# sonicjson

`sonicjson` is a small pure-Python library, with no third-party
dependencies, that holds the building blocks of a JSON reader:

- exact conversion of decimal numbers to IEEE 754 doubles, with a fast
  path (Eisel–Lemire) and an exact, slower fallback based on decimal digit
  arithmetic;
- the constant tables those conversions use;
- SAX-style event handlers that turn a stream of parse events into
  ordinary Python values.

## Converting numbers

### Fast path: `sonicjson.eisel_lemire`

`atof_eisel_lemire64(mant, exp10, sgn)` returns the double nearest to
`sgn * mant * 10 ** exp10`, where `mant` is an unsigned 64-bit integer and
`sgn` is `1` or `-1`. It returns `None` when it cannot decide the result
for certain: the exponent is outside `-348..347`, the value lies exactly
halfway between two doubles, or the result would be subnormal or infinite.
A zero mantissa gives a signed zero.

```python
from sonicjson.eisel_lemire import atof_eisel_lemire64, mul_u64

assert atof_eisel_lemire64(15, -1, 1) == 1.5
assert atof_eisel_lemire64(15, -1, -1) == -1.5

hi, lo = mul_u64(2**63, 4)   # full 128-bit product split into two halves
assert (hi, lo) == (2, 0)
```

Arguments that do not fit their width raise `ValueError`.

### Exact path: `sonicjson.decimal_atof`

`atof_native(text)` reads a number from the start of `text` (a `str` or
bytes-like object) and returns the correctly rounded double. Reading stops
at the first character that is not part of a number. Values too large
become a signed infinity; values too small become a signed zero.

```python
from sonicjson.decimal_atof import Decimal, atof_native

assert atof_native("1.1") == 1.1
assert atof_native("-2.5e3") == -2500.0
assert atof_native("1e400") == float("inf")

dec = Decimal.parse("1.1")
assert dec.digits == [1, 1] and dec.dp == 1
assert dec.to_float() == 1.1   # the Decimal itself is left unchanged
```

`Decimal` keeps up to `MAX_DIGITS` (800) digits and sets `trunc` when
non-zero digits beyond that are dropped. Its methods are `parse`, `trim`,
`shift(k)` (multiply by `2 ** k`, divide for negative `k`),
`should_round_up(nd)`, `rounded_integer()` and `to_float()`; `nd` is the
number of digits held.

### Tables: `sonicjson.tables`

- `pow10_m128(exp10)` — `10 ** exp10` as a normalised 128-bit mantissa,
  rounded down, as a `Pow10M128(high, low)`; valid for `-348..347`.
- `pow10_double(exp10)` — the powers of ten that a double holds exactly,
  `0..22`.
- `lshift_cheat(k)` — an `LShiftCheat(delta, cutoff)` telling how many
  decimal digits a left shift by `k` bits (`0..60`) adds.

Out-of-range arguments raise `ValueError`.

## Building values from events: `sonicjson.handler`

`SAXHandler` receives events — `null`, `bool`, `uint`, `int`, `double`,
`key`, `string`, `start_object`, `start_array`, `end_object(pairs)`,
`end_array(count)` — and builds `dict`, `list`, `str`, `int`, `float`,
`bool` and `None` values. `result()` returns the finished value.

```python
from sonicjson.handler import LazySAXHandler, SAXHandler

h = SAXHandler()
h.start_object()
h.key("a")
h.start_array()
h.uint(1)
h.double(2.5)
h.end_array(2)
h.end_object(1)
assert h.result() == {"a": [1, 2.5]}
```

An end event whose count does not match the values received, or that
closes the wrong kind of container, raises `ValueError`, as does calling
`result()` before a value is complete. `SAXHandler(capacity=n)` limits the
number of pending nodes and raises `MemoryError` past it. Keys and strings
may be given as `str` or as UTF-8 bytes.

`LazySAXHandler` builds only the top-level container and keeps each child
as its raw JSON text, given through `raw(text)`:

```python
h = LazySAXHandler()
h.start_array()
h.raw("1")
h.raw('{"b": 2}')
h.end_array(2)
assert h.result() == ["1", '{"b": 2}']
```

## What this package does not do

The package does not read JSON text itself. It has no tokenizer or
parser that produces the events the handlers consume, no lookup of a
value by path, no document object and no serializer. The handlers are
driven by calling their event methods directly.

## Running the tests

```
pip install -e ".[test]"
pytest
```