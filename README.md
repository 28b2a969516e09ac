# typedb

`typedb` converts values as they come back from a database driver into plain Python
values, and turns Python values into forms that SQL drivers accept. It has no
dependencies outside the standard library.

## Installation

```
pip install typedb
```

## Converting column values

`typedb.convert` holds one function per target type:

```python
from typedb.convert import to_int, to_bool, to_time, to_int_list, to_json_object

to_int("123")                     # 123
to_bool("t")                      # True
to_time("2023-01-02 15:04:05")    # datetime(2023, 1, 2, 15, 4, 5, tzinfo=timezone.utc)
to_int_list("{1,2,3}")            # [1, 2, 3]
to_json_object('{"key": "value"}')  # {'key': 'value'}
```

- `to_int`, `to_int64` and `to_int32` accept integers, floats (truncated) and decimal
  text. Numbers wrap to the width of the type; text outside the range raises
  `ValueError`.
- `to_uint`, `to_uint32` and `to_uint64` do the same for unsigned widths and raise
  `ValueError` for negative input. `to_uint64` accepts text up to
  `"18446744073709551615"`.
- `to_bool` accepts booleans, integers (non-zero is true) and the words `t`, `true`, `1`,
  `f`, `false`, `0` in any case, with surrounding whitespace ignored.
- `to_str` renders a value as text; `None` becomes `""`.
- `to_time` accepts a `datetime`, a string or bytes. `parse_time` reads RFC 3339
  timestamps (with optional fractional seconds and offset), `YYYY-MM-DD HH:MM:SS` with
  optional fractional seconds, and `YYYY-MM-DD`; times without an offset are taken as
  UTC. The empty string gives `typedb.convert.ZERO_TIME`.
- `to_int_list` and `to_str_list` accept lists, tuples and PostgreSQL array text such as
  `"{a,b,c}"`.
- `to_json_object` accepts a dict or JSON text holding an object; JSON `null` gives
  `None`. `to_str_map` does the same but requires string values and returns a dict of
  strings.

A value of the wrong kind raises `TypeError`; a value that cannot be parsed raises
`ValueError`. Errors inside a list name the element's index.

## Serializing values for queries

```python
from typedb.convert import serialize

serialize({"key": "value"})   # '{"key":"value"}'
serialize([1, 2, 3])          # '{1,2,3}'
serialize(["a,b", "c"])       # '{"a,b",c}'
serialize(42)                 # 42
```

`serialize` passes `None`, booleans, numbers, strings, bytes and datetimes through
unchanged. Dicts become JSON text. Lists or tuples made only of integers (including an
empty one) or only of strings become PostgreSQL array literals. Anything else becomes
JSON text.

The pieces can be called on their own:

- `serialize_json` writes compact JSON with sorted keys. Strings and bytes are returned
  as they are. Datetimes are written as RFC 3339 text, bytes as base64 and dataclass
  instances as objects. A value that cannot be encoded raises `TypeError`.
- `serialize_int_array` writes `"{1,2,3}"`; `None` gives `"{}"`.
- `serialize_string_array` writes `"{a,b,c}"`, escaping backslashes and quotes and
  quoting elements that contain `,`, `"`, `{`, `}` or `\`; `None` gives `"{}"`.

## Errors

`typedb.errors` defines `TypedbError`, the base class for the package's errors, and
`NotFoundError`, a subclass of both `TypedbError` and `LookupError` whose default message
is `typedb: record not found`. It is there for code that looks up records and finds
none; the conversion functions raise `TypeError` and `ValueError` instead.

## What this package does not do

`typedb` does not connect to databases, run queries, or map rows onto model classes. It
works on single values handed to it; fetching rows and assigning converted values to
objects is left to the calling code.