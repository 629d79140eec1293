# lazyjson

A JSON toolkit built around *lazy values*. When you read a document, objects,
arrays and numbers stay as raw text until you ask for a piece of them. Pulling
one field out of a large payload then costs little more than scanning to it.

## Installing

```
pip install .
```

## Reading values lazily

```python
from lazyjson.api import get

doc = b'{"ID":1,"Name":"Reds","Colors":["Crimson","Red","Ruby","Maroon"]}'
print(get(doc, "Colors", 0).to_string())   # Crimson
```

`get` walks a path made of these steps:

- object keys, given as strings;
- array indexes, given as integers;
- `"*"`, which maps the rest of the path over every element or field.

The value it returns is an `Any` from `lazyjson.values`. Every `Any` has:

- `value_type()`, which returns a `ValueType`;
- `size()`, `keys()`, `get(...)` and `get_interface()`;
- the conversions `to_bool()`, `to_int()`, `to_int32()`, `to_int64()`,
  `to_uint()`, `to_uint32()`, `to_uint64()`, `to_float32()`, `to_float64()`
  and `to_string()`.

The conversions are lenient. A string such as `"12abc"` gives `12` from
`to_int64()`, and a non-empty array gives `1`.

When a path does not match, `get` returns an `InvalidAny`:

- `last_error()` gives the reason;
- its conversions return zero values and do not raise;
- `must_be_valid()` raises.

`lazyjson.containers` provides these functions:

- `read_any(data)` reads the first value of a document.
- `locate_path(data, path)` does what `get` does, with the path given as a list.
- `wrap(value)` turns plain Python values into `Any` objects. It covers `None`, `bool`, `int`, `float`, `str`, lists, tuples, mappings and dataclass instances.

## Marshalling and unmarshalling

```python
from lazyjson.api import marshal, marshal_indent, unmarshal, valid

marshal({"ID": 1, "Name": "Reds"})     # b'{"ID":1,"Name":"Reds"}'
marshal_indent([1, 2], "", "  ")       # b'[\n  1,\n  2\n]'
unmarshal(b'[1, "two", null]')          # [1.0, 'two', None]
valid(b"{")                             # False
```

`marshal` accepts the following:

- `None`, `bool`, `int`, `float`, `Decimal` and `str`;
- lists, tuples and mappings with string or integer keys;
- dataclass instances, where fields whose names start with `_` are left out;
- `bytes`, which are written as base64;
- `Any` values;
- `lazyjson.config.RawMessage`, which is written as it is.

Any other type raises `ValueError`.

`unmarshal` returns plain dicts, lists, strings, booleans and `None`. Numbers come back as `float`, or as `Decimal` when the configuration has `use_number` set. It raises `ValueError` on malformed input or trailing content.

### Configurations

`lazyjson.config.Config` is a frozen dataclass of options. Its `froze()` method builds an `API` with these methods:

- `marshal`, `marshal_to_string` and `marshal_indent`;
- `unmarshal` and `unmarshal_from_string`;
- `get` and `valid`;
- `new_encoder` and `new_decoder`.

These options change behaviour:

- `escape_html` writes `<`, `>`, `&`, U+2028 and U+2029 as `\u` escapes.
- `sort_map_keys` sorts the keys of mappings.
- `indention_step` sets the number of spaces per indentation level.
- `marshal_float_with_6_digits` writes floats with at most six fractional digits.
- `validate_json_raw_message` writes `null` for a `RawMessage` that is not valid JSON.
- `use_number` decodes numbers as `Decimal`.

The remaining fields are stored but not acted on: `disallow_unknown_fields`, `tag_key`, `only_tagged_field`, `object_field_must_be_simple_string` and `case_sensitive`.

Three ready-made APIs are provided:

- `CONFIG_DEFAULT`, which has HTML escaping on and is used by `lazyjson.api`;
- `CONFIG_COMPATIBLE_WITH_STANDARD_LIBRARY`, which escapes HTML, sorts keys and validates raw messages;
- `CONFIG_FASTEST`, which turns HTML escaping off and uses six-digit floats.

### Streams

`Encoder.encode(value)` writes one value per line to a text or binary stream, then flushes the stream if it can. `set_indent` and `set_escape_html` change the encoder's configuration.

`Decoder` reads the whole stream on first use and has these methods:

- `decode()` returns the next value, and raises `EOFError` when nothing is left.
- `more()` says whether another value follows before a closing bracket or the end.
- `buffered()` returns what has not been consumed, as a `BytesIO`.
- `use_number()` switches to `Decimal` numbers.
- `disallow_unknown_fields()` only records the option.

## Extras

- `lazyjson.binary_codec`
  - `encode_binary` writes bytes as a JSON string. Bytes that are not printable ASCII, the quote and the backslash become a doubled backslash followed by `x` and two hex digits.
  - `decode_binary` reverses this.
- `lazyjson.fuzzy`
  - `fuzzy_decode(data, kind)` decodes one value as the `FuzzyKind` you ask for: string, float32, float64, or a sized integer. It accepts numbers, numeric strings, booleans and null, and range-checks integers. Errors raise `ValueError`.
  - `fuzzy_decode_empty_array(data)` reads an object as a dict, and reads an array in its place as `{}`.
- `lazyjson.time_codec`
  - `encode_time(ts_ns, precision_ns)` stores a nanosecond timestamp as an integer count of a chosen unit since the epoch.
  - `decode_time(data, precision_ns)` turns such a count back into nanoseconds.
- `lazyjson.field_tags`
  - `Binding` describes one field: its name, its tags, and the keys it is read from (`from_names`) and written to (`to_names`).
  - `apply_encode_decode_only` handles decode-only (`<-`) and encode-only (`->`) fields.
  - `apply_multiple_keys` adds extra decode keys (`<:a b`) and encode keys (`>:a b`); `extract_option_value` reads such an option from a tag.
  - `apply_naming_strategy` renames fields, for example with `lower_case_with_underscores`.
  - `apply_private_fields` and `calc_field_names` handle private fields.

## What it does not do

- There is no command-line tool.
- `unmarshal` does not decode into typed objects such as dataclasses. It returns plain Python values.
- The extras are standalone functions. They are not hooked into `marshal` or `unmarshal`: the field-tag rules only update `Binding` objects, and the fuzzy, binary and time codecs must be called directly.

## Running the tests

```
pip install .[test]
pytest
```