# pgwire

Building blocks for working with PostgreSQL's binary wire format. The package
depends only on the standard library.

## What is in it

- `pgwire.sqltypes`: codecs for built-in types. Each codec has `oid`, `name`,
  `encode(value)`, `decode(data)` and `size(value)`. The codecs are
  `BoolType`, `ByteaType`, `Int2Type`, `Int4Type`, `Int8Type`, `TextType`,
  `JsonbType`, `UuidType` and `TimestamptzType`. `TimestamptzType` counts
  microseconds from 2000-01-01 UTC and treats naive datetimes as UTC.
  `OptionalType(inner)` wraps a codec so that it can hold NULL, written as
  `None`. `DebugBytes` shows raw bytes as hex pairs, for example
  `(2 bytes) 0a ff`. Malformed input raises `BadConversion`.
- `pgwire.containers`: codecs for structured values.
  - `ArrayType(element, oid=-1)` handles one-dimensional arrays. An empty list
    stands in for NULL. Decoding an array with more than one dimension raises
    `BadConversion`.
  - `CompositeType(cls, name, members, oid=-1)` maps a composite type onto a
    class. `members` is a list of `(attribute, codec)` pairs.
  - `TupleType(*codecs)` reads record values. Its `decode_row(fields)` builds a
    tuple from the raw fields of a row.
  - `EnumType(enum_cls, name, ...)` stores enum members as text labels. By
    default a member's label is its value.

  Truncated or incomplete data raises `UnexpectedData`.
- `pgwire.result`: `Column`, `Field`, `Row` and `Result`, with `FormatCode`
  giving the transfer format of a column. A `Row` can be indexed by position
  or by column name; an unknown name raises `KeyError`. `Field.string()`
  returns `None` for NULL. `Result` has a `command_tag` attribute and an
  `empty()` method.
- `pgwire.errors`: `Error` and its subclasses:
  - `BadConversion`
  - `BrokenConnection`
  - `SqlError`, which carries `ErrorFields` and has `has_sqlstate(code)`
  - `UnexpectedData`
  - `UnexpectedMessage`

  `Notice` is another name for `ErrorFields`.
- `pgwire.passfile`: password lookup in `.pgpass`-style files.
  - `find_password(fields, lines)` takes either text or an iterable of lines.
    It supports `*` wildcards and `\:` escapes, and skips comment lines and
    blank lines.
  - `read_passfile(fields, path=None)` reads a file. With no path it uses
    `$HOME/.pgpass`. It refuses files that are not regular files, and files
    that grant group or world access; for those it logs a warning.
- `pgwire.codegen`: turns PostgreSQL's `errcodes.txt` into a header and source
  file pair. The functions are `read_entries`, `render_header`,
  `render_source` and `generate`.

## Examples

```python
from pgwire.sqltypes import Int4Type, OptionalType, TextType

int4 = Int4Type()
assert int4.decode(int4.encode(42)) == 42
assert int4.size(42) == 4

nullable_text = OptionalType(TextType())
assert nullable_text.decode(None) is None
```

```python
from pgwire.passfile import PassfileFields, find_password

fields = PassfileFields(
    hostname="localhost", port="5432", database="test", username="test"
)
print(find_password(fields, "# comment\n*:5432:test:test:secret\n"))  # secret
```

## Generating SQLSTATE code

```
pgwire-codegen errcodes --header errcodes.hpp --source errcodes.cpp errcodes.txt
```

The command writes two files:

- the header, which declares an enumeration of condition names and a
  `parse_sqlstate` declaration;
- the source, which maps five-character codes to those names.

`-h`/`--header` and `-s`/`--source` default to `errcodes.hpp` and
`errcodes.cpp`. Use `--help` for help.

## What it does not do

The package makes no network connections. It has no client, so it cannot:

- start up or authenticate a session;
- send queries or prepare statements;
- stream rows through portals;
- run transactions;
- listen for notifications.

Lookups of array or custom type OIDs are not done for you. Pass the `oid`
yourself when you need it.

## Running the tests

```
pip install .[test]
pytest
```