"""Binary encodings of arrays, composite types, row tuples and enums."""

from __future__ import annotations

import enum
import io
import struct
from typing import (
    Any,
    Callable,
    Iterable,
    List,
    Optional,
    Sequence,
    Tuple,
    Type,
)

from .errors import BadConversion, UnexpectedData
from .sqltypes import SqlType, TextType

_INT32 = struct.Struct(">i")
_NULL_LENGTH = -1


class _Reader:
    """Sequential reader over a binary value."""

    def __init__(self, data: bytes) -> None:
        self._stream = io.BytesIO(bytes(data))

    def read(self, count: int) -> bytes:
        chunk = self._stream.read(count)
        if len(chunk) != count:
            raise UnexpectedData(
                f"expected {count} bytes of data, got {len(chunk)}"
            )
        return chunk

    def int32(self) -> int:
        return _INT32.unpack(self.read(4))[0]

    def value(self, sql_type: SqlType) -> Any:
        length = self.int32()
        if length == _NULL_LENGTH:
            return _null_of(sql_type)
        if length < 0:
            raise UnexpectedData(f"invalid value length: {length}")
        return sql_type.decode(self.read(length))


def _is_nullable(sql_type: Any) -> bool:
    return callable(getattr(sql_type, "is_null", None)) and callable(
        getattr(sql_type, "null", None)
    )


def _null_of(sql_type: Any) -> Any:
    if not _is_nullable(sql_type):
        raise UnexpectedData(f"unexpected NULL value for type '{sql_type.name}'")
    return sql_type.null()


def _encode_value(sql_type: Any, value: Any) -> bytes:
    if _is_nullable(sql_type) and sql_type.is_null(value):
        return _INT32.pack(_NULL_LENGTH)
    data = sql_type.encode(value)
    return _INT32.pack(len(data)) + data


def _value_size(sql_type: Any, value: Any) -> int:
    if _is_nullable(sql_type) and sql_type.is_null(value):
        return 4
    return 4 + sql_type.size(value)


def _decode_field(sql_type: Any, data: Optional[bytes]) -> Any:
    if data is None:
        return _null_of(sql_type)
    return sql_type.decode(data)


class ArrayType(SqlType):
    """A one-dimensional array of elements of another type.

    The array's OID is looked up from the server for the element type; it
    stays -1 until it is known.
    """

    def __init__(self, element: SqlType, oid: int = -1) -> None:
        self.element = element
        self.oid = oid
        self.name = f"_{element.name}" if element.name else ""

    def encode(self, values: Sequence[Any]) -> bytes:
        values = list(values)
        element = self.element
        has_nulls = _is_nullable(element) and any(
            element.is_null(value) for value in values
        )

        parts = [
            _INT32.pack(1 if values else 0),
            _INT32.pack(1 if has_nulls else 0),
            _INT32.pack(element.oid),
        ]
        if values:
            parts.append(_INT32.pack(len(values)))
            parts.append(_INT32.pack(1))  # lower bound
            parts.extend(_encode_value(element, value) for value in values)
        return b"".join(parts)

    def decode(self, data: bytes) -> List[Any]:
        reader = _Reader(data)
        dimensions = reader.int32()
        if dimensions > 1:
            raise BadConversion(f"invalid number of dimensions: {dimensions}")

        reader.int32()  # flags
        reader.int32()  # element type

        if dimensions == 0:
            return []

        length = reader.int32()
        reader.int32()  # lower bound
        return [reader.value(self.element) for _ in range(length)]

    def size(self, values: Sequence[Any]) -> int:
        values = list(values)
        if not values:
            return 4 * 3
        return 4 * 5 + sum(_value_size(self.element, value) for value in values)

    def is_null(self, values: Sequence[Any]) -> bool:
        """Arrays are never NULL; an empty array stands in for it."""
        return False

    def null(self) -> List[Any]:
        """Return the value that stands in for NULL: an empty list."""
        return []


class CompositeType(SqlType):
    """A user-defined composite type mapped onto a Python class.

    ``members`` lists the attribute names and their SQL types in column
    order. Decoded values are built by calling ``cls`` with the attributes
    as keyword arguments.
    """

    def __init__(
        self,
        cls: Callable[..., Any],
        name: str,
        members: Iterable[Tuple[str, SqlType]],
        oid: int = -1,
    ) -> None:
        self.cls = cls
        self.name = name
        self.members = list(members)
        self.oid = oid

    def encode(self, value: Any) -> bytes:
        parts = [_INT32.pack(len(self.members))]
        for attribute, sql_type in self.members:
            parts.append(_INT32.pack(sql_type.oid))
            parts.append(_encode_value(sql_type, getattr(value, attribute)))
        return b"".join(parts)

    def decode(self, data: bytes) -> Any:
        reader = _Reader(data)
        fields = reader.int32()
        values = {}
        for attribute, sql_type in self.members:
            if fields == 0:
                raise UnexpectedData("missing field")
            fields -= 1
            reader.int32()  # member type
            values[attribute] = reader.value(sql_type)
        return self.cls(**values)

    def decode_row(self, fields: Sequence[Optional[bytes]]) -> Any:
        """Build a value from the fields of a result row, in column order."""
        fields = list(fields)
        if len(fields) < len(self.members):
            raise UnexpectedData("missing field")
        values = {
            attribute: _decode_field(sql_type, data)
            for (attribute, sql_type), data in zip(self.members, fields)
        }
        return self.cls(**values)

    def size(self, value: Any) -> int:
        return (
            4
            + 4 * len(self.members)
            + sum(
                _value_size(sql_type, getattr(value, attribute))
                for attribute, sql_type in self.members
            )
        )


class TupleType:
    """A tuple of values read from a record or from the fields of a row."""

    def __init__(self, *types: SqlType) -> None:
        self.types = types

    def decode(self, data: bytes) -> Tuple[Any, ...]:
        """Read a tuple from a binary record value."""
        reader = _Reader(data)
        fields = reader.int32()
        values = []
        for sql_type in self.types:
            reader.int32()  # member type
            if fields == 0:
                raise UnexpectedData("missing field")
            fields -= 1
            values.append(reader.value(sql_type))
        return tuple(values)

    def decode_row(self, fields: Sequence[Optional[bytes]]) -> Tuple[Any, ...]:
        """Read a tuple from the fields of a result row."""
        fields = list(fields)
        if len(fields) < len(self.types):
            raise UnexpectedData("missing field")
        return tuple(
            _decode_field(sql_type, data)
            for sql_type, data in zip(self.types, fields)
        )


class EnumType(SqlType):
    """A user-defined SQL enum mapped onto a Python enumeration.

    Members are written as their labels; by default a member's label is its
    value.
    """

    def __init__(
        self,
        enum_cls: Type[enum.Enum],
        name: str,
        to_string: Optional[Callable[[Any], str]] = None,
        from_string: Optional[Callable[[str], Any]] = None,
        oid: int = -1,
    ) -> None:
        self.enum_cls = enum_cls
        self.name = name
        self.oid = oid
        self._text = TextType()
        self._to_string = to_string or (lambda member: str(member.value))
        self._from_string = from_string or self._lookup

    def _lookup(self, label: str) -> Any:
        for member in self.enum_cls:
            if str(member.value) == label:
                return member
        raise BadConversion(f"'{label}' is not a label of enum '{self.name}'")

    def encode(self, value: Any) -> bytes:
        return self._text.encode(self._to_string(value))

    def decode(self, data: bytes) -> Any:
        return self._from_string(self._text.decode(data))

    def size(self, value: Any) -> int:
        return len(self.encode(value))