"""Binary encodings of PostgreSQL's built-in SQL types."""

from __future__ import annotations

import json
import struct
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from .errors import BadConversion

_PG_EPOCH = datetime(2000, 1, 1, tzinfo=timezone.utc)
_MICROSECOND = timedelta(microseconds=1)


class SqlType:
    """A SQL type with its OID, name and binary wire format."""

    oid: int = -1
    name: str = ""

    def encode(self, value: Any) -> bytes:
        """Return the binary representation of value."""
        raise NotImplementedError

    def decode(self, data: bytes) -> Any:
        """Return the value held in data."""
        raise NotImplementedError

    def size(self, value: Any) -> int:
        """Return the number of bytes the encoded value occupies."""
        return len(self.encode(value))


class BoolType(SqlType):
    """bool: a single byte, 1 for true and 0 for false."""

    oid = 16
    name = "bool"

    def encode(self, value: bool) -> bytes:
        return b"\x01" if value else b"\x00"

    def decode(self, data: bytes) -> bool:
        if len(data) != 1:
            raise BadConversion(f"bool requires 1 byte, got {len(data)}")
        return data != b"\x00"

    def size(self, value: bool) -> int:
        return 1


class ByteaType(SqlType):
    """bytea: raw bytes."""

    oid = 17
    name = "bytea"

    def encode(self, value: bytes) -> bytes:
        return bytes(value)

    def decode(self, data: bytes) -> bytes:
        return bytes(data)


class _IntType(SqlType):
    _format = ""

    def encode(self, value: int) -> bytes:
        try:
            return struct.pack(self._format, value)
        except struct.error as exc:
            raise BadConversion(f"{value!r} does not fit in {self.name}") from exc

    def decode(self, data: bytes) -> int:
        try:
            return struct.unpack(self._format, data)[0]
        except struct.error as exc:
            raise BadConversion(
                f"{self.name} requires {struct.calcsize(self._format)} bytes, "
                f"got {len(data)}"
            ) from exc

    def size(self, value: int) -> int:
        return struct.calcsize(self._format)


class Int2Type(_IntType):
    """int2: big-endian 16-bit signed integer."""

    oid = 21
    name = "int2"
    _format = ">h"


class Int4Type(_IntType):
    """int4: big-endian 32-bit signed integer."""

    oid = 23
    name = "int4"
    _format = ">i"


class Int8Type(_IntType):
    """int8: big-endian 64-bit signed integer."""

    oid = 20
    name = "int8"
    _format = ">q"


class TextType(SqlType):
    """text: UTF-8 encoded characters."""

    oid = 25
    name = "text"

    def encode(self, value: str) -> bytes:
        return value.encode("utf-8")

    def decode(self, data: bytes) -> str:
        try:
            return bytes(data).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise BadConversion(f"invalid text data: {exc}") from exc


class JsonbType(SqlType):
    """jsonb: a version byte followed by JSON text."""

    oid = 3802
    name = "jsonb"
    version = 1

    def encode(self, value: Any) -> bytes:
        text = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        return bytes([self.version]) + text.encode("utf-8")

    def decode(self, data: bytes) -> Any:
        if not data:
            raise BadConversion("jsonb value is missing its version byte")
        if data[0] != self.version:
            raise BadConversion(f"unsupported jsonb version: {data[0]}")
        try:
            return json.loads(bytes(data[1:]).decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise BadConversion(f"invalid jsonb data: {exc}") from exc


class UuidType(SqlType):
    """uuid: 16 raw bytes."""

    oid = 2950
    name = "uuid"

    def encode(self, value: uuid.UUID) -> bytes:
        return value.bytes

    def decode(self, data: bytes) -> uuid.UUID:
        if len(data) != 16:
            raise BadConversion(f"uuid requires 16 bytes, got {len(data)}")
        return uuid.UUID(bytes=bytes(data))

    def size(self, value: uuid.UUID) -> int:
        return 16


class TimestamptzType(SqlType):
    """timestamptz: microseconds since 2000-01-01 UTC as int8."""

    oid = 1184
    name = "timestamptz"

    def __init__(self) -> None:
        self._int8 = Int8Type()

    def encode(self, value: datetime) -> bytes:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return self._int8.encode((value - _PG_EPOCH) // _MICROSECOND)

    def decode(self, data: bytes) -> datetime:
        micros = self._int8.decode(data)
        try:
            return _PG_EPOCH + timedelta(microseconds=micros)
        except OverflowError as exc:
            raise BadConversion(f"timestamp out of range: {micros}") from exc

    def size(self, value: datetime) -> int:
        return 8


class OptionalType(SqlType):
    """A nullable wrapper around another type; None stands for NULL."""

    def __init__(self, inner: SqlType) -> None:
        self.inner = inner
        self.oid = inner.oid
        self.name = inner.name

    def encode(self, value: Any) -> bytes:
        if value is None:
            raise BadConversion("NULL has no binary representation")
        return self.inner.encode(value)

    def decode(self, data: Optional[bytes]) -> Any:
        if data is None:
            return None
        return self.inner.decode(data)

    def size(self, value: Any) -> int:
        if value is None:
            raise BadConversion("NULL has no binary representation")
        return self.inner.size(value)

    def is_null(self, value: Any) -> bool:
        """Return whether value stands for NULL."""
        return value is None

    def null(self) -> None:
        """Return the value that stands for NULL."""
        return None


class DebugBytes:
    """Raw bytes of a value, shown as hexadecimal for inspection."""

    def __init__(self, data: bytes) -> None:
        self.data = bytes(data)
        self._hex = " ".join(f"{byte:02x}" for byte in self.data)

    def string(self) -> str:
        """Return the bytes as space separated hexadecimal pairs."""
        return self._hex

    def __str__(self) -> str:
        count = len(self.data)
        return f"({count} byte{'' if count == 1 else 's'}) {self._hex}"