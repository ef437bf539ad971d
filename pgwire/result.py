"""Query results: column descriptions, fields, rows and result sets."""

from __future__ import annotations

from dataclasses import dataclass, field as dataclass_field
from enum import IntEnum
from typing import Iterator, List, Optional, Sequence, Union


class FormatCode(IntEnum):
    """Transfer format of a column's values."""

    TEXT = 0
    BINARY = 1


@dataclass(frozen=True)
class Column:
    """Description of one column of a result, as sent in RowDescription."""

    name: str
    table: int = 0
    column: int = 0
    type: int = 0
    size: int = 0
    modifier: int = -1
    format: FormatCode = FormatCode.TEXT


@dataclass(frozen=True)
class Field:
    """One value of a row, together with the column it belongs to."""

    column: Column
    data: Optional[bytes] = None

    @property
    def bytes(self) -> bytes:
        """The raw value; empty when the value is NULL."""
        return b"" if self.data is None else self.data

    @property
    def name(self) -> str:
        """Name of the field's column."""
        return self.column.name

    @property
    def type(self) -> int:
        """Type OID of the field's column."""
        return self.column.type

    def is_null(self) -> bool:
        """Return whether the value is SQL NULL."""
        return self.data is None

    def string(self) -> Optional[str]:
        """Return the value as text, or None when it is NULL."""
        if self.data is None:
            return None
        return self.data.decode("utf-8")


@dataclass(frozen=True)
class Row:
    """A row of fields, addressable by position or by column name."""

    columns: Sequence[Column]
    fields: Sequence[Field]

    def __getitem__(self, key: Union[int, str]) -> Field:
        if isinstance(key, str):
            for column, value in zip(self.columns, self.fields):
                if column.name == key:
                    return value
            raise KeyError(f"row has no column named '{key}'")
        return self.fields[key]

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)


@dataclass(frozen=True)
class Result:
    """The rows returned by one command, with the command's tag."""

    command_tag: str = ""
    columns: List[Column] = dataclass_field(default_factory=list)
    rows: List[Row] = dataclass_field(default_factory=list)

    def __getitem__(self, index: int) -> Row:
        return self.rows[index]

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def empty(self) -> bool:
        """Return whether the result holds no rows."""
        return not self.rows