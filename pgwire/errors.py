"""Exception hierarchy for the PostgreSQL client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class Error(Exception):
    """Base class of every error raised by the client."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BadConversion(Error):
    """A value could not be converted to or from its SQL representation."""


class BrokenConnection(Error):
    """The connection to the server was lost."""

    def __init__(self, message: str = "connection to server was lost") -> None:
        super().__init__(message)


@dataclass
class ErrorFields:
    """Fields of an ErrorResponse or NoticeResponse message."""

    column: str = ""
    constraint: str = ""
    data_type: str = ""
    detail: str = ""
    file: str = ""
    hint: str = ""
    internal_position: int = 0
    internal_query: str = ""
    line: int = 0
    message: str = ""
    original_position: int = 0
    routine: str = ""
    severity: str = ""
    schema: str = ""
    sqlstate: Optional[str] = None
    table: str = ""
    where: str = ""


Notice = ErrorFields


class SqlError(Error):
    """An error reported by the server."""

    def __init__(self, fields: ErrorFields) -> None:
        super().__init__(fields.message)
        self.fields = fields

    def has_sqlstate(self, sqlstate: str) -> bool:
        """Return whether the error carries the given SQLSTATE."""
        return self.fields.sqlstate is not None and self.fields.sqlstate == sqlstate


class UnexpectedData(Error):
    """The server sent data that does not fit what was expected."""


class UnexpectedMessage(Error):
    """The server sent a message of an unexpected type."""

    def __init__(self, code: str) -> None:
        super().__init__(f"unexpected message type: '{code}'")
        self.code = code