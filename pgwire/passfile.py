"""Lookup of passwords in a PostgreSQL password file (.pgpass)."""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

log = logging.getLogger(__name__)

_DELIMITER = ":"
_WILDCARD = "*"
_INSECURE_PERMISSIONS = stat.S_IRWXG | stat.S_IRWXO


@dataclass(frozen=True)
class PassfileFields:
    """Connection attributes matched against password file entries."""

    hostname: str
    port: str
    database: str
    username: str


def default_passfile() -> Optional[Path]:
    """Return ~/.pgpass based on HOME, or None when HOME is unset."""
    home = os.environ.get("HOME")
    if home is None:
        return None
    return Path(home) / ".pgpass"


def is_valid_passfile(path: Union[str, os.PathLike]) -> bool:
    """Return whether path is a regular file without group or world access."""
    try:
        mode = os.stat(path).st_mode
    except OSError:
        return False

    if not stat.S_ISREG(mode):
        return False

    if mode & _INSECURE_PERMISSIONS:
        log.warning(
            'password file "%s" has group or world access; '
            "permissions should be u=rw (0600) or less",
            os.fspath(path),
        )
        return False

    return True


def _next_token(tokens: Iterator[str]) -> str:
    parts = []
    for token in tokens:
        if token.endswith("\\"):
            parts.append(token[:-1] + _DELIMITER)
        else:
            parts.append(token)
            break
    return "".join(parts)


def find_password(
    fields: PassfileFields, lines: Union[str, Iterable[str]]
) -> Optional[str]:
    """Return the password of the first entry matching fields, if any."""
    if isinstance(lines, str):
        lines = lines.splitlines()

    for line in lines:
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue

        tokens = iter(trimmed.split(_DELIMITER))
        matched = True

        for expected in (fields.hostname, fields.port, fields.database, fields.username):
            token = _next_token(tokens)
            if not token or (token != _WILDCARD and token != expected):
                matched = False
                break

        if matched:
            return _next_token(tokens)

    return None


def read_passfile(
    fields: PassfileFields, path: Union[str, os.PathLike, None] = None
) -> Optional[str]:
    """Look up a password in path, or in the default password file."""
    file = Path(path) if path is not None else default_passfile()
    if file is None or not is_valid_passfile(file):
        return None

    with open(file, encoding="utf-8") as stream:
        return find_password(fields, stream)