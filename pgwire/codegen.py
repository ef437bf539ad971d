"""Source generation for PostgreSQL error codes."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

_MACRO_PREFIX = "ERRCODE_"
_INCLUDE_PREFIX = "include/"
_PARSE_SQLSTATE = (
    "auto parse_sqlstate(std::string_view code) -> std::optional<sqlstate>"
)


@dataclass(frozen=True, order=True)
class Entry:
    """One SQLSTATE code and its symbolic name."""

    code: str
    name: str


def read_entries(lines: Iterable[str]) -> List[Entry]:
    """Parse the lines of an errcodes list into entries."""
    entries = []
    for line in lines:
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#") or trimmed.startswith("Section"):
            continue

        tokens = trimmed.split()
        if len(tokens) < 3 or len(tokens[2]) < len(_MACRO_PREFIX):
            raise ValueError(f"malformed error code line: {trimmed!r}")

        code, _, macro = tokens[:3]
        entries.append(Entry(code=code, name=macro[len(_MACRO_PREFIX):].lower()))
    return entries


class _Writer:
    def __init__(self) -> None:
        self._parts: List[str] = []
        self._level = 0

    def indent(self) -> None:
        if self._level > 0:
            self._parts.append(" " * (self._level * 4))

    def level_up(self) -> None:
        self._level += 1

    def level_down(self) -> None:
        self._level -= 1

    def write(self, text: str) -> None:
        self._parts.append(text)

    def writeln(self, text: Optional[str] = None) -> None:
        if text is not None:
            self.indent()
            self._parts.append(text)
        self._parts.append("\n")

    def write_banner(self, source: str) -> None:
        self.writeln(f"// autogenerated from '{source}', do not edit\n")

    def write_include(self, header: str) -> None:
        self.writeln(f"#include <{header}>")

    def write_list(self, items: Sequence[str]) -> None:
        for item in ",\n".join("\0" + item for item in items).split("\0"):
            if item:
                self.indent()
                self.write(item)
        self.writeln()

    def text(self) -> str:
        return "".join(self._parts)


def render_header(entries: Sequence[Entry], source: str) -> str:
    """Render the header declaring the sqlstate enumeration."""
    w = _Writer()
    w.write_banner(source)
    w.writeln("#pragma once")
    w.writeln()
    w.write_include("optional")
    w.write_include("string_view")
    w.writeln()
    w.writeln("namespace pg {")
    w.level_up()

    w.writeln("enum class sqlstate {")
    w.level_up()
    w.write_list([entry.name for entry in entries])
    w.level_down()
    w.writeln("};")

    w.writeln()
    w.writeln(f"{_PARSE_SQLSTATE};")

    w.level_down()
    w.writeln("}")
    return w.text()


def render_source(entries: Sequence[Entry], header: str, source: str) -> str:
    """Render the source mapping SQLSTATE codes to enumerators."""
    if header.startswith(_INCLUDE_PREFIX):
        header = header[len(_INCLUDE_PREFIX):]

    w = _Writer()
    w.write_banner(source)
    w.write_include(header)
    w.writeln()
    w.write_include("unordered_map")
    w.writeln()
    w.writeln("namespace {")
    w.writeln("using enum pg::sqlstate;")
    w.writeln()
    w.level_up()
    w.writeln(
        "const auto map = std::unordered_map<std::string_view, pg::sqlstate> {"
    )

    w.level_up()
    w.write_list([f'{{"{entry.code}", {entry.name}}}' for entry in entries])
    w.level_down()
    w.writeln("};")

    w.level_down()
    w.writeln("}")
    w.writeln()
    w.writeln("namespace pg {")
    w.level_up()

    w.writeln(f"{_PARSE_SQLSTATE} {{")
    w.level_up()
    w.writeln("const auto result = map.find(code);")
    w.writeln()
    w.writeln("if (result == map.end()) return std::nullopt;")
    w.writeln("return result->second;")
    w.level_down()
    w.writeln("}")

    w.level_down()
    w.writeln("}")
    return w.text()


def generate(
    header: Union[str, os.PathLike],
    source: Union[str, os.PathLike],
    listfile: Union[str, os.PathLike],
) -> None:
    """Read listfile and write the generated header and source files."""
    with open(listfile, encoding="utf-8") as stream:
        entries = read_entries(stream)

    list_name = os.fspath(listfile)
    Path(header).write_text(render_header(entries, list_name), encoding="utf-8")
    Path(source).write_text(
        render_source(entries, os.fspath(header), list_name), encoding="utf-8"
    )


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codegen", description="pg++ source code generation tool"
    )
    commands = parser.add_subparsers(dest="command")

    errcodes = commands.add_parser(
        "errcodes",
        help="generate header and source files for PostgreSQL error codes",
        add_help=False,
    )
    errcodes.add_argument("--help", action="help", help="show this help message")
    errcodes.add_argument(
        "-h",
        "--header",
        type=Path,
        default=Path("errcodes.hpp"),
        metavar="path",
        help="Path to the output header (.hpp) file",
    )
    errcodes.add_argument(
        "-s",
        "--source",
        type=Path,
        default=Path("errcodes.cpp"),
        metavar="path",
        help="Path to the output source (.cpp) file",
    )
    errcodes.add_argument("list", type=Path)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the code generation command line."""
    args = _parser().parse_args(argv)
    if args.command == "errcodes":
        generate(args.header, args.source, args.list)
    return 0