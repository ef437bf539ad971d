import pytest

from pgwire.codegen import (
    Entry,
    generate,
    main,
    read_entries,
    render_header,
    render_source,
)

LIST_TEXT = """\
# Comment line
Section: Class 00 - Successful Completion

00000    S    ERRCODE_SUCCESSFUL_COMPLETION    successful_completion
Section: Class 01 - Warning
01000    W    ERRCODE_WARNING    warning
42P01    E    ERRCODE_UNDEFINED_TABLE    undefined_table
"""


def test_read_entries():
    entries = read_entries(LIST_TEXT.splitlines())
    assert entries == [
        Entry("00000", "successful_completion"),
        Entry("01000", "warning"),
        Entry("42P01", "undefined_table"),
    ]


def test_read_entries_skips_blank_and_comment_lines():
    assert read_entries(["", "   ", "# x", "Section: y"]) == []


def test_read_entries_malformed():
    with pytest.raises(ValueError):
        read_entries(["00000 S"])


def test_entries_order_by_code():
    entries = [Entry("42P01", "b"), Entry("00000", "a")]
    assert sorted(entries)[0].code == "00000"


def test_render_header_single_entry():
    text = render_header([Entry("00000", "successful_completion")], "errcodes.txt")
    assert text == (
        "// autogenerated from 'errcodes.txt', do not edit\n"
        "\n"
        "#pragma once\n"
        "\n"
        "#include <optional>\n"
        "#include <string_view>\n"
        "\n"
        "namespace pg {\n"
        "    enum class sqlstate {\n"
        "        successful_completion\n"
        "    };\n"
        "\n"
        "    auto parse_sqlstate(std::string_view code)"
        " -> std::optional<sqlstate>;\n"
        "}\n"
    )


def test_render_header_lists_names_in_order():
    entries = read_entries(LIST_TEXT.splitlines())
    lines = render_header(entries, "list").splitlines()
    start = lines.index("    enum class sqlstate {")
    names = [line.strip().rstrip(",") for line in lines[start + 1 : start + 4]]
    assert names == [entry.name for entry in entries]
    assert lines[start + 1].endswith(",")
    assert not lines[start + 3].endswith(",")


def test_render_source_strips_include_prefix():
    text = render_source([Entry("00000", "successful_completion")], "include/a/b.hpp", "l")
    assert "#include <a/b.hpp>\n" in text
    assert "include/a/b.hpp" not in text


def test_render_source_keeps_other_header_paths():
    text = render_source([], "gen/errcodes.hpp", "l")
    assert "#include <gen/errcodes.hpp>\n" in text


def test_generate_writes_files(tmp_path):
    listfile = tmp_path / "errcodes.txt"
    listfile.write_text(LIST_TEXT)
    header = tmp_path / "out.hpp"
    source = tmp_path / "out.cpp"

    generate(header, source, listfile)

    entries = read_entries(LIST_TEXT.splitlines())
    assert header.read_text() == render_header(entries, str(listfile))
    assert source.read_text() == render_source(entries, str(header), str(listfile))


def test_main_with_options(tmp_path):
    listfile = tmp_path / "errcodes.txt"
    listfile.write_text(LIST_TEXT)
    header = tmp_path / "h.hpp"
    source = tmp_path / "s.cpp"

    code = main(["errcodes", "-h", str(header), "-s", str(source), str(listfile)])

    assert code == 0
    entries = read_entries(LIST_TEXT.splitlines())
    assert header.read_text() == render_header(entries, str(listfile))
    assert source.read_text() == render_source(entries, str(header), str(listfile))


def test_main_default_paths(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "errcodes.txt").write_text(LIST_TEXT)

    assert main(["errcodes", "errcodes.txt"]) == 0

    entries = read_entries(LIST_TEXT.splitlines())
    assert (tmp_path / "errcodes.hpp").read_text() == render_header(entries, "errcodes.txt")
    assert (tmp_path / "errcodes.cpp").read_text() == render_source(
        entries, "errcodes.hpp", "errcodes.txt"
    )


def test_main_without_command():
    assert main([]) == 0


def test_main_missing_list_argument():
    with pytest.raises(SystemExit):
        main(["errcodes"])