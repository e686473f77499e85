from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from toolshelf.csv_reader import (
    distinct_types,
    filter_records,
    parse_csv_file,
    read_csv_file,
    read_type_set,
)
from toolshelf.errors import InvalidDataError, InvalidInputError
from toolshelf.models import Record

HEADER = "Name,Notes,URL,Level,Type\n"


def _write(tmp_path: Path, text: str, name: str = "tools.csv") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_parse_csv_file_keeps_row_order_and_decodes_tags(resource_root: Path) -> None:
    records = parse_csv_file(resource_root / "document" / "Linux.csv")

    assert [r.name for r in records] == ["ripgrep", "Neovim"]
    first, second = records
    assert first.level == 5
    assert first.example == "rg --files"
    assert first.platform == ["Linux", "macOS"]
    assert first.os == ["Linux", "macOS", "Windows"]
    assert second.example is None
    assert second.type == ["Editor", "CLI"]
    assert second.language == ["C", "Lua"]


def test_parse_csv_file_header_only_and_empty_file(tmp_path: Path) -> None:
    assert parse_csv_file(_write(tmp_path, HEADER)) == []
    assert parse_csv_file(_write(tmp_path, "", name="empty.csv")) == []


def test_parse_csv_file_empty_path_is_invalid_input() -> None:
    with pytest.raises(InvalidInputError):
        parse_csv_file("")


def test_parse_csv_file_missing_file_is_not_found(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        parse_csv_file(tmp_path / "nope.csv")


@pytest.mark.parametrize("level", ["256", "-3", "high"])
def test_parse_csv_file_bad_level_fails_whole_file(tmp_path: Path, level: str) -> None:
    path = _write(tmp_path, HEADER + "a,n,https://a,1,CLI\n" + f"b,n,https://b,{level},CLI\n")

    with pytest.raises(InvalidDataError) as excinfo:
        parse_csv_file(path)

    assert excinfo.value.row == 2
    assert "Level" in str(excinfo.value)


def test_parse_csv_file_missing_required_column(tmp_path: Path) -> None:
    path = _write(tmp_path, "Name,Notes,Level\nfd,finder,3\n")

    with pytest.raises(InvalidDataError) as excinfo:
        parse_csv_file(path)

    assert "URL" in excinfo.value.detail


@pytest.mark.parametrize(
    "bad_row",
    [
        "b,n,https://b,2\n",
        "b,n,https://b,2,CLI,extra\n",
        "b,n,https://b,2,CLI,,\n",
    ],
    ids=["short", "long", "trailing-commas"],
)
def test_parse_csv_file_ragged_row_fails_whole_file(tmp_path: Path, bad_row: str) -> None:
    path = _write(tmp_path, HEADER + "a,n,https://a,1,CLI\n" + bad_row + "c,n,https://c,3,CLI\n")

    with pytest.raises(InvalidDataError) as excinfo:
        parse_csv_file(path)

    assert excinfo.value.row == 2
    assert "the header has 5" in str(excinfo.value)


def test_parse_csv_file_long_first_row(tmp_path: Path) -> None:
    path = _write(tmp_path, HEADER + "a,n,https://a,1,CLI,surplus\n")

    with pytest.raises(InvalidDataError) as excinfo:
        parse_csv_file(path)

    assert excinfo.value.row == 1


def test_parse_csv_file_blank_lines_do_not_shift_row_numbers(tmp_path: Path) -> None:
    path = _write(tmp_path, HEADER + "a,n,https://a,1,CLI\n\n" + "b,n,https://b,2\n")

    with pytest.raises(InvalidDataError) as excinfo:
        parse_csv_file(path)

    assert excinfo.value.row == 2


def test_parse_csv_file_invalid_utf8_reports_row(tmp_path: Path) -> None:
    path = tmp_path / "latin1.csv"
    path.write_bytes(HEADER.encode() + b"a,n,https://a,1,CLI\n" + b"caf\xe9,n,https://b,2,CLI\n")

    with pytest.raises(InvalidDataError) as excinfo:
        parse_csv_file(path)

    assert excinfo.value.row == 2
    assert "UTF-8" in str(excinfo.value)


def test_parse_csv_file_strips_utf8_bom(tmp_path: Path) -> None:
    path = tmp_path / "bom.csv"
    path.write_bytes(b"\xef\xbb\xbf" + (HEADER + "a,n,https://a,1,CLI\n").encode())

    (record,) = parse_csv_file(path)

    assert record.name == "a"


@pytest.mark.parametrize(
    "header",
    ["Name,Notes,URL,Level,url\n", "Name,Notes,URL,Level,OS,os\n", "Name,Name,Notes,URL,Level\n"],
)
def test_parse_csv_file_rejects_duplicate_header_fields(tmp_path: Path, header: str) -> None:
    width = header.count(",") + 1
    path = _write(tmp_path, header + ",".join(["x"] * width) + "\n")

    with pytest.raises(InvalidDataError) as excinfo:
        parse_csv_file(path)

    assert "duplicate field" in str(excinfo.value)
    assert excinfo.value.row is None


def test_parse_csv_file_matches_url_and_os_headers_case_insensitively(tmp_path: Path) -> None:
    path = _write(tmp_path, "Name,Notes,url,Level,os\nfd,finder,https://fd,3,\"Linux, BSD\"\n")

    (record,) = parse_csv_file(path)

    assert record.url == "https://fd"
    assert record.os == ["Linux", "BSD"]


def test_parse_csv_file_keeps_leading_zeros_as_text_until_decoded(tmp_path: Path) -> None:
    path = _write(tmp_path, HEADER + "007,00123,https://bond,007,CLI\n")

    (record,) = parse_csv_file(path)

    assert record.name == "007"
    assert record.notes == "00123"
    assert record.level == 7


def test_read_csv_file_resolves_document_dir(resource_root: Path) -> None:
    records = read_csv_file(resource_root, "Linux.csv")
    assert len(records) == 2


def test_read_csv_file_rejects_empty_filename_before_touching_disk(resource_root: Path) -> None:
    with patch("toolshelf.csv_reader.parse_csv_file") as mock_parse:
        with pytest.raises(InvalidInputError):
            read_csv_file(resource_root, "")

    mock_parse.assert_not_called()


def test_read_csv_file_without_resource_root_is_not_found() -> None:
    with pytest.raises(FileNotFoundError):
        read_csv_file("", "Linux.csv")


def test_distinct_types_unions_type_tags() -> None:
    base = {"name": "x", "notes": "n", "url": "u", "level": 1}
    records = [Record(type=["A", "B"], **base), Record(type=["B", "C"], **base)]

    assert distinct_types(records) == {"A", "B", "C"}


def test_read_type_set_over_file(resource_root: Path) -> None:
    assert read_type_set(resource_root, "Linux.csv") == {"CLI", "Editor"}


def test_read_type_set_propagates_parser_errors(tmp_path: Path) -> None:
    (tmp_path / "document").mkdir()
    _write(tmp_path / "document", HEADER + "a,n,https://a,999,CLI\n", name="bad.csv")

    with pytest.raises(InvalidDataError):
        read_type_set(tmp_path, "bad.csv")
    with pytest.raises(FileNotFoundError):
        read_type_set(tmp_path, "missing.csv")


def test_filter_records_matches_any_field_case_insensitively(resource_root: Path) -> None:
    records = read_csv_file(resource_root, "Linux.csv")

    assert [r.name for r in filter_records(records, "lua")] == ["Neovim"]
    assert [r.name for r in filter_records(records, "WINDOWS")] == ["ripgrep"]
    assert [r.name for r in filter_records(records, "cli")] == ["ripgrep", "Neovim"]
    assert filter_records(records, "  ") == records
    assert filter_records(records, None) == records
    assert filter_records(records, "cobol") == []
