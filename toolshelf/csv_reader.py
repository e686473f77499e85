"""Load catalogue CSV files into :class:`~toolshelf.models.Record` objects.

Files live under ``<resource_root>/document/``. Parsing is all-or-nothing:
the first row that does not decode, or whose cell count differs from the
header's, aborts the whole file with :class:`~toolshelf.errors.InvalidDataError`.
"""

from __future__ import annotations

import csv
import io
import logging
import re
from pathlib import Path
from typing import Iterable, List, Sequence, Set

import pandas as pd
from pydantic import ValidationError

from toolshelf.config import PathsConfig
from toolshelf.errors import InvalidDataError, InvalidInputError
from toolshelf.models import Record

__all__ = [
    "distinct_types",
    "filter_records",
    "parse_csv_file",
    "read_csv_file",
    "read_type_set",
]

logger = logging.getLogger(__name__)

# Header names matched regardless of case.
_CASE_INSENSITIVE_COLUMNS = {"url": "URL", "os": "OS"}

# pandas parser errors name the file line, e.g. "... in line 3, saw 7"
_PARSER_LINE = re.compile(r"line (\d+)")


def _normalize_header(cells: Sequence[object]) -> List[str]:
    header: List[str] = []
    for cell in cells:
        name = str(cell)
        name = _CASE_INSENSITIVE_COLUMNS.get(name.lower(), name)
        if name in header:
            raise InvalidDataError(f"duplicate field `{name}` in header")
        header.append(name)
    return header


def _validation_detail(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<row>"
        parts.append(f"{loc}: {err.get('msg', '')}")
    return "; ".join(parts)


def _decode_text(raw: bytes) -> str:
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        # Line 0 is the header, so the newline count is the data row.
        row = raw[: exc.start].count(b"\n")
        raise InvalidDataError(f"invalid UTF-8 ({exc.reason})", row=row or None) from exc
    return text[1:] if text.startswith("\ufeff") else text


def _is_blank(row: List[str]) -> bool:
    # pandas skips these lines, so they never count as records
    return not row or (len(row) == 1 and not row[0].strip())


def _check_field_counts(text: str) -> None:
    rows = (row for row in csv.reader(io.StringIO(text)) if not _is_blank(row))
    header = next(rows, None)
    if header is None:
        return
    for row_number, row in enumerate(rows, start=1):
        if len(row) != len(header):
            raise InvalidDataError(
                f"found record with {len(row)} fields, but the header has {len(header)}",
                row=row_number,
            )


def _read_frame(text: str) -> pd.DataFrame:
    # header=None keeps the raw header cells as row 0 so duplicates are
    # seen before pandas renames them.
    try:
        return pd.read_csv(
            io.StringIO(text),
            header=None,
            dtype=str,
            keep_default_na=False,
            na_filter=False,
        )
    except pd.errors.ParserError as exc:
        match = _PARSER_LINE.search(str(exc))
        row = int(match.group(1)) - 1 if match else None
        raise InvalidDataError(str(exc), row=row) from exc


def parse_csv_file(resource_path: str | Path) -> List[Record]:
    """Parse a catalogue CSV file and return its records in file order.

    Raises
    ------
    InvalidInputError
        ``resource_path`` is empty.
    FileNotFoundError, PermissionError, OSError
        The file cannot be opened; raised unchanged.
    InvalidDataError
        The file is not UTF-8, the header repeats a field, or a row is
        ragged or fails to decode; no records are returned.
    """

    if resource_path is None or str(resource_path) == "":
        raise InvalidInputError("Resource path cannot be empty")

    text = _decode_text(Path(resource_path).read_bytes())
    _check_field_counts(text)
    try:
        frame = _read_frame(text)
    except pd.errors.EmptyDataError:
        return []

    header = _normalize_header(frame.iloc[0].tolist())

    records: List[Record] = []
    rows = frame.iloc[1:].itertuples(index=False, name=None)
    for row_number, values in enumerate(rows, start=1):
        try:
            records.append(Record.model_validate(dict(zip(header, values))))
        except ValidationError as exc:
            raise InvalidDataError(_validation_detail(exc), row=row_number) from exc

    return records


def read_csv_file(resource_root: str | Path, filename: str) -> List[Record]:
    """Read ``<resource_root>/document/<filename>``."""

    if not filename:
        raise InvalidInputError("Filename cannot be empty")

    csv_path = PathsConfig(resource_root=resource_root).document_path(filename)
    records = parse_csv_file(csv_path)
    logger.debug("Parsed %d records from %s", len(records), csv_path)
    return records


def distinct_types(records: Iterable[Record]) -> Set[str]:
    """Union of every record's ``type`` tags."""

    type_set: Set[str] = set()
    for record in records:
        type_set.update(record.type)
    return type_set


def read_type_set(resource_root: str | Path, filename: str) -> Set[str]:
    """Distinct ``Type`` tags in one catalogue file.

    Parser errors propagate unchanged.
    """

    return distinct_types(read_csv_file(resource_root, filename))


def filter_records(records: Iterable[Record], keyword: str | None) -> List[Record]:
    """Keep records where any field value contains ``keyword`` (case-insensitive).

    A blank keyword keeps everything.
    """

    records = list(records)
    needle = (keyword or "").strip().lower()
    if not needle:
        return records

    matched: List[Record] = []
    for record in records:
        values = []
        for value in record.to_json_dict().values():
            if isinstance(value, list):
                values.extend(str(v) for v in value)
            else:
                values.append(str(value))
        if needle in " ".join(values).lower():
            matched.append(record)
    return matched
