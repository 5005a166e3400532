"""
Topic spreadsheet parsing.

Accepts .xlsx/.xlsm workbooks (first sheet) and UTF-8 .csv files; any other
extension is rejected. The first row is a header and is skipped; every
following row is read positionally as

    lesson | unit | topic | curriculum ref | sub refs | question types

Parsing never touches the database; it only turns bytes into ImportRow
tuples that the topic catalog consumes.
"""

import csv
import io
import os
import zipfile
from dataclasses import dataclass
from typing import Iterable, Optional

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

COLUMNS = ("lesson", "unit", "topic", "curriculum_ref", "sub_refs", "question_types")

_XLSX_MAGIC = b"PK\x03\x04"
_XLSX_EXTENSIONS = (".xlsx", ".xlsm")


class SpreadsheetError(ValueError):
    pass


@dataclass(frozen=True)
class ImportRow:
    row_number: int
    lesson: Optional[str] = None
    unit: Optional[str] = None
    topic: Optional[str] = None
    curriculum_ref: Optional[str] = None
    sub_refs: Optional[str] = None
    question_types: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return bool(self.lesson) and bool(self.topic)


def _cell_text(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def _to_rows(raw_rows: Iterable[Iterable]) -> list[ImportRow]:
    rows: list[ImportRow] = []
    # spreadsheet row numbers: header is row 1
    for row_number, raw in enumerate(raw_rows, start=1):
        if row_number == 1:
            continue
        cells = [_cell_text(v) for v in list(raw)[: len(COLUMNS)]]
        if not any(cells):
            continue
        cells += [None] * (len(COLUMNS) - len(cells))
        rows.append(ImportRow(row_number, *cells))
    return rows


def _read_xlsx(data: bytes) -> list[ImportRow]:
    try:
        workbook = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError) as e:
        raise SpreadsheetError(f"Could not read workbook: {e}") from e
    try:
        if not workbook.worksheets:
            return []
        return _to_rows(workbook.worksheets[0].iter_rows(values_only=True))
    finally:
        workbook.close()


def _read_csv(data: bytes) -> list[ImportRow]:
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise SpreadsheetError("CSV file is not valid UTF-8; save it as CSV UTF-8 or upload .xlsx") from e

    try:
        dialect = csv.Sniffer().sniff(text[:2048], delimiters=",;\t")
    except csv.Error:
        dialect = csv.excel
    try:
        return _to_rows(csv.reader(io.StringIO(text), dialect))
    except csv.Error as e:
        raise SpreadsheetError(f"Could not read CSV: {e}") from e


def parse_spreadsheet(data: bytes, filename: str | None = None) -> list[ImportRow]:
    """
    Parse an uploaded topic spreadsheet into rows.

    The format is chosen by file extension. Without an extension the
    content is sniffed (xlsx files are zip archives, anything else is CSV).

    Raises:
        SpreadsheetError: the file is empty, has an unsupported extension
            (e.g. legacy .xls) or cannot be decoded.
    """
    if not data:
        raise SpreadsheetError("File is empty")

    ext = os.path.splitext((filename or "").lower())[1]
    if ext == ".csv":
        return _read_csv(data)
    if ext in _XLSX_EXTENSIONS:
        return _read_xlsx(data)
    if ext:
        raise SpreadsheetError(f"Unsupported file type '{ext}'; upload .xlsx or .csv")
    if data.startswith(_XLSX_MAGIC):
        return _read_xlsx(data)
    return _read_csv(data)
