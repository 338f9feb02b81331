"""FileParserService -- reads raw upload bytes into string tables.

Delimited text goes through the quote-aware ``csv`` reader; workbooks are
opened with openpyxl. Which bulk schema the tables form is decided by
:mod:`bulkfiling.agents.idp.schema_matcher`.
"""

from __future__ import annotations

import csv
import io
import zipfile
from pathlib import PurePath

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from bulkfiling.agents.idp.cells import clean_row, is_blank
from bulkfiling.agents.idp.schema_matcher import (
    FlatSchema,
    RelationalSchema,
    detect_schema,
)
from bulkfiling.core.exceptions import InvalidFileError
from bulkfiling.core.logging import get_logger
from bulkfiling.core.types import Table

logger = get_logger(__name__)

SPREADSHEET_EXTENSIONS = frozenset({".xlsx", ".xlsm"})
DELIMITERS: dict[str, str] = {".csv": ",", ".txt": ",", ".tsv": "\t"}


def extension_of(filename: str) -> str:
    return PurePath(filename).suffix.lower()


def read_delimited(data: bytes, filename: str, delimiter: str = ",") -> Table:
    """Decode and split delimited text; fully blank lines are dropped."""
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise InvalidFileError(filename, "file is not valid UTF-8 text") from exc
    if "\x00" in text:
        raise InvalidFileError(filename, "file looks binary, not delimited text")

    try:
        rows = [
            clean_row(values)
            for values in csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
        ]
    except csv.Error as exc:
        raise InvalidFileError(filename, f"unreadable delimited text: {exc}") from exc
    return [row for row in rows if not is_blank(row)]


def read_workbook(data: bytes, filename: str) -> dict[str, Table]:
    """Read every sheet of a workbook into string tables, keyed by sheet name."""
    try:
        wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except (zipfile.BadZipFile, InvalidFileException, KeyError, ValueError, OSError) as exc:
        raise InvalidFileError(filename, f"unreadable workbook: {exc}") from exc

    try:
        sheets: dict[str, Table] = {}
        for ws in wb.worksheets:
            rows = (clean_row(values, trim_trailing=True) for values in ws.iter_rows(values_only=True))
            sheets[ws.title] = [row for row in rows if not is_blank(row)]
        return sheets
    finally:
        wb.close()


def parse_upload(data: bytes, filename: str) -> FlatSchema | RelationalSchema:
    """Turn an upload into one of the two parse variants.

    Raises:
        InvalidFileError: unsupported type, unreadable content, or fewer
            than two rows (header + one data row) in the entity table.
    """
    ext = extension_of(filename)

    if ext in SPREADSHEET_EXTENSIONS:
        sheets = read_workbook(data, filename)
        schema = detect_schema(sheets)
    elif ext in DELIMITERS:
        schema = FlatSchema(rows=read_delimited(data, filename, DELIMITERS[ext]))
    else:
        raise InvalidFileError(filename, f"unsupported file type {ext or '(none)'!r}")

    if schema.data_row_count < 1:
        where = "Client List sheet" if schema.kind == "relational" else "file"
        raise InvalidFileError(filename, f"no data rows found in {where}")

    logger.info(
        "upload_parsed",
        filename=filename,
        schema=schema.kind,
        data_rows=schema.data_row_count,
    )
    return schema
