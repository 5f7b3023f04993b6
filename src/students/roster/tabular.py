import io
from typing import Dict, List, Optional, Tuple

import pandas as pd

from src.utils.exceptions import MalformedFileError

# Rows are reported the way a spreadsheet user sees them: 1-based, after the header row
HEADER_OFFSET = 1

# openpyxl only reads the Office Open XML formats, legacy .xls is not supported
SPREADSHEET_EXTENSIONS = (".xlsx", ".xlsm")
SPREADSHEET_CONTENT_TYPES = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def display_row_number(index: int) -> int:
    """
    Convert a 0-based data row index into the row number shown to the uploader.

    Data row 0 sits right below the header, which is row 1, so it is reported as row 2.
    """
    return index + HEADER_OFFSET + 1

def is_spreadsheet(filename: Optional[str], content_type: Optional[str] = None) -> bool:
    if content_type in SPREADSHEET_CONTENT_TYPES:
        return True
    return bool(filename) and filename.lower().endswith(SPREADSHEET_EXTENSIONS)

def parse_delimited_line(line: str, delimiter: str = ",", quote: str = '"') -> List[str]:
    """
    Split one line of delimited text into trimmed fields.

    A quote character toggles the "inside quoted field" state and is dropped from the
    output. The delimiter only separates fields while outside quotes.
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False

    for char in line:
        if char == quote:
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields

def decode_text(content: bytes) -> str:
    try:
        # utf-8-sig drops the BOM that spreadsheet tools put in front of exported CSVs
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise MalformedFileError(f"Unable to read file as UTF-8 text: {exc.reason}") from exc

def read_delimited_rows(content: bytes, delimiter: str = ",") -> List[List[str]]:
    lines = [line for line in decode_text(content).split("\n") if line.strip()]
    return [parse_delimited_line(line, delimiter=delimiter) for line in lines]

def read_spreadsheet_rows(content: bytes) -> List[List[str]]:
    """
    Read the first worksheet of a workbook as rows of trimmed strings. Blank rows are dropped.
    """
    try:
        frame = pd.read_excel(
            io.BytesIO(content),
            sheet_name=0,
            header=None,
            dtype=str,
            keep_default_na=False,
        )
    except Exception as exc:
        # pandas/openpyxl raise a mix of ValueError, BadZipFile and InvalidFileException
        raise MalformedFileError(f"Unable to read spreadsheet: {exc}") from exc

    frame = frame.fillna("")
    rows = [[str(value).strip() for value in row] for row in frame.itertuples(index=False, name=None)]
    return [row for row in rows if any(row)]

def decode_rows(
    content: bytes,
    filename: Optional[str] = None,
    content_type: Optional[str] = None,
) -> List[List[str]]:
    """
    Decode an uploaded file into non-empty rows of string fields, header row first.
    """
    if is_spreadsheet(filename, content_type):
        return read_spreadsheet_rows(content)
    return read_delimited_rows(content)

def read_table(
    content: bytes,
    filename: Optional[str] = None,
    content_type: Optional[str] = None,
) -> Tuple[List[str], List[List[str]]]:
    """
    Decode a file into `(headers, data_rows)`.

    Raises MalformedFileError when there are fewer than two non-empty rows.
    """
    rows = decode_rows(content, filename, content_type)
    if len(rows) < 2:
        raise MalformedFileError("File must contain at least a header and one data row")
    return rows[0], rows[1:]

def read_records(
    content: bytes,
    filename: Optional[str] = None,
    content_type: Optional[str] = None,
) -> List[Dict[str, str]]:
    """
    Decode a file into one mapping per data row, keyed by header. Unnamed columns are dropped
    and short rows are padded with empty strings. A header-only file yields no records.
    """
    rows = decode_rows(content, filename, content_type)
    if not rows:
        return []

    headers = rows[0]
    records: List[Dict[str, str]] = []
    for row in rows[1:]:
        records.append({
            header: (row[position] if position < len(row) else "")
            for position, header in enumerate(headers)
            if header
        })
    return records
