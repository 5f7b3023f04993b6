import csv
import io
from typing import Any, Dict, List

import pandas as pd

def get_csv_as_stream(
    headers: List[str],
    rows: List[Any]
) -> str:
    """
    Use in-memory buffer to get CSV as string data. Returns the buffered string.
    """
    output_stream = io.StringIO()
    csv_writer = csv.writer(output_stream)

    csv_writer.writerow(headers)
    csv_writer.writerows(rows)

    output_stream.seek(0)

    return output_stream.getvalue()

def get_xlsx_as_bytes(
    sheets: Dict[str, pd.DataFrame],
    column_widths: Dict[str, List[int]] = None,
    include_header: Dict[str, bool] = None,
) -> bytes:
    """
    Write each DataFrame to its own worksheet, in insertion order, and return the workbook bytes.

    `column_widths` maps a sheet name to character widths for its columns A, B, C...
    """
    column_widths = column_widths or {}
    include_header = include_header or {}
    output_stream = io.BytesIO()

    with pd.ExcelWriter(output_stream, engine="openpyxl") as writer:
        for sheet_name, frame in sheets.items():
            frame.to_excel(writer, sheet_name=sheet_name, index=False, header=include_header.get(sheet_name, True))
            worksheet = writer.sheets[sheet_name]
            for position, width in enumerate(column_widths.get(sheet_name, [])):
                worksheet.column_dimensions[chr(ord("A") + position)].width = width

    return output_stream.getvalue()
