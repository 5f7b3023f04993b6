from typing import List, Optional

from loguru import logger

from src.config import (
    FULL_NAME_MAX_LENGTH,
    NAMES_REQUIRED_COLUMNS,
    REG_NO_MAX_LENGTH,
    settings,
)
from src.students.roster.models import RowDiagnostic
from src.students.roster.tabular import display_row_number, read_table
from src.students.upload_names.schemas import ParsedStudent, UploadNamesResponse
from src.utils.exceptions import MissingColumnsError

def parse_student_names(
    content: bytes,
    filename: Optional[str] = None,
    content_type: Optional[str] = None,
    error_limit: Optional[int] = None,
) -> UploadNamesResponse:
    """
    Entry function for the names step of a roster import.

    Reads a two column file (Full Name, Registration Number) and returns the rows that pass
    validation. Nothing is persisted. Missing headers fail the whole request; bad rows are
    skipped with a diagnostic and only the first `error_limit` diagnostics are returned.
    """
    if error_limit is None:
        error_limit = settings.parse_error_limit

    headers, data_rows = read_table(content, filename, content_type)
    logger.info("Names file '{}' decoded: {} data rows", filename, len(data_rows))

    missing_headers = [header for header in NAMES_REQUIRED_COLUMNS if header not in headers]
    if missing_headers:
        raise MissingColumnsError(
            missing_headers,
            message=(
                f"Missing required columns: {', '.join(missing_headers)}. "
                f"Only 2 columns needed: {', '.join(NAMES_REQUIRED_COLUMNS)}"
            ),
        )

    name_position = headers.index("Full Name")
    reg_no_position = headers.index("Registration Number")

    students: List[ParsedStudent] = []
    diagnostics: List[RowDiagnostic] = []
    for index, row in enumerate(data_rows):
        row_number = display_row_number(index)

        if len(row) < len(NAMES_REQUIRED_COLUMNS):
            diagnostics.append(RowDiagnostic(row=row_number, reason="Insufficient data"))
            continue

        full_name = row[name_position] if name_position < len(row) else ""
        reg_no = row[reg_no_position] if reg_no_position < len(row) else ""

        reason = validate_name_row(full_name, reg_no)
        if reason:
            diagnostics.append(RowDiagnostic(row=row_number, reason=reason))
            continue

        students.append(ParsedStudent(full_name=full_name, reg_no=reg_no))

    for diagnostic in diagnostics:
        logger.debug("Skipped {}", diagnostic)
    logger.info("Parsed {} of {} students, {} rows skipped", len(students), len(data_rows), len(diagnostics))

    return UploadNamesResponse(
        students=students,
        total=len(data_rows),
        errors=[str(diagnostic) for diagnostic in diagnostics[:error_limit]],
        message=f"Successfully parsed {len(students)} out of {len(data_rows)} students",
    )

def validate_name_row(full_name: str, reg_no: str) -> Optional[str]:
    """
    Returns the reason a name row is rejected, or None when it is acceptable.
    """
    if not full_name.strip() or not reg_no.strip():
        return "Missing required fields"
    if len(full_name) > FULL_NAME_MAX_LENGTH:
        return f"Full name exceeds {FULL_NAME_MAX_LENGTH} characters"
    if len(reg_no) > REG_NO_MAX_LENGTH:
        return f"Registration number exceeds {REG_NO_MAX_LENGTH} characters"
    return None
