from typing import Dict, List, Optional, Tuple

from loguru import logger

from src.config import BULK_UPLOAD_OPTIONAL_COLUMNS, BULK_UPLOAD_REQUIRED_COLUMNS, settings
from src.students.bulk_upload.schemas import BulkUploadResponse
from src.students.roster.models import RowDiagnostic, StudentRecord
from src.students.roster.repository import StudentRepository
from src.students.roster.service import exclude_existing, in_row_order, persist_one_by_one
from src.students.roster.tabular import display_row_number, read_table
from src.students.upload_names.service import validate_name_row
from src.utils.exceptions import MissingColumnsError

def import_students_by_name(
    content: bytes,
    repository: StudentRepository,
    filename: Optional[str] = None,
    content_type: Optional[str] = None,
    error_limit: Optional[int] = None,
) -> BulkUploadResponse:
    """
    Import a roster that names each student's department and batch instead of giving ids.

    Accepts the 4 column layout (Full Name, Registration Number, Department Name, Batch Name)
    and the 6 column one that adds Email and Phone; columns are found by header. Department
    names are matched exactly, batch names within the resolved department, and the campus
    comes from the department. Rows are inserted one at a time.
    """
    if error_limit is None:
        error_limit = settings.parse_error_limit

    headers, data_rows = read_table(content, filename, content_type)
    logger.info("Bulk upload '{}' decoded: {} data rows", filename, len(data_rows))

    missing_headers = [header for header in BULK_UPLOAD_REQUIRED_COLUMNS if header not in headers]
    if missing_headers:
        raise MissingColumnsError(
            missing_headers,
            message=(
                f"Missing required columns: {', '.join(missing_headers)}. "
                f"Required columns: {', '.join(BULK_UPLOAD_REQUIRED_COLUMNS)}"
            ),
        )

    positions = {
        header: headers.index(header)
        for header in BULK_UPLOAD_REQUIRED_COLUMNS + BULK_UPLOAD_OPTIONAL_COLUMNS
        if header in headers
    }

    diagnostics: List[RowDiagnostic] = []
    named_rows: List[Tuple[int, Dict[str, str]]] = []
    for index, row in enumerate(data_rows):
        row_number = display_row_number(index)
        if len(row) < len(headers):
            diagnostics.append(RowDiagnostic(row=row_number, reason="Insufficient data"))
            continue

        values = {header: row[position] for header, position in positions.items()}
        if not all(values[header] for header in BULK_UPLOAD_REQUIRED_COLUMNS):
            diagnostics.append(RowDiagnostic(row=row_number, reason="Missing required fields"))
            continue

        reason = validate_name_row(values["Full Name"], values["Registration Number"])
        if reason:
            diagnostics.append(RowDiagnostic(row=row_number, reason=reason))
            continue

        named_rows.append((row_number, values))

    departments = repository.find_departments_by_name(values["Department Name"] for _, values in named_rows)
    batches = repository.find_batches_by_name(
        (department.id for department in departments.values()),
        (values["Batch Name"] for _, values in named_rows),
    )

    candidates: List[StudentRecord] = []
    for row_number, values in named_rows:
        department = departments.get(values["Department Name"])
        if department is None:
            diagnostics.append(RowDiagnostic(
                row=row_number,
                reason=f"Department '{values['Department Name']}' not found",
            ))
            continue

        batch_id = batches.get((department.id, values["Batch Name"]))
        if batch_id is None:
            diagnostics.append(RowDiagnostic(
                row=row_number,
                reason=f"Batch '{values['Batch Name']}' not found",
            ))
            continue

        candidates.append(StudentRecord(
            full_name=values["Full Name"],
            reg_no=values["Registration Number"],
            department_id=department.id,
            batch_id=batch_id,
            campus_id=department.campus_id,
            email=values.get("Email") or None,
            phone=values.get("Phone") or None,
            row_number=row_number,
        ))
    logger.info("{} of {} rows resolved to a department and batch", len(candidates), len(data_rows))

    candidates, duplicate_diagnostics = exclude_existing(repository, candidates)
    imported, insert_diagnostics = persist_one_by_one(repository, candidates)
    diagnostics = in_row_order(diagnostics + duplicate_diagnostics + insert_diagnostics)

    for diagnostic in diagnostics:
        logger.debug("Skipped {}", diagnostic)
    logger.info("Bulk upload finished: {} of {} imported", imported, len(data_rows))

    return BulkUploadResponse(
        imported=imported,
        total=len(data_rows),
        errors=[str(diagnostic) for diagnostic in diagnostics[:error_limit]],
        message=f"Successfully imported {imported} out of {len(data_rows)} students",
    )
