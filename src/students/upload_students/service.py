from typing import Dict, List, Optional

from loguru import logger

from src.config import STUDENTS_REQUIRED_COLUMNS, settings
from src.students.roster.models import IngestionResult, RowDiagnostic, StudentRecord
from src.students.roster.repository import StudentRepository
from src.students.roster.service import exclude_existing, in_row_order, persist_in_batches
from src.students.roster.tabular import display_row_number, read_records
from src.students.upload_students.schemas import ImportSummary, UploadStudentsResponse
from src.utils.exceptions import MissingColumnsError, NoDataError, NoValidRecordsError

def import_students(
    content: bytes,
    repository: StudentRepository,
    filename: Optional[str] = None,
    content_type: Optional[str] = None,
    batch_size: Optional[int] = None,
) -> UploadStudentsResponse:
    """
    Entry function for the full roster upload.

    Stages run in order, once each: decode -> row validation -> duplicate check -> batched
    insert -> report. Only decoding and the column check can abort the request; every later
    failure becomes a diagnostic and processing continues.
    """
    if batch_size is None:
        batch_size = settings.upload_batch_size

    records = read_records(content, filename, content_type)
    if not records:
        raise NoDataError()
    logger.info("Student file '{}' decoded: {} data rows", filename, len(records))

    # Schema is assumed homogeneous, so only the first row's keys are checked
    missing_columns = [column for column in STUDENTS_REQUIRED_COLUMNS if column not in records[0]]
    if missing_columns:
        raise MissingColumnsError(missing_columns)

    result = IngestionResult(rows_seen=len(records))

    candidates = build_candidates(records, result.diagnostics)
    logger.info("{} of {} rows passed validation", len(candidates), len(records))

    candidates, duplicate_diagnostics = exclude_existing(repository, candidates)
    result.diagnostics = in_row_order(result.diagnostics + duplicate_diagnostics)
    result.rows_valid = len(candidates)

    if not candidates:
        raise NoValidRecordsError(result.messages)

    result.rows_persisted, batch_diagnostics = persist_in_batches(repository, candidates, batch_size)
    result.diagnostics.extend(batch_diagnostics)

    logger.info(
        "Student import finished: {} of {} stored, {} diagnostics",
        result.rows_persisted, result.rows_valid, len(result.diagnostics),
    )
    return UploadStudentsResponse(
        data=ImportSummary(
            imported=result.rows_persisted,
            total=result.rows_valid,
            errors=len(result.diagnostics),
        ),
        message=f"Successfully imported {result.rows_persisted} of {result.rows_valid} students",
        errors=result.messages or None,
    )

def build_candidates(records: List[Dict[str, str]], diagnostics: List[RowDiagnostic]) -> List[StudentRecord]:
    """
    Turn decoded rows into StudentRecord candidates. Rows missing a required value are
    reported in `diagnostics` and left out. No length caps are applied at this stage.
    """
    candidates: List[StudentRecord] = []
    for index, record in enumerate(records):
        row_number = display_row_number(index)
        values = {column: (record.get(column) or "").strip() for column in STUDENTS_REQUIRED_COLUMNS}

        missing_fields = [column for column, value in values.items() if not value]
        if missing_fields:
            diagnostic = RowDiagnostic(
                row=row_number,
                reason=f"Missing required fields: {', '.join(missing_fields)}",
            )
            logger.debug("Skipped {}", diagnostic)
            diagnostics.append(diagnostic)
            continue

        candidates.append(StudentRecord(
            **values,
            email=(record.get("email") or "").strip() or None,
            phone=(record.get("phone") or "").strip() or None,
            row_number=row_number,
        ))
    return candidates
