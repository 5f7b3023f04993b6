from typing import Any, List, Optional, Tuple

from loguru import logger
from pydantic import ValidationError

from src.config import settings
from src.students.bulk_create.schemas import BulkCreateResponse, BulkStudentIn
from src.students.roster.models import RowDiagnostic, StudentRecord
from src.students.roster.repository import StudentRepository
from src.students.roster.service import exclude_existing, in_row_order, persist_one_by_one

def _clean(value: Optional[str]) -> str:
    return (value or "").strip()

def read_bulk_student(item: Any) -> Optional[BulkStudentIn]:
    """Validate one request item, None when it is not a student object."""
    if not isinstance(item, dict):
        return None
    try:
        return BulkStudentIn.model_validate(item)
    except ValidationError:
        return None

def create_students_in_bulk(
    students: List[Any],
    repository: StudentRepository,
    error_limit: Optional[int] = None,
) -> BulkCreateResponse:
    """
    Persist students whose department and batch were assigned after a names upload.

    Campus is taken from each student's department. Students are inserted one at a time,
    so a repeated registration number or a bad batch id only affects that student.
    Entries are numbered from 1 in diagnostics ("Student N: ..."), reported in request
    order, and only the first `error_limit` diagnostics are returned.
    """
    if error_limit is None:
        error_limit = settings.parse_error_limit
    diagnostics: List[RowDiagnostic] = []

    complete: List[Tuple[int, BulkStudentIn, List[str]]] = []
    for position, item in enumerate(students, start=1):
        student = read_bulk_student(item)
        if student is None:
            diagnostics.append(RowDiagnostic(label="Student", row=position, reason="Invalid student data"))
            continue
        fields = [_clean(student.full_name), _clean(student.reg_no), _clean(student.department_id), _clean(student.batch_id)]
        if not all(fields):
            diagnostics.append(RowDiagnostic(label="Student", row=position, reason="Missing required fields"))
            continue
        complete.append((position, student, fields))

    campuses = repository.get_department_campuses(fields[2] for _, _, fields in complete)

    candidates: List[StudentRecord] = []
    for position, student, (full_name, reg_no, department_id, batch_id) in complete:
        campus_id = campuses.get(department_id)
        if not campus_id:
            diagnostics.append(RowDiagnostic(label="Student", row=position, reason="Department not found"))
            continue
        candidates.append(StudentRecord(
            full_name=full_name,
            reg_no=reg_no,
            department_id=department_id,
            batch_id=batch_id,
            campus_id=campus_id,
            email=_clean(student.email) or None,
            phone=_clean(student.phone) or None,
            row_number=position,
        ))

    candidates, duplicate_diagnostics = exclude_existing(repository, candidates, label="Student")
    diagnostics.extend(duplicate_diagnostics)

    imported, insert_diagnostics = persist_one_by_one(repository, candidates, label="Student")
    diagnostics = in_row_order(diagnostics + insert_diagnostics)

    logger.info("Bulk create finished: {} of {} created, {} diagnostics", imported, len(students), len(diagnostics))
    return BulkCreateResponse(
        imported=imported,
        total=len(students),
        errors=[str(diagnostic) for diagnostic in diagnostics[:error_limit]],
        message=f"Successfully created {imported} out of {len(students)} students",
    )
