import math
from typing import Optional

from fastapi import HTTPException, status
from loguru import logger

from src.students.models import StudentDTO
from src.students.roster.models import StudentRecord
from src.students.roster.repository import StudentRepository
from src.students.schemas import Pagination, StudentCreate, StudentCreateResponse, StudentListResponse
from src.utils.exceptions import PersistenceError

def get_students(
    repository: StudentRepository,
    page: int = 1,
    limit: int = 10,
    department_id: Optional[str] = None,
    batch_id: Optional[str] = None,
) -> StudentListResponse:
    students, total = repository.list_students(
        page=page, limit=limit, department_id=department_id, batch_id=batch_id
    )
    return StudentListResponse(
        data=[StudentDTO.model_validate(student) for student in students],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        ),
    )

def create_student(repository: StudentRepository, payload: StudentCreate) -> StudentCreateResponse:
    """
    Create a single student. Registration numbers are checked against stored students first.
    """
    values = {
        field: (getattr(payload, field) or "").strip()
        for field in ("full_name", "reg_no", "department_id", "batch_id", "campus_id")
    }
    if not all(values.values()):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Full name, registration number, department, batch, and campus are required",
        )

    if repository.find_existing_reg_nos([values["reg_no"]]):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Student with this registration number already exists",
        )

    record = StudentRecord(
        **values,
        email=(payload.email or "").strip() or None,
        phone=(payload.phone or "").strip() or None,
    )
    try:
        student = repository.insert_students([record])[0]
    except PersistenceError as e:
        logger.error("Student {} could not be created: {}", values["reg_no"], e.message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create student",
        )

    logger.info("Created student {}", values["reg_no"])
    return StudentCreateResponse(
        data=StudentDTO.model_validate(student),
        message="Student created successfully",
    )
