from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from loguru import logger

from src.students.bulk_create.schemas import BulkCreateRequest, BulkCreateResponse
from src.students.bulk_create.service import create_students_in_bulk
from src.students.roster.repository import StudentRepository, get_student_repository

router = APIRouter()

@router.post(
    "",
    description="Creates students from parsed names once department and batch are assigned.",
    response_description="Created count with per-student diagnostics",
    status_code=status.HTTP_200_OK,
    response_model=BulkCreateResponse,
)
def bulk_create_students(
    body: BulkCreateRequest,
    repository: StudentRepository = Depends(get_student_repository),
):
    if not isinstance(body.students, list):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": "Students array is required"},
        )
    try:
        logger.info("Bulk create requested for {} students", len(body.students))
        return create_students_in_bulk(body.students, repository)
    except Exception:
        logger.exception("Unexpected failure while creating students")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Failed to create students"},
        )
