from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from src.students.roster.repository import StudentRepository, get_student_repository
from src.students.schemas import StudentCreate, StudentCreateResponse, StudentListResponse
import src.students.service as service

router = APIRouter()

@router.get("", status_code=status.HTTP_200_OK, response_model=StudentListResponse)
def list_students(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    department_id: Optional[str] = None,
    batch_id: Optional[str] = None,
    repository: StudentRepository = Depends(get_student_repository),
):
    """
    Paginated students, newest first, optionally filtered by department and batch.
    """
    return service.get_students(
        repository,
        page=page,
        limit=limit,
        department_id=department_id,
        batch_id=batch_id,
    )

@router.post("", status_code=status.HTTP_200_OK, response_model=StudentCreateResponse)
def create_student(
    payload: StudentCreate,
    repository: StudentRepository = Depends(get_student_repository),
):
    return service.create_student(repository, payload)
