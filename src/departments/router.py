from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from src.students.models import DepartmentDTO
from src.students.roster.repository import StudentRepository, get_student_repository

router = APIRouter()

@router.get("", status_code=status.HTTP_200_OK)
def list_departments(
    repository: StudentRepository = Depends(get_student_repository),
) -> Dict[str, Any]:
    """
    Departments available for assigning parsed names, ordered by name.
    Returns {success, departments: [{id, name, campus_id}], message}.
    """
    try:
        departments = [DepartmentDTO.model_validate(department) for department in repository.list_departments()]
    except SQLAlchemyError as e:
        logger.error("Failed to fetch departments: {}", e)
        raise HTTPException(status_code=500, detail="Failed to fetch departments")

    return {
        "success": True,
        "departments": [department.model_dump() for department in departments],
        "message": f"Found {len(departments)} departments",
    }
