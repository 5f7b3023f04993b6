from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import JSONResponse
from loguru import logger

from src.students.roster.repository import StudentRepository, get_student_repository
from src.students.upload_students.schemas import UploadStudentsResponse
from src.students.upload_students.service import import_students
from src.utils.exceptions import MissingFileError, RosterError

router = APIRouter()

@router.post(
    "",
    description="Imports fully assigned students from a spreadsheet, skipping invalid and duplicate rows.",
    response_description="Import counts with row and batch diagnostics",
    status_code=status.HTTP_200_OK,
    response_model=UploadStudentsResponse,
    response_model_exclude_none=True,
)
def upload_students(
    file: Optional[UploadFile] = File(default=None),
    repository: StudentRepository = Depends(get_student_repository),
):
    try:
        if file is None:
            raise MissingFileError()
        logger.info("Student file received: {} ({})", file.filename, file.content_type)
        return import_students(
            content=file.file.read(),
            repository=repository,
            filename=file.filename,
            content_type=file.content_type,
        )
    except RosterError as e:
        logger.info("Student upload rejected: {}", e.message)
        content = {"error": e.message}
        if e.errors:
            content["errors"] = e.errors
        return JSONResponse(status_code=e.status_code, content=content)
    except Exception:
        logger.exception("Unexpected failure while importing students")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to process upload"},
        )
