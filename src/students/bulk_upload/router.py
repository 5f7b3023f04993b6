from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import JSONResponse
from loguru import logger

from src.students.bulk_upload.schemas import BulkUploadResponse
from src.students.bulk_upload.service import import_students_by_name
from src.students.roster.repository import StudentRepository, get_student_repository
from src.utils.exceptions import MissingFileError, RosterError

router = APIRouter()

@router.post(
    "",
    description="Imports students whose department and batch are given by name (CSV or xlsx).",
    response_description="Imported count with per-row diagnostics",
    status_code=status.HTTP_200_OK,
    response_model=BulkUploadResponse,
)
def bulk_upload_students(
    file: Optional[UploadFile] = File(default=None),
    repository: StudentRepository = Depends(get_student_repository),
):
    try:
        if file is None:
            raise MissingFileError()
        logger.info("Bulk upload file received: {} ({})", file.filename, file.content_type)
        return import_students_by_name(
            content=file.file.read(),
            repository=repository,
            filename=file.filename,
            content_type=file.content_type,
        )
    except RosterError as e:
        logger.info("Bulk upload rejected: {}", e.message)
        return JSONResponse(
            status_code=e.status_code,
            content={"success": False, "error": e.message},
        )
    except Exception:
        logger.exception("Unexpected failure while processing bulk upload")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Failed to process file"},
        )
