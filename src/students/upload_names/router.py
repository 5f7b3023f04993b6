from typing import Optional

from fastapi import APIRouter, File, UploadFile, status
from fastapi.responses import JSONResponse
from loguru import logger

from src.students.upload_names.schemas import UploadNamesResponse
from src.students.upload_names.service import parse_student_names
from src.utils.exceptions import MissingFileError, RosterError

router = APIRouter()

@router.post(
    "",
    description="Parses a names file (Full Name, Registration Number) into unassigned student rows.",
    response_description="Parsed students with row diagnostics",
    status_code=status.HTTP_200_OK,
    response_model=UploadNamesResponse,
)
def upload_names(file: Optional[UploadFile] = File(default=None)):
    try:
        if file is None:
            raise MissingFileError()
        logger.info("Names file received: {} ({})", file.filename, file.content_type)
        return parse_student_names(
            content=file.file.read(),
            filename=file.filename,
            content_type=file.content_type,
        )
    except RosterError as e:
        logger.info("Names upload rejected: {}", e.message)
        return JSONResponse(
            status_code=e.status_code,
            content={"success": False, "error": e.message},
        )
    except Exception:
        logger.exception("Unexpected failure while parsing names file")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Failed to parse file"},
        )
