from fastapi import APIRouter, Depends

from src.departments.router import router as departments_router
from src.students.router import router as students_router
from src.students.bulk_create.router import router as students_bulk_create_router
from src.students.bulk_upload.router import router as students_bulk_upload_router
from src.students.template.router import router as students_template_router
from src.students.upload_names.router import router as upload_names_router
from src.students.upload_students.router import router as upload_students_router
from src.utils.authorization import verify_api_key


api_router = APIRouter(dependencies=[Depends(verify_api_key)])

# /api/upload-names
api_router.include_router(
    upload_names_router,
    prefix="/upload-names",
    tags=["Roster"]
)

# /api/upload-students
api_router.include_router(
    upload_students_router,
    prefix="/upload-students",
    tags=["Roster"]
)

# /api/students/bulk-create
api_router.include_router(
    students_bulk_create_router,
    prefix="/students/bulk-create",
    tags=["Roster"]
)

# /api/students/bulk-upload
api_router.include_router(
    students_bulk_upload_router,
    prefix="/students/bulk-upload",
    tags=["Roster"]
)

# /api/students/template
api_router.include_router(
    students_template_router,
    prefix="/students/template",
    tags=["Roster"]
)

# /api/students
api_router.include_router(
    students_router,
    prefix="/students",
    tags=["Students"]
)

# /api/departments
api_router.include_router(
    departments_router,
    prefix="/departments",
    tags=["Departments"]
)
