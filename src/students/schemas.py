from typing import List, Optional
from pydantic import BaseModel

from src.students.models import StudentDTO

class StudentCreate(BaseModel):
    """Single student form. Required fields are checked by the service to keep the error message."""
    full_name: Optional[str] = None
    reg_no: Optional[str] = None
    department_id: Optional[str] = None
    batch_id: Optional[str] = None
    campus_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int

class StudentListResponse(BaseModel):
    data: List[StudentDTO]
    pagination: Pagination

class StudentCreateResponse(BaseModel):
    data: StudentDTO
    message: str
