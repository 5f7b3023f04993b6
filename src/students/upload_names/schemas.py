from typing import List, Optional
from pydantic import BaseModel

class ParsedStudent(BaseModel):
    """Name/ID pair from a names file. Department and batch are assigned in a later step."""
    full_name: str
    reg_no: str
    department_id: str = ""
    batch_id: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None

class UploadNamesResponse(BaseModel):
    success: bool = True
    students: List[ParsedStudent]
    total: int
    errors: List[str]
    message: str
