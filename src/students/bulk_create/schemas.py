from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict

class BulkStudentIn(BaseModel):
    """
    One student from the assignment step. Fields are optional here so that incomplete
    entries are reported per student instead of rejecting the whole request.
    Numeric values (registration numbers typed as numbers) are read as text.
    """
    model_config = ConfigDict(coerce_numbers_to_str=True)

    full_name: Optional[str] = None
    reg_no: Optional[str] = None
    department_id: Optional[str] = None
    batch_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

class BulkCreateRequest(BaseModel):
    # Left untyped so a non-array is answered with the route's own 400 envelope
    students: Any = None

class BulkCreateResponse(BaseModel):
    success: bool = True
    imported: int
    total: int
    errors: List[str]
    message: str
