from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

# postgres models...
class BaseDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

class StudentDTO(BaseDTO):
    id: str
    full_name: str
    reg_no: str
    department_id: str
    batch_id: str
    campus_id: str
    email: Optional[str] = None
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class DepartmentDTO(BaseDTO):
    id: str
    name: str
    campus_id: str
