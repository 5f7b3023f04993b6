from typing import List, Optional
from pydantic import BaseModel

class ImportSummary(BaseModel):
    imported: int
    total: int
    errors: int

class UploadStudentsResponse(BaseModel):
    data: ImportSummary
    message: str
    errors: Optional[List[str]] = None
