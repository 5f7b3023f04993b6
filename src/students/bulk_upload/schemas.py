from typing import List
from pydantic import BaseModel

class BulkUploadResponse(BaseModel):
    success: bool = True
    imported: int
    total: int
    errors: List[str]
    message: str
