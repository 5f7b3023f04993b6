from typing import List, Optional
from pydantic import BaseModel, Field

class StudentRecord(BaseModel):
    """
    Candidate student built from an upload, not yet persisted.

    `row_number` is where the candidate came from and is never written to the database.
    """
    full_name: str
    reg_no: str
    department_id: str
    batch_id: str
    campus_id: str
    email: Optional[str] = None
    phone: Optional[str] = None
    row_number: int = Field(default=0, exclude=True)

class RowDiagnostic(BaseModel):
    """
    Reason a row (or an insert batch, with `label="Batch"`) was not kept.
    """
    row: int
    reason: str
    label: str = "Row"

    def __str__(self) -> str:
        return f"{self.label} {self.row}: {self.reason}"

class IngestionResult(BaseModel):
    rows_seen: int = 0
    rows_valid: int = 0
    rows_persisted: int = 0
    diagnostics: List[RowDiagnostic] = Field(default_factory=list)

    @property
    def messages(self) -> List[str]:
        return [str(diagnostic) for diagnostic in self.diagnostics]
