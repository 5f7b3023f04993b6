from typing import List, Optional


class RosterError(Exception):
    """
    Structural failure of a roster request. Aborts the whole request before any row is kept.

    Routers render `message` (and `errors` when present) at `status_code`.
    """
    status_code = 400

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

class MissingFileError(RosterError):
    def __init__(self, message: str = "No file provided"):
        super().__init__(message)

class MalformedFileError(RosterError):
    """File could not be decoded, or holds fewer than a header and one data row."""

class NoDataError(RosterError):
    def __init__(self, message: str = "No data found in the file"):
        super().__init__(message)

class MissingColumnsError(RosterError):
    def __init__(self, missing_columns: List[str], message: Optional[str] = None):
        self.missing_columns = list(missing_columns)
        super().__init__(message or f"Missing required columns: {', '.join(self.missing_columns)}")

class NoValidRecordsError(RosterError):
    def __init__(self, errors: List[str], message: str = "No valid records to import"):
        super().__init__(message, errors=errors)


class PersistenceError(Exception):
    """
    A single insert batch failed. Raised by repositories, collected by the pipeline.

    `duplicate` is set when the unique index on reg_no rejected the batch.
    """

    def __init__(self, message: str, duplicate: bool = False):
        super().__init__(message)
        self.message = message
        self.duplicate = duplicate
