from typing import Tuple

import pandas as pd

from src.config import NAMES_REQUIRED_COLUMNS, STUDENTS_OPTIONAL_COLUMNS, STUDENTS_REQUIRED_COLUMNS
from src.students.template.constants import (
    CSV_MEDIA_TYPE,
    NAMES_TEMPLATE_FILENAME,
    STUDENTS_TEMPLATE_FILENAME,
    XLSX_MEDIA_TYPE,
    TemplateVariant,
)
from src.students.template.utils import get_csv_as_stream, get_xlsx_as_bytes

SAMPLE_STUDENTS = [
    ["John Doe", "CS2024001", "<department id>", "<batch id>", "<campus id>", "john@example.com", "+1234567890"],
    ["Jane Smith", "CS2024002", "<department id>", "<batch id>", "<campus id>", "jane@example.com", "+9876543210"],
]

INSTRUCTIONS = [
    "STUDENT UPLOAD INSTRUCTIONS",
    "",
    "REQUIRED COLUMNS:",
    "- full_name: Student's full name (e.g., John Doe)",
    "- reg_no: Registration number, must be unique (e.g., CS2024001)",
    "- department_id: Department identifier from the departments list",
    "- batch_id: Batch identifier within that department",
    "- campus_id: Campus identifier of the department",
    "",
    "OPTIONAL COLUMNS:",
    "- email: Valid email address",
    "- phone: Contact number",
    "",
    "IMPORTANT NOTES:",
    "1. Keep the header row exactly as provided",
    "2. Rows missing a required value are skipped and reported",
    "3. Registration numbers that already exist are skipped and reported",
    "4. Save as .xlsx before uploading",
]

def build_students_template() -> bytes:
    """
    Workbook for the full upload: a `Students` sheet with sample rows and an `Instructions` sheet.
    """
    columns = STUDENTS_REQUIRED_COLUMNS + STUDENTS_OPTIONAL_COLUMNS
    students = pd.DataFrame(SAMPLE_STUDENTS, columns=columns)
    instructions = pd.DataFrame({"Instructions": INSTRUCTIONS})

    return get_xlsx_as_bytes(
        sheets={"Students": students, "Instructions": instructions},
        column_widths={"Students": [25, 20, 38, 38, 38, 30, 20], "Instructions": [80]},
        include_header={"Instructions": False},
    )

def build_names_template() -> str:
    return get_csv_as_stream(
        headers=NAMES_REQUIRED_COLUMNS,
        rows=[sample[:2] for sample in SAMPLE_STUDENTS],
    )

def build_template(variant: TemplateVariant) -> Tuple[bytes, str, str]:
    """
    Returns `(content, media_type, filename)` for the requested template.
    """
    if variant is TemplateVariant.NAMES:
        return build_names_template().encode("utf-8"), CSV_MEDIA_TYPE, NAMES_TEMPLATE_FILENAME
    return build_students_template(), XLSX_MEDIA_TYPE, STUDENTS_TEMPLATE_FILENAME
