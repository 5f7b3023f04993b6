from enum import Enum

class TemplateVariant(Enum):
    """
    Upload templates offered for download, one per roster upload route.
    """
    STUDENTS = "students"
    NAMES = "names"

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV_MEDIA_TYPE = "text/csv"

STUDENTS_TEMPLATE_FILENAME = "students_upload_template.xlsx"
NAMES_TEMPLATE_FILENAME = "student_names_template.csv"
