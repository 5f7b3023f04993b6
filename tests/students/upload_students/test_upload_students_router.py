import io
from unittest.mock import patch

import pandas as pd

XLSX_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
COLUMNS = ["full_name", "reg_no", "department_id", "batch_id", "campus_id", "email", "phone"]

def students_xlsx(rows) -> bytes:
    buffer = io.BytesIO()
    pd.DataFrame(rows, columns=COLUMNS).to_excel(buffer, index=False, engine="openpyxl")
    return buffer.getvalue()

def upload(client, content: bytes, filename: str = "students.xlsx", content_type: str = XLSX_TYPE):
    return client.post("/api/upload-students", files={"file": (filename, content, content_type)})

def test_upload_students_xlsx(client, memory_repository):
    content = students_xlsx([
        ["Alice Perera", "CS2024001", "dept-1", "batch-1", "campus-1", "alice@uni.edu", "0771234567"],
        ["Bob Silva", "CS2024002", "dept-1", "batch-1", "campus-1", "", ""],
    ])
    response = upload(client, content)

    assert response.status_code == 200
    assert response.json() == {
        "data": {"imported": 2, "total": 2, "errors": 0},
        "message": "Successfully imported 2 of 2 students",
    }
    assert memory_repository.students["CS2024001"].phone == "0771234567"
    assert memory_repository.students["CS2024002"].email is None

def test_upload_students_reports_row_errors(client, memory_repository):
    memory_repository.seed_students("CS2024002")
    content = students_xlsx([
        ["Alice Perera", "CS2024001", "dept-1", "batch-1", "campus-1", "", ""],
        ["Bob Silva", "CS2024002", "dept-1", "batch-1", "campus-1", "", ""],
        ["", "CS2024003", "dept-1", "batch-1", "campus-1", "", ""],
    ])
    response = upload(client, content)

    assert response.status_code == 200
    body = response.json()
    assert body["data"] == {"imported": 1, "total": 1, "errors": 2}
    assert body["errors"] == [
        "Row 3: Registration number 'CS2024002' already exists",
        "Row 4: Missing required fields: full_name",
    ]

def test_upload_students_csv(client, memory_repository):
    content = b"full_name,reg_no,department_id,batch_id,campus_id\nAlice,CS1,d,b,c\n"
    response = upload(client, content, filename="students.csv", content_type="text/csv")

    assert response.status_code == 200
    assert response.json()["data"]["imported"] == 1

def test_upload_students_without_file(client, memory_repository):
    response = client.post("/api/upload-students")

    assert response.status_code == 400
    assert response.json() == {"error": "No file provided"}

def test_upload_students_header_only(client, memory_repository):
    response = upload(client, students_xlsx([]))

    assert response.status_code == 400
    assert response.json() == {"error": "No data found in the file"}

def test_upload_students_missing_columns(client, memory_repository):
    buffer = io.BytesIO()
    pd.DataFrame([["Alice", "CS1"]], columns=["full_name", "reg_no"]).to_excel(buffer, index=False, engine="openpyxl")
    response = upload(client, buffer.getvalue())

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required columns: department_id, batch_id, campus_id"}

def test_upload_students_no_valid_records(client, memory_repository):
    memory_repository.seed_students("CS1")
    content = b"full_name,reg_no,department_id,batch_id,campus_id\nAlice,CS1,d,b,c\n"
    response = upload(client, content, filename="students.csv", content_type="text/csv")

    assert response.status_code == 400
    assert response.json() == {
        "error": "No valid records to import",
        "errors": ["Row 2: Registration number 'CS1' already exists"],
    }

def test_upload_students_unexpected_failure(client, memory_repository):
    with patch("src.students.upload_students.router.import_students", side_effect=RuntimeError("boom")):
        response = upload(client, students_xlsx([["A", "CS1", "d", "b", "c", "", ""]]))

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to process upload"}
