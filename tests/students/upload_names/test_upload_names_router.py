import io
from unittest.mock import patch

import pandas as pd

def test_upload_names_csv(client):
    content = b"Full Name,Registration Number\nJohn Doe,CS2024001\n,CS2024002\nJane Smith,CS2024003\n"
    response = client.post("/api/upload-names", files={"file": ("names.csv", content, "text/csv")})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["total"] == 3
    assert [s["reg_no"] for s in body["students"]] == ["CS2024001", "CS2024003"]
    assert body["students"][0]["department_id"] == ""
    assert body["students"][0]["email"] is None
    assert body["errors"] == ["Row 3: Missing required fields"]
    assert body["message"] == "Successfully parsed 2 out of 3 students"

def test_upload_names_xlsx(client):
    buffer = io.BytesIO()
    pd.DataFrame(
        [["John Doe", "CS2024001"], ["Jane Smith", "CS2024003"]],
        columns=["Full Name", "Registration Number"],
    ).to_excel(buffer, index=False, engine="openpyxl")

    response = client.post(
        "/api/upload-names",
        files={"file": ("names.xlsx", buffer.getvalue(), "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")},
    )

    assert response.status_code == 200
    assert [s["full_name"] for s in response.json()["students"]] == ["John Doe", "Jane Smith"]

def test_upload_names_without_file(client):
    response = client.post("/api/upload-names")

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "No file provided"}

def test_upload_names_header_only(client):
    response = client.post(
        "/api/upload-names",
        files={"file": ("names.csv", b"Full Name,Registration Number\n", "text/csv")},
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "File must contain at least a header and one data row"}

def test_upload_names_missing_columns(client):
    response = client.post(
        "/api/upload-names",
        files={"file": ("names.csv", b"Name,ID\nJohn,CS1\n", "text/csv")},
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("Missing required columns: Full Name, Registration Number")

def test_upload_names_unexpected_failure(client):
    with patch("src.students.upload_names.router.parse_student_names", side_effect=RuntimeError("boom")):
        response = client.post(
            "/api/upload-names",
            files={"file": ("names.csv", b"Full Name,Registration Number\nJohn,CS1\n", "text/csv")},
        )

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to parse file"}
