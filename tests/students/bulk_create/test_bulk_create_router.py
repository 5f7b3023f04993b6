from unittest.mock import patch

import pytest

from src.students.bulk_create.service import create_students_in_bulk

@pytest.fixture
def departments(memory_repository):
    memory_repository.add_department("dept-cs", "Computer Science", "campus-main")
    return memory_repository

def student(reg_no, department_id: str = "dept-cs", **overrides):
    payload = {"full_name": f"Student {reg_no}", "reg_no": reg_no, "department_id": department_id, "batch_id": "batch-1"}
    payload.update(overrides)
    return payload

class TestBulkCreateService:
    def test_campus_comes_from_department(self, departments):
        result = create_students_in_bulk([student("CS1")], departments)

        assert result.imported == 1
        assert departments.students["CS1"].campus_id == "campus-main"

    def test_errors_are_capped(self, departments):
        students = [{"full_name": "", "reg_no": f"CS{i}"} for i in range(12)]
        result = create_students_in_bulk(students, departments, error_limit=10)

        assert len(result.errors) == 10
        assert result.errors[0] == "Student 1: Missing required fields"
        assert result.message == "Successfully created 0 out of 12 students"

    def test_zero_error_limit_returns_no_errors(self, departments):
        result = create_students_in_bulk([{"full_name": ""}], departments, error_limit=0)
        assert result.errors == []

    def test_repeated_reg_no_in_request(self, departments):
        students = [student(f"CS{i}") for i in range(5)] + [student("CS0")]
        result = create_students_in_bulk(students, departments)

        assert result.imported == 5
        assert result.errors == ["Student 6: Registration number 'CS0' already exists"]

    def test_insert_failure_only_affects_that_student(self, departments):
        departments.failing_batches = {1}
        result = create_students_in_bulk([student("CS1"), student("CS2"), student("CS3")], departments)

        assert result.imported == 2
        assert result.errors == ["Student 1: connection reset"]
        assert set(departments.students) == {"CS2", "CS3"}

    def test_numeric_reg_no_is_read_as_text(self, departments):
        result = create_students_in_bulk([student(2024001), student("CS2")], departments)

        assert result.imported == 2
        assert "2024001" in departments.students

    def test_items_that_are_not_objects(self, departments):
        result = create_students_in_bulk(["oops", student("CS1"), {"reg_no": {"nested": 1}}], departments)

        assert result.imported == 1
        assert result.errors == ["Student 1: Invalid student data", "Student 3: Invalid student data"]

def test_bulk_create(client, departments):
    departments.seed_students("CS3")
    response = client.post("/api/students/bulk-create", json={"students": [
        student("CS1", email="cs1@uni.edu"),
        student("CS2", department_id="dept-missing"),
        student("CS3"),
        {"full_name": "No Batch", "reg_no": "CS4", "department_id": "dept-cs"},
    ]})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "imported": 1,
        "total": 4,
        "errors": [
            "Student 2: Department not found",
            "Student 3: Registration number 'CS3' already exists",
            "Student 4: Missing required fields",
        ],
        "message": "Successfully created 1 out of 4 students",
    }
    assert departments.students["CS1"].email == "cs1@uni.edu"

def test_bulk_create_empty_list(client, departments):
    response = client.post("/api/students/bulk-create", json={"students": []})

    assert response.status_code == 200
    assert response.json()["message"] == "Successfully created 0 out of 0 students"

def test_bulk_create_requires_students(client, departments):
    response = client.post("/api/students/bulk-create", json={})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Students array is required"}

def test_bulk_create_rejects_non_array(client, departments):
    response = client.post("/api/students/bulk-create", json={"students": "oops"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Students array is required"}

def test_bulk_create_numeric_reg_no(client, departments):
    response = client.post("/api/students/bulk-create", json={"students": [
        student(2024001),
        student("CS2"),
    ]})

    assert response.status_code == 200
    assert response.json()["imported"] == 2

def test_bulk_create_unexpected_failure(client, departments):
    with patch("src.students.bulk_create.router.create_students_in_bulk", side_effect=RuntimeError("boom")):
        response = client.post("/api/students/bulk-create", json={"students": [student("CS1")]})

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to create students"}
