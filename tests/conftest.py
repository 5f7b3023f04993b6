from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from src.config import settings
from src.database.postgres.core import Base, make_session
from src.database.postgres.models import Batch, Department, Student, new_id
from src.main import app
from src.students.roster.models import StudentRecord
from src.students.roster.repository import SqlStudentRepository, get_student_repository
from src.utils.exceptions import PersistenceError


class InMemoryStudentRepository:
    """
    StudentRepository kept in dictionaries. Mirrors the database unique index on reg_no:
    a batch holding a stored or repeated reg_no is rejected as a whole.
    """

    def __init__(self):
        self.students: Dict[str, Student] = {}
        self.departments: Dict[str, Department] = {}
        self.batches: Dict[str, Batch] = {}
        # 1-based insert calls that fail with PersistenceError
        self.failing_batches: Set[int] = set()
        self.insert_calls = 0
        self.lookup_calls = 0

    def seed_students(self, *reg_nos: str) -> None:
        for reg_no in reg_nos:
            self.students[reg_no] = self._make_student(StudentRecord(
                full_name=f"Existing {reg_no}",
                reg_no=reg_no,
                department_id="dept-1",
                batch_id="batch-1",
                campus_id="campus-1",
            ))

    @staticmethod
    def _make_student(record: StudentRecord) -> Student:
        now = datetime.now()
        return Student(id=new_id(), created_at=now, updated_at=now, **record.model_dump())

    def add_department(self, department_id: str, name: str, campus_id: str) -> None:
        self.departments[department_id] = Department(id=department_id, name=name, campus_id=campus_id)

    def add_batch(self, batch_id: str, name: str, department_id: str) -> None:
        self.batches[batch_id] = Batch(
            id=batch_id, name=name, department_id=department_id, year_level=1, academic_year="2024-2025"
        )

    def find_existing_reg_nos(self, reg_nos: Iterable[str]) -> Set[str]:
        self.lookup_calls += 1
        return {reg_no for reg_no in reg_nos if reg_no in self.students}

    def insert_students(self, records: Sequence[StudentRecord]) -> List[Student]:
        self.insert_calls += 1
        if self.insert_calls in self.failing_batches:
            raise PersistenceError("connection reset")

        reg_nos = [record.reg_no for record in records]
        if len(set(reg_nos)) != len(reg_nos) or any(reg_no in self.students for reg_no in reg_nos):
            raise PersistenceError("UNIQUE constraint failed: students.reg_no", duplicate=True)

        inserted = [self._make_student(record) for record in records]
        for student in inserted:
            self.students[student.reg_no] = student
        return inserted

    def get_department_campuses(self, department_ids: Iterable[str]) -> Dict[str, str]:
        return {
            department_id: self.departments[department_id].campus_id
            for department_id in department_ids
            if department_id in self.departments
        }

    def find_departments_by_name(self, names: Iterable[str]) -> Dict[str, Department]:
        wanted = set(names)
        matches: Dict[str, List[Department]] = {}
        for department in self.departments.values():
            if department.name in wanted:
                matches.setdefault(department.name, []).append(department)
        return {name: found[0] for name, found in matches.items() if len(found) == 1}

    def find_batches_by_name(self, department_ids: Iterable[str], names: Iterable[str]) -> Dict[Tuple[str, str], str]:
        wanted_departments, wanted_names = set(department_ids), set(names)
        return {
            (batch.department_id, batch.name): batch.id
            for batch in self.batches.values()
            if batch.department_id in wanted_departments and batch.name in wanted_names
        }

    def list_students(
        self,
        page: int,
        limit: int,
        department_id: Optional[str] = None,
        batch_id: Optional[str] = None,
    ) -> Tuple[List[Student], int]:
        rows = [
            student for student in self.students.values()
            if (not department_id or student.department_id == department_id)
            and (not batch_id or student.batch_id == batch_id)
        ]
        start = (page - 1) * limit
        return rows[start:start + limit], len(rows)

    def list_departments(self) -> List[Department]:
        return sorted(self.departments.values(), key=lambda department: department.name)


# Fixtures for tests
@pytest.fixture(scope="session", autouse=True)
def override_roster_admin_key():
    """Ensure tests always use a fixed admin API key"""
    settings.roster_admin_key = "TEST_KEY"

@pytest.fixture(scope="session")
def auth_headers():
    """Reusable Authorization header for API requests"""
    return {"Authorization": "Bearer TEST_KEY"}

@pytest.fixture(scope="session")
def client(auth_headers):
    """Shared FastAPI test client with auth headers included"""
    client = TestClient(app)
    client.headers.update(auth_headers)
    return client

@pytest.fixture(scope="function")
def memory_repository():
    """In-memory StudentRepository injected in place of the SQL one"""
    repository = InMemoryStudentRepository()
    app.dependency_overrides[get_student_repository] = lambda: repository
    yield repository
    app.dependency_overrides.pop(get_student_repository)

@pytest.fixture(scope="function")
def sqlite_session():
    """Fresh in-memory SQLite database with every table created"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()
    Base.metadata.drop_all(engine)
    engine.dispose()

@pytest.fixture(scope="function")
def sqlite_repository(sqlite_session):
    """SqlStudentRepository over SQLite, injected into the app"""
    repository = SqlStudentRepository(sqlite_session)
    app.dependency_overrides[get_student_repository] = lambda: repository
    yield repository
    app.dependency_overrides.pop(get_student_repository)

@pytest.fixture(scope="function")
def mock_postgresql_db():
    """Fixture to mock a PostgreSQL database session for testing."""
    db = MagicMock(spec=Session)
    app.dependency_overrides[make_session] = lambda: db
    yield db
    app.dependency_overrides.pop(make_session)
