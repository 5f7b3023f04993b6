from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Set, Tuple

from fastapi import Depends
from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from src.database.postgres.core import make_session
from src.database.postgres.models import Batch, Department, Student
from src.students.roster.models import StudentRecord
from src.utils.exceptions import PersistenceError

# Keeps IN (...) lists below SQLite's bound parameter limit
IN_CLAUSE_CHUNK_SIZE = 500

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"

def is_unique_violation(exc: SQLAlchemyError) -> bool:
    if not isinstance(exc, IntegrityError):
        return False
    if getattr(exc.orig, "pgcode", None) == UNIQUE_VIOLATION:
        return True
    # SQLite has no SQLSTATE, only the message
    return "unique" in str(exc.orig).lower()

class StudentRepository(Protocol):
    """
    Storage contract for the roster services. Services depend on this, never on a Session.
    """

    def find_existing_reg_nos(self, reg_nos: Iterable[str]) -> Set[str]:
        raise NotImplementedError

    def insert_students(self, records: Sequence[StudentRecord]) -> List[Student]:
        raise NotImplementedError

    def get_department_campuses(self, department_ids: Iterable[str]) -> Dict[str, str]:
        raise NotImplementedError

    def find_departments_by_name(self, names: Iterable[str]) -> Dict[str, Department]:
        raise NotImplementedError

    def find_batches_by_name(self, department_ids: Iterable[str], names: Iterable[str]) -> Dict[Tuple[str, str], str]:
        raise NotImplementedError

    def list_students(
        self,
        page: int,
        limit: int,
        department_id: Optional[str] = None,
        batch_id: Optional[str] = None,
    ) -> Tuple[List[Student], int]:
        raise NotImplementedError

    def list_departments(self) -> List[Department]:
        raise NotImplementedError


class SqlStudentRepository:
    """StudentRepository backed by a SQLAlchemy session."""

    def __init__(self, session: Session):
        self.session = session

    def find_existing_reg_nos(self, reg_nos: Iterable[str]) -> Set[str]:
        """
        Return the subset of `reg_nos` already stored, using one query per chunk.
        """
        unique_reg_nos = sorted(set(reg_nos))
        existing: Set[str] = set()
        for start in range(0, len(unique_reg_nos), IN_CLAUSE_CHUNK_SIZE):
            chunk = unique_reg_nos[start:start + IN_CLAUSE_CHUNK_SIZE]
            stmt = select(Student.reg_no).where(Student.reg_no.in_(chunk))
            existing.update(self.session.scalars(stmt).all())
        return existing

    def insert_students(self, records: Sequence[StudentRecord]) -> List[Student]:
        """
        Insert and commit one batch. On failure only this batch is rolled back, earlier
        commits stay in place, and PersistenceError is raised.
        """
        students = [Student(**record.model_dump()) for record in records]
        try:
            self.session.add_all(students)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            reason = str(getattr(e, "orig", None) or e)
            logger.warning("Student batch insert rolled back: {}", reason)
            raise PersistenceError(reason, duplicate=is_unique_violation(e)) from e
        return students

    def get_department_campuses(self, department_ids: Iterable[str]) -> Dict[str, str]:
        unique_ids = sorted(set(department_ids))
        campuses: Dict[str, str] = {}
        for start in range(0, len(unique_ids), IN_CLAUSE_CHUNK_SIZE):
            chunk = unique_ids[start:start + IN_CLAUSE_CHUNK_SIZE]
            stmt = select(Department.id, Department.campus_id).where(Department.id.in_(chunk))
            campuses.update({department_id: campus_id for department_id, campus_id in self.session.execute(stmt)})
        return campuses

    def find_departments_by_name(self, names: Iterable[str]) -> Dict[str, Department]:
        """
        Exact name lookup. A name shared by departments on different campuses is ambiguous
        and left out of the result.
        """
        unique_names = sorted(set(names))
        matches: Dict[str, List[Department]] = {}
        for start in range(0, len(unique_names), IN_CLAUSE_CHUNK_SIZE):
            chunk = unique_names[start:start + IN_CLAUSE_CHUNK_SIZE]
            for department in self.session.scalars(select(Department).where(Department.name.in_(chunk))):
                matches.setdefault(department.name, []).append(department)
        return {name: found[0] for name, found in matches.items() if len(found) == 1}

    def find_batches_by_name(self, department_ids: Iterable[str], names: Iterable[str]) -> Dict[Tuple[str, str], str]:
        """
        Batch ids keyed by `(department_id, batch_name)`, restricted to the given departments.
        """
        unique_ids = sorted(set(department_ids))
        unique_names = sorted(set(names))
        if not unique_ids or not unique_names:
            return {}
        batches: Dict[Tuple[str, str], str] = {}
        for start in range(0, len(unique_ids), IN_CLAUSE_CHUNK_SIZE):
            chunk = unique_ids[start:start + IN_CLAUSE_CHUNK_SIZE]
            stmt = (
                select(Batch.department_id, Batch.name, Batch.id)
                .where(Batch.department_id.in_(chunk), Batch.name.in_(unique_names))
            )
            batches.update({(department_id, name): batch_id for department_id, name, batch_id in self.session.execute(stmt)})
        return batches

    def list_students(
        self,
        page: int,
        limit: int,
        department_id: Optional[str] = None,
        batch_id: Optional[str] = None,
    ) -> Tuple[List[Student], int]:
        filters = []
        if department_id:
            filters.append(Student.department_id == department_id)
        if batch_id:
            filters.append(Student.batch_id == batch_id)

        total = self.session.scalar(select(func.count()).select_from(Student).where(*filters)) or 0
        stmt = (
            select(Student)
            .where(*filters)
            .order_by(Student.created_at.desc(), Student.reg_no)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(self.session.scalars(stmt).all()), total

    def list_departments(self) -> List[Department]:
        return list(self.session.scalars(select(Department).order_by(Department.name)).all())


def get_student_repository(db: Session = Depends(make_session)) -> StudentRepository:
    return SqlStudentRepository(db)
