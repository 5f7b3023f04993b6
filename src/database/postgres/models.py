from sqlalchemy import (
    Integer, String, Boolean, DateTime, Float,
    ForeignKey, func, Index
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
from typing import List, Optional
from uuid import uuid4

from src.config import FULL_NAME_MAX_LENGTH, REG_NO_MAX_LENGTH
from src.database.postgres.core import Base


# Identifiers are UUID strings so uploads can carry them as opaque text
# Note on relationships (https://docs.sqlalchemy.org/en/20/orm/queryguide/relationships.html)
# Default to lazy="select", students are listed far more often than their parents are needed

def new_id() -> str:
    return str(uuid4())

class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.CURRENT_TIMESTAMP(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.CURRENT_TIMESTAMP(), onupdate=func.CURRENT_TIMESTAMP(), nullable=False
    )

###
# Organization: campuses own departments, departments own batches
###
class Campus(TimestampMixin, Base):
    __tablename__ = "campuses"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    allowed_radius: Mapped[int] = mapped_column(Integer, nullable=False, default=100) # meters
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # Relationships
    departments: Mapped[List["Department"]] = relationship(back_populates="campus", cascade="all, delete-orphan")

class Department(TimestampMixin, Base):
    __tablename__ = "departments"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    campus_id: Mapped[str] = mapped_column(ForeignKey("campuses.id", ondelete="CASCADE"), nullable=False)
    # Relationships
    campus: Mapped["Campus"] = relationship(back_populates="departments")
    batches: Mapped[List["Batch"]] = relationship(back_populates="department", cascade="all, delete-orphan")

class Batch(TimestampMixin, Base):
    __tablename__ = "batches"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    year_level: Mapped[int] = mapped_column(Integer, nullable=False)
    department_id: Mapped[str] = mapped_column(ForeignKey("departments.id", ondelete="CASCADE"), nullable=False)
    academic_year: Mapped[str] = mapped_column(String(9), nullable=False) # 2024-2025
    # Relationships
    department: Mapped["Department"] = relationship(back_populates="batches")

##################################
# Roster
##################################
class Student(TimestampMixin, Base):
    __tablename__ = "students"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    full_name: Mapped[str] = mapped_column(String(FULL_NAME_MAX_LENGTH), nullable=False)
    reg_no: Mapped[str] = mapped_column(String(REG_NO_MAX_LENGTH), nullable=False)
    department_id: Mapped[str] = mapped_column(ForeignKey("departments.id", ondelete="CASCADE"), nullable=False)
    batch_id: Mapped[str] = mapped_column(ForeignKey("batches.id", ondelete="CASCADE"), nullable=False)
    campus_id: Mapped[str] = mapped_column(ForeignKey("campuses.id", ondelete="CASCADE"), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255))
    phone: Mapped[Optional[str]] = mapped_column(String(20))

    __table_args__ = (
        # Registration numbers identify a student across the whole university
        Index("unique_reg_no", "reg_no", unique=True),
        Index("idx_students_department_id", "department_id"),
        Index("idx_students_batch_id", "batch_id"),
    )
