"""Programs and the registrations (divisions) offered under them."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel


class ProgramStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class Program(SQLModel, table=True):  # type: ignore[call-arg]
    """A top-level offering (season, camp, clinic) grouping registrations."""

    __tablename__ = "programs"

    id: Optional[int] = Field(default=None, primary_key=True)
    organization_id: int = Field(foreign_key="organizations.id", index=True)
    title: str
    type: str = Field(default="season")
    start_date: Optional[date] = Field(default=None)
    end_date: Optional[date] = Field(default=None)
    visibility: str = Field(default="public")  # "public" | "private"
    registration_status: str = Field(default="open")  # "open" | "closed"
    status: ProgramStatus = Field(default=ProgramStatus.DRAFT)
    created_by: Optional[int] = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class Registration(SQLModel, table=True):  # type: ignore[call-arg]
    """A division within a program, e.g. "5th-6th Grade Cheer"."""

    __tablename__ = "registrations"

    id: Optional[int] = Field(default=None, primary_key=True)
    program_id: int = Field(foreign_key="programs.id", index=True, ondelete="CASCADE")
    title: str
    sport: Optional[str] = Field(default=None)
    gender: Optional[str] = Field(default=None)
    age_min: Optional[int] = Field(default=None)
    age_max: Optional[int] = Field(default=None)
    price: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
