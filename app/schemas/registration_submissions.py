"""One athlete's enrollment in one registration."""

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class RegistrationSubmission(SQLModel, table=True):  # type: ignore[call-arg]
    __tablename__ = "registration_submissions"

    id: Optional[int] = Field(default=None, primary_key=True)
    registration_id: int = Field(
        foreign_key="registrations.id", index=True, ondelete="CASCADE"
    )
    program_id: int = Field(foreign_key="programs.id", index=True, ondelete="CASCADE")
    athlete_id: int = Field(foreign_key="athletes.id", index=True, ondelete="CASCADE")
    parent_id: Optional[int] = Field(default=None, foreign_key="users.id")
    registration_status: str = Field(default="pending")  # "pending" | "paid"
    # Legacy single-team reference; roster membership lives in team_assignments
    team_id: Optional[int] = Field(
        default=None, foreign_key="teams.id", index=True, ondelete="SET NULL"
    )
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
