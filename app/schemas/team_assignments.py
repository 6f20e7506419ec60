"""Roster membership: a submission assigned to a team."""

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

ASSIGNED = "assigned"


class TeamAssignment(SQLModel, table=True):  # type: ignore[call-arg]
    """Join row between a team and a registration submission.

    An athlete may hold assignments on several teams, but at most one per
    team. Removal is a hard delete.
    """

    __tablename__ = "team_assignments"
    __table_args__ = (
        UniqueConstraint("team_id", "submission_id", name="uq_team_assignment"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    team_id: int = Field(foreign_key="teams.id", index=True, ondelete="CASCADE")
    submission_id: int = Field(
        foreign_key="registration_submissions.id", index=True, ondelete="CASCADE"
    )
    status: str = Field(default=ASSIGNED)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
