"""Teams scoped to a season."""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel


class TeamStatus(str, Enum):
    DRAFT = "draft"
    PROVISIONED = "provisioned"


class Team(SQLModel, table=True):  # type: ignore[call-arg]
    """A team belonging to exactly one season.

    The roster count is never stored: it is derived from the number of
    ``team_assignments`` rows that reference the team.
    """

    __tablename__ = "teams"

    id: Optional[int] = Field(default=None, primary_key=True)
    organization_id: int = Field(foreign_key="organizations.id", index=True)
    season_id: Optional[int] = Field(default=None, foreign_key="seasons.id", index=True)
    title: str
    sport: str = Field(default="Football")
    gender: str = Field(default="Male")  # "Male" | "Female" | "Coed"
    grade: Optional[int] = Field(default=None)  # -1 = Pre-K, 0 = K
    age_min: Optional[int] = Field(default=None)
    age_max: Optional[int] = Field(default=None)
    status: TeamStatus = Field(default=TeamStatus.DRAFT, index=True)
    max_roster_size: Optional[int] = Field(default=None)
    avatar: Optional[str] = Field(default=None)
    primary_color: Optional[str] = Field(default=None)
    secondary_color: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
