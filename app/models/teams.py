"""Data-transfer models for seasons, teams and staff.

Rows coming out of the database are converted with ``model_validate``; the
models forbid unknown keys and do not coerce types, so a shape mismatch
between a query and its view model fails loudly instead of rendering wrong
data.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.fields import Age, HexColor
from app.schemas.teams import TeamStatus


class _Strict(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)


class SeasonRead(_Strict):
    id: int
    name: str
    is_active: bool


class TeamWithStats(_Strict):
    id: int
    title: str
    sport: str
    gender: str
    grade: Optional[int] = None
    avatar: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    status: TeamStatus
    season_id: Optional[int] = None
    roster_count: int = Field(ge=0)
    max_roster_size: Optional[int] = None
    age_min: Optional[int] = None
    age_max: Optional[int] = None

    @property
    def is_provisioned(self) -> bool:
        return self.status == TeamStatus.PROVISIONED


class TeamUpdate(BaseModel):
    """Partial team update; only fields explicitly set are applied."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    sport: Optional[str] = None
    gender: Optional[str] = None
    grade: Optional[int] = Field(default=None, ge=-1, le=12)
    age_min: Optional[Age] = None
    age_max: Optional[Age] = None
    status: Optional[TeamStatus] = None
    max_roster_size: Optional[int] = Field(default=None, ge=1)
    avatar: Optional[str] = None
    primary_color: Optional[HexColor] = None
    secondary_color: Optional[HexColor] = None
    season_id: Optional[int] = None


class CopyOptions(BaseModel):
    """Which attributes to carry over when duplicating teams into a season."""

    name: bool = True
    colors: bool = True
    avatar: bool = True
    sport: bool = True
    gender: bool = True
    grade: bool = True


class StaffTeamRole(_Strict):
    team_id: int
    team_title: str
    role: str


class StaffUser(_Strict):
    id: int
    first_name: str
    last_name: str
    email: str
    role: str
    avatar: Optional[str] = None
    team_roles: List[StaffTeamRole] = Field(default_factory=list)

    @property
    def display_role(self) -> str:
        if self.role == "school-administrator":
            return "School Administrator"
        if self.role == "team-admin":
            return "Team Admin"
        return self.role.capitalize()


class RosterAthlete(_Strict):
    """An athlete on a team roster (one row per assignment)."""

    submission_id: int
    athlete_id: int
    first_name: str
    last_name: str
    birthdate: Optional[date] = None
    team_id: int
    team_title: str
    season_id: Optional[int] = None
    status: str

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class AssignAthletesRequest(BaseModel):
    """Body of ``POST /api/teams/{team_id}/assignments``.

    A drag sends the dragged athlete in ``dragged_id`` and the current
    selection in ``submission_ids``; the batch is resolved server-side.
    """

    submission_ids: List[int] = Field(default_factory=list)
    dragged_id: Optional[int] = None
