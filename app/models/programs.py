"""Data-transfer models for programs, registrations and registered athletes."""

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Strict(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)


class ProgramCreator(_Strict):
    id: int
    first_name: str
    last_name: str
    avatar: Optional[str] = None


class ProgramWithStats(_Strict):
    id: int
    title: str
    type: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    visibility: Literal["public", "private"]
    registration_status: Literal["open", "closed"]
    registrant_count: int = Field(ge=0)
    # In cents; payments are not tracked yet so this is always zero
    program_value: int = 0
    created_by: Optional[ProgramCreator] = None


class RegistrationRead(_Strict):
    id: int
    program_id: int
    title: str
    sport: Optional[str] = None
    gender: Optional[str] = None
    age_min: Optional[int] = None
    age_max: Optional[int] = None


class TeamAssignmentRef(_Strict):
    team_id: int
    team_season_id: Optional[int] = None
    status: str


class RegisteredAthlete(_Strict):
    """One athlete submission with every team assignment it holds."""

    submission_id: int
    athlete_id: int
    registration_id: int
    program_id: int
    first_name: str
    last_name: str
    birthdate: Optional[date] = None
    gender: Optional[str] = None
    team_assignments: List[TeamAssignmentRef] = Field(default_factory=list)

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}"
