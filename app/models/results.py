"""Result envelopes returned by mutation services.

Mutations never raise past their call site: they report ``success`` plus an
optional ``error`` message and let the caller decide how to surface it.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.teams import TeamWithStats


class ActionResult(BaseModel):
    success: bool
    error: Optional[str] = Field(default=None)

    @classmethod
    def ok(cls) -> "ActionResult":
        return cls(success=True)

    @classmethod
    def fail(cls, error: str) -> "ActionResult":
        return cls(success=False, error=error)


class TeamActionResult(ActionResult):
    team: Optional[TeamWithStats] = Field(default=None)
    field: Optional[str] = Field(
        default=None, description="Form field that failed validation, if any"
    )


class DeleteTeamsResult(ActionResult):
    deleted_count: int = Field(default=0)


class CopyTeamsResult(ActionResult):
    teams: List[TeamWithStats] = Field(default_factory=list)


class ProgramActionResult(ActionResult):
    program_id: Optional[int] = Field(default=None)


class UploadResult(BaseModel):
    """Body of the avatar upload endpoint: ``{success, url}`` or ``{error}``."""

    success: Optional[bool] = Field(default=None)
    url: Optional[str] = Field(default=None)
    error: Optional[str] = Field(default=None)
