"""JSON endpoints used by the assignment board and the manage-teams page."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.results import ActionResult, UploadResult
from app.models.teams import AssignAthletesRequest
from app.services.assignment_board import drag_payload
from app.services.assignment_service import (
    assign_athletes_to_team,
    unassign_athlete_from_team,
)
from app.services.avatar_service import (
    AvatarUploadError,
    parse_team_id,
    upload_team_avatar,
)
from app.services.storage_client import StorageClient, StorageError, get_storage
from app.utils.db_async import get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=UploadResult(error=message).model_dump(exclude_none=True),
    )


@router.post("/upload", response_model=UploadResult, response_model_exclude_none=True)
async def upload_avatar(
    file: Optional[UploadFile] = File(default=None),
    team_id: Optional[str] = Form(default=None, alias="teamId"),
    storage: StorageClient = Depends(get_storage),
):
    """Store a team avatar image and return its public URL.

    400 for a missing file, a missing team id or a non-image file; 500 when
    storage rejects the write.
    """
    if file is None:
        return _error(400, "No file provided")

    try:
        parsed_team_id = parse_team_id(team_id)
        data = await file.read()
        return upload_team_avatar(
            storage, parsed_team_id, file.filename, file.content_type, data
        )
    except AvatarUploadError as exc:
        return _error(400, str(exc))
    except StorageError:
        return _error(500, "Failed to upload file")


@router.post("/teams/{team_id}/assignments", response_model=ActionResult)
async def assign_athletes(
    team_id: int,
    payload: AssignAthletesRequest,
    db: AsyncSession = Depends(get_session),
):
    """Upsert assignments for a dropped batch of submissions."""
    submission_ids = payload.submission_ids
    if payload.dragged_id is not None:
        submission_ids = drag_payload(payload.dragged_id, submission_ids)
    result = await assign_athletes_to_team(db, team_id, submission_ids)
    if not result.success:
        return JSONResponse(status_code=500, content=result.model_dump())
    return result


@router.delete("/teams/{team_id}/assignments/{submission_id}", response_model=ActionResult)
async def unassign_athlete(
    team_id: int,
    submission_id: int,
    db: AsyncSession = Depends(get_session),
):
    """Remove one athlete from one team."""
    result = await unassign_athlete_from_team(db, team_id, submission_id)
    if not result.success:
        status_code = 404 if result.error == "Assignment not found" else 500
        return JSONResponse(status_code=status_code, content=result.model_dump())
    return result
