"""Manage-teams routes: inline edits, create, delete, copy and avatar upload."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response

from app.models.teams import CopyOptions, TeamUpdate
from app.routes.helpers import base_context, url_with_query
from app.schemas.teams import TeamStatus
from app.services.avatar_service import AvatarUploadError, upload_team_avatar
from app.services.selection import teams_for_season
from app.services.storage_client import StorageClient, StorageError, get_storage
from app.services.team_service import (
    copy_teams,
    create_team,
    delete_teams,
    get_all_teams,
    get_organization_id,
    get_seasons,
    resolve_initial_season,
    update_team,
)
from app.services.validation import TeamFormData, TeamValidationError, parse_team_form
from app.utils.db_async import get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/teams/manage", tags=["teams"])

MANAGE_PATH = "/teams/manage"


def _back(season_id: Optional[int], notice: str, kind: str = "success") -> RedirectResponse:
    return RedirectResponse(
        url=url_with_query(
            MANAGE_PATH, {"season": season_id, "notice": notice, "notice_kind": kind}
        ),
        status_code=303,
    )


def _is_checked(value: Optional[str]) -> bool:
    return value is not None and value not in {"0", "", "false", "False"}


async def _render_manage(
    request: Request,
    db: AsyncSession,
    season_id: Optional[int],
    errors: Optional[dict[int, dict[str, str]]] = None,
    create_error: Optional[dict[str, str]] = None,
    status_code: int = 200,
) -> Response:
    context = await base_context(request, db)
    organization_id = context["organization_id"]

    seasons = await get_seasons(db, organization_id) if organization_id else []
    current_season = resolve_initial_season(seasons, season_id)
    current_id = current_season.id if current_season else None
    teams = (
        teams_for_season(await get_all_teams(db, organization_id), current_id)
        if organization_id
        else []
    )

    return request.app.state.templates.TemplateResponse(
        "teams/manage.html",
        {
            **context,
            "seasons": seasons,
            "current_season": current_season,
            "teams": teams,
            "team_statuses": list(TeamStatus),
            "errors": errors or {},
            "create_error": create_error,
        },
        status_code=status_code,
    )


@router.get("", response_class=HTMLResponse)
async def manage_teams(
    request: Request,
    season: Optional[int] = Query(default=None),
    db: AsyncSession = Depends(get_session),
) -> Response:
    """Editable table of a season's teams."""
    return await _render_manage(request, db, season)


@router.post("/create", response_class=HTMLResponse)
async def create_team_form(
    request: Request,
    title: str = Form(default=""),
    season_id: Optional[int] = Form(default=None),
    db: AsyncSession = Depends(get_session),
) -> Response:
    """Create a draft team in the chosen season."""
    organization_id = await get_organization_id(db)
    if not organization_id:
        return _back(season_id, "No organization configured", "error")

    result = await create_team(db, organization_id, title, season_id)
    if not result.success:
        return await _render_manage(
            request,
            db,
            season_id,
            create_error={"field": result.field or "title", "message": result.error or ""},
            status_code=400,
        )
    return _back(season_id, f"Team {result.team.title} created" if result.team else "Team created")


@router.post("/delete", response_class=HTMLResponse)
async def delete_selected_teams(
    team_ids: list[int] = Form(default=[]),
    season: Optional[int] = Form(default=None),
    db: AsyncSession = Depends(get_session),
) -> Response:
    """Delete every selected team."""
    result = await delete_teams(db, team_ids)
    if not result.success:
        return _back(season, result.error or "Failed to delete teams", "error")
    noun = "team" if result.deleted_count == 1 else "teams"
    return _back(season, f"Deleted {result.deleted_count} {noun}")


@router.post("/copy", response_class=HTMLResponse)
async def copy_selected_teams(
    team_ids: list[int] = Form(default=[]),
    season: Optional[int] = Form(default=None),
    target_season_id: Optional[int] = Form(default=None),
    copy_name: Optional[str] = Form(default=None),
    copy_colors: Optional[str] = Form(default=None),
    copy_avatar: Optional[str] = Form(default=None),
    copy_sport: Optional[str] = Form(default=None),
    copy_gender: Optional[str] = Form(default=None),
    copy_grade: Optional[str] = Form(default=None),
    db: AsyncSession = Depends(get_session),
) -> Response:
    """Duplicate the selected teams into another season as drafts."""
    options = CopyOptions(
        name=_is_checked(copy_name),
        colors=_is_checked(copy_colors),
        avatar=_is_checked(copy_avatar),
        sport=_is_checked(copy_sport),
        gender=_is_checked(copy_gender),
        grade=_is_checked(copy_grade),
    )
    result = await copy_teams(db, team_ids, target_season_id, options)
    if not result.success:
        return _back(season, result.error or "Failed to copy teams", "error")
    noun = "team" if len(result.teams) == 1 else "teams"
    return _back(target_season_id, f"Copied {len(result.teams)} {noun}")


@router.post("/{team_id}/avatar", response_class=HTMLResponse)
async def upload_avatar_form(
    team_id: int,
    file: Optional[UploadFile] = File(default=None),
    season: Optional[int] = Form(default=None),
    db: AsyncSession = Depends(get_session),
    storage: StorageClient = Depends(get_storage),
) -> Response:
    """Upload an avatar image and point the team at it."""
    if file is None:
        return _back(season, "No file provided", "error")

    data = await file.read()
    try:
        upload = upload_team_avatar(
            storage, team_id, file.filename, file.content_type, data
        )
    except AvatarUploadError as exc:
        return _back(season, str(exc), "error")
    except StorageError:
        return _back(season, "Failed to upload file", "error")

    result = await update_team(db, team_id, TeamUpdate(avatar=upload.url))
    if not result.success:
        return _back(season, result.error or "Failed to update team", "error")
    return _back(season, "Avatar updated")


@router.post("/{team_id}", response_class=HTMLResponse)
async def update_team_form(
    request: Request,
    team_id: int,
    season: Optional[int] = Form(default=None),
    title: Optional[str] = Form(default=None),
    sport: Optional[str] = Form(default=None),
    gender: Optional[str] = Form(default=None),
    grade: Optional[str] = Form(default=None),
    age_min: Optional[str] = Form(default=None),
    age_max: Optional[str] = Form(default=None),
    status: Optional[str] = Form(default=None),
    max_roster_size: Optional[str] = Form(default=None),
    primary_color: Optional[str] = Form(default=None),
    secondary_color: Optional[str] = Form(default=None),
    db: AsyncSession = Depends(get_session),
) -> Response:
    """Save one row of the manage table; errors render inline next to the field."""
    form = TeamFormData(
        title=title,
        sport=sport,
        gender=gender,
        grade=grade,
        age_min=age_min,
        age_max=age_max,
        status=status,
        max_roster_size=max_roster_size,
        primary_color=primary_color,
        secondary_color=secondary_color,
    )

    errors: dict[int, dict[str, Any]]
    try:
        update = parse_team_form(form)
    except TeamValidationError as exc:
        errors = {team_id: {"field": exc.field, "message": exc.message}}
        return await _render_manage(request, db, season, errors=errors, status_code=400)

    result = await update_team(db, team_id, update)
    if not result.success:
        errors = {team_id: {"field": result.field or "form", "message": result.error or ""}}
        return await _render_manage(request, db, season, errors=errors, status_code=400)

    return _back(season, "Team updated")
