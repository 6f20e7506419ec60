"""UI Routes - Renders Jinja templates for the frontend."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response

from app.routes.helpers import base_context, url_with_query
from app.schemas.programs import ProgramStatus
from app.services.program_service import create_program, get_programs
from app.services.selection import teams_for_season
from app.services.team_service import (
    get_all_teams,
    get_athletes_on_provisioned_teams,
    get_provisioned_teams,
    get_seasons,
    get_staff_users,
    resolve_initial_season,
)
from app.utils.db_async import get_session

logger = logging.getLogger(__name__)

router = APIRouter()

PLACEHOLDER_PAGES = {
    "/finances": "Finances",
    "/community": "Community",
    "/tickets": "Tickets",
    "/members": "Members",
}


@router.get("/")
async def home() -> RedirectResponse:
    return RedirectResponse(url="/teams", status_code=307)


@router.get("/teams", response_class=HTMLResponse)
async def teams_index(
    request: Request,
    season: Optional[int] = Query(default=None),
    provisioned: bool = Query(default=False),
    db: AsyncSession = Depends(get_session),
) -> Response:
    """Teams, staff and rostered athletes for one season.

    ``provisioned=1`` limits the team table to provisioned teams.
    """
    context = await base_context(request, db)
    organization_id = context["organization_id"]

    seasons = await get_seasons(db, organization_id) if organization_id else []
    current_season = resolve_initial_season(seasons, season)
    season_id = current_season.id if current_season else None

    teams = []
    staff = []
    roster = []
    if organization_id:
        if provisioned and current_season is not None and current_season.is_active:
            teams = teams_for_season(
                await get_provisioned_teams(db, organization_id), season_id
            )
        else:
            teams = teams_for_season(await get_all_teams(db, organization_id), season_id)
            if provisioned:
                teams = [team for team in teams if team.is_provisioned]
        staff = await get_staff_users(db, organization_id)
        roster = [
            athlete
            for athlete in await get_athletes_on_provisioned_teams(db, organization_id)
            if athlete.season_id == season_id
        ]

    return request.app.state.templates.TemplateResponse(
        "teams/index.html",
        {
            **context,
            "seasons": seasons,
            "current_season": current_season,
            "teams": teams,
            "provisioned_only": provisioned,
            "staff": staff,
            "roster": roster,
        },
    )


@router.get("/programs", response_class=HTMLResponse)
async def programs_index(
    request: Request,
    db: AsyncSession = Depends(get_session),
) -> Response:
    """Programs table with registrant counts and a create form."""
    context = await base_context(request, db)
    organization_id = context["organization_id"]
    programs = await get_programs(db, organization_id) if organization_id else []

    return request.app.state.templates.TemplateResponse(
        "programs/index.html",
        {
            **context,
            "programs": programs,
            "program_statuses": list(ProgramStatus),
            "error": request.query_params.get("error"),
        },
    )


@router.post("/programs", response_class=HTMLResponse)
async def create_program_form(
    request: Request,
    title: str = Form(default=""),
    status: str = Form(default=ProgramStatus.DRAFT.value),
    db: AsyncSession = Depends(get_session),
) -> Response:
    """Create a program, then redirect back to the table."""
    context = await base_context(request, db)
    organization_id = context["organization_id"]
    if not organization_id:
        return RedirectResponse(
            url=url_with_query("/programs", {"error": "No organization configured"}),
            status_code=303,
        )

    current_user = context["current_user"]
    result = await create_program(
        db,
        organization_id,
        title,
        status,
        created_by=current_user.id if current_user else None,
    )
    if not result.success:
        return RedirectResponse(
            url=url_with_query("/programs", {"error": result.error}), status_code=303
        )

    return RedirectResponse(
        url=url_with_query(
            "/programs", {"notice": "Program created", "notice_kind": "success"}
        ),
        status_code=303,
    )


async def _placeholder(request: Request, db: AsyncSession) -> Response:
    title = PLACEHOLDER_PAGES[request.url.path]
    return request.app.state.templates.TemplateResponse(
        "placeholder.html",
        await base_context(request, db, page_title=title),
    )


@router.get("/finances", response_class=HTMLResponse)
async def finances(request: Request, db: AsyncSession = Depends(get_session)) -> Response:
    return await _placeholder(request, db)


@router.get("/community", response_class=HTMLResponse)
async def community(request: Request, db: AsyncSession = Depends(get_session)) -> Response:
    return await _placeholder(request, db)


@router.get("/tickets", response_class=HTMLResponse)
async def tickets(request: Request, db: AsyncSession = Depends(get_session)) -> Response:
    return await _placeholder(request, db)


@router.get("/members", response_class=HTMLResponse)
async def members(request: Request, db: AsyncSession = Depends(get_session)) -> Response:
    return await _placeholder(request, db)
