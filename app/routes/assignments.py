"""Team assignments page: season/team rail, team cards and athlete rail.

The page is server-rendered and its selection state lives in the query
string (see ``SelectionRailState.to_query``). Clicks go through small GET
handlers that apply one state transition and redirect back to the page.
Drag-and-drop uses the JSON endpoints in ``app.routes.api``; the POST
handlers here are the form fallback and share the same optimistic
apply/rollback path through ``AssignmentSync``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Optional
from urllib.parse import parse_qsl

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response

from app.models.programs import ProgramWithStats, RegisteredAthlete, RegistrationRead
from app.models.teams import SeasonRead, TeamWithStats
from app.routes.helpers import base_context, url_with_query
from app.services.assignment_board import AssignmentBoard, build_team_cards
from app.services.assignment_service import (
    assign_athletes_to_team,
    unassign_athlete_from_team,
)
from app.services.assignment_sync import AssignmentSync
from app.services.program_service import (
    get_all_athlete_submissions,
    get_all_registrations,
    get_programs,
)
from app.services.selection import (
    SelectionRailState,
    athletes_for_registration,
    registrations_for_program,
    teams_for_season,
)
from app.services.team_service import (
    get_all_teams,
    get_organization_id,
    get_seasons,
    resolve_initial_season,
)
from app.utils.db_async import get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/teams/assignments", tags=["assignments"])

PAGE_PATH = "/teams/assignments"


@dataclass
class AssignmentPageData:
    """Everything loaded from the database for one render of the page."""

    seasons: list[SeasonRead] = field(default_factory=list)
    teams: list[TeamWithStats] = field(default_factory=list)
    programs: list[ProgramWithStats] = field(default_factory=list)
    registrations: list[RegistrationRead] = field(default_factory=list)
    athletes: list[RegisteredAthlete] = field(default_factory=list)


async def _load_page_data(db: AsyncSession, organization_id: Optional[int]) -> AssignmentPageData:
    if not organization_id:
        return AssignmentPageData()
    return AssignmentPageData(
        seasons=await get_seasons(db, organization_id),
        teams=await get_all_teams(db, organization_id),
        programs=await get_programs(db, organization_id),
        registrations=await get_all_registrations(db, organization_id),
        athletes=await get_all_athlete_submissions(db, organization_id),
    )


def _resolve_state(state: SelectionRailState, data: AssignmentPageData) -> SelectionRailState:
    """Settle the season and drop selections the current lists no longer offer."""
    season = resolve_initial_season(data.seasons, state.season_id)
    season_id = season.id if season else None
    if season_id != state.season_id:
        state = state.change_season(season_id)

    season_team_ids = [t.id for t in teams_for_season(data.teams, season_id)]
    registration_athlete_ids = [
        a.submission_id for a in athletes_for_registration(data.athletes, state.registration_id)
    ]
    return SelectionRailState(
        season_id=state.season_id,
        teams=state.teams.restrict_to(season_team_ids),
        program_id=state.program_id,
        registration_id=state.registration_id,
        athlete_search=state.athlete_search,
        athletes=state.athletes.restrict_to(registration_athlete_ids),
    )


def _page_url(state: SelectionRailState, notice: Optional[str] = None, kind: str = "success") -> str:
    params: dict[str, Optional[str]] = dict(state.to_query())
    if notice:
        params["notice"] = notice
        params["notice_kind"] = kind
    return url_with_query(PAGE_PATH, params)


def _redirect(state: SelectionRailState, notice: Optional[str] = None, kind: str = "success") -> RedirectResponse:
    return RedirectResponse(url=_page_url(state, notice, kind), status_code=303)


def _state_from_form(raw: str) -> SelectionRailState:
    return SelectionRailState.from_query(dict(parse_qsl(raw.lstrip("?"))))


async def _current(request: Request, db: AsyncSession) -> tuple[SelectionRailState, AssignmentPageData]:
    organization_id = await get_organization_id(db)
    data = await _load_page_data(db, organization_id)
    state = _resolve_state(SelectionRailState.from_query(request.query_params), data)
    return state, data


@router.get("", response_class=HTMLResponse)
async def assignments_page(
    request: Request,
    db: AsyncSession = Depends(get_session),
) -> Response:
    """Render the three-column assignment surface."""
    context = await base_context(request, db)
    data = await _load_page_data(db, context["organization_id"])
    state = _resolve_state(SelectionRailState.from_query(request.query_params), data)

    season_teams = teams_for_season(data.teams, state.season_id)
    registrations = registrations_for_program(data.registrations, state.program_id)
    visible_athletes = athletes_for_registration(
        data.athletes, state.registration_id, state.athlete_search
    )
    board = AssignmentBoard.for_season(data.athletes, state.season_id)
    cards = build_team_cards(board, state.teams.selected, season_teams, data.athletes)

    return request.app.state.templates.TemplateResponse(
        "teams/assignments.html",
        {
            **context,
            "state": state,
            "state_query": url_with_query("", state.to_query()),
            "seasons": data.seasons,
            "season_teams": season_teams,
            "programs": data.programs,
            "registrations": registrations,
            "visible_athletes": visible_athletes,
            "assigned_ids": board.assigned_ids(),
            "cards": cards,
            "team_click_urls": [
                url_with_query(f"{PAGE_PATH}/select-team", {**state.to_query(), "index": i})
                for i in range(len(season_teams))
            ],
            "athlete_click_urls": [
                url_with_query(f"{PAGE_PATH}/select-athlete", {**state.to_query(), "index": i})
                for i in range(len(visible_athletes))
            ],
        },
    )


@router.get("/select-team")
async def select_team(
    request: Request,
    index: int = Query(...),
    shift: bool = Query(default=False),
    db: AsyncSession = Depends(get_session),
) -> RedirectResponse:
    """Toggle (or shift-range) a team in the rail."""
    state, data = await _current(request, db)
    visible = [t.id for t in teams_for_season(data.teams, state.season_id)]
    try:
        state = state.click_team(visible, index, shift)
    except IndexError:
        logger.warning("Ignoring team click at %s; %d teams visible", index, len(visible))
    return _redirect(state)


@router.get("/select-athlete")
async def select_athlete(
    request: Request,
    index: int = Query(...),
    shift: bool = Query(default=False),
    db: AsyncSession = Depends(get_session),
) -> RedirectResponse:
    """Toggle (or shift-range) an athlete in the athlete rail."""
    state, data = await _current(request, db)
    visible = [
        a.submission_id
        for a in athletes_for_registration(
            data.athletes, state.registration_id, state.athlete_search
        )
    ]
    try:
        state = state.click_athlete(visible, index, shift)
    except IndexError:
        logger.warning("Ignoring athlete click at %s; %d athletes visible", index, len(visible))
    return _redirect(state)


@router.get("/season")
async def change_season(
    request: Request,
    value: Optional[int] = Query(default=None),
    db: AsyncSession = Depends(get_session),
) -> RedirectResponse:
    state, _ = await _current(request, db)
    return _redirect(state.change_season(value))


@router.get("/program")
async def change_program(
    request: Request,
    value: Optional[int] = Query(default=None),
    db: AsyncSession = Depends(get_session),
) -> RedirectResponse:
    state, _ = await _current(request, db)
    return _redirect(state.change_program(value))


@router.get("/registration")
async def change_registration(
    request: Request,
    value: Optional[int] = Query(default=None),
    db: AsyncSession = Depends(get_session),
) -> RedirectResponse:
    state, _ = await _current(request, db)
    return _redirect(state.change_registration(value))


@router.get("/search")
async def search_athletes(
    request: Request,
    value: str = Query(default=""),
    db: AsyncSession = Depends(get_session),
) -> RedirectResponse:
    state, _ = await _current(request, db)
    return _redirect(state.search_athletes(value))


@router.get("/select-all-athletes")
async def select_all_athletes(
    request: Request,
    db: AsyncSession = Depends(get_session),
) -> RedirectResponse:
    """Add every athlete currently listed in the rail to the selection."""
    state, data = await _current(request, db)
    visible = [
        a.submission_id
        for a in athletes_for_registration(
            data.athletes, state.registration_id, state.athlete_search
        )
    ]
    return _redirect(state.select_all_athletes(visible))


@router.get("/clear-athletes")
async def clear_athletes(
    request: Request,
    db: AsyncSession = Depends(get_session),
) -> RedirectResponse:
    state, _ = await _current(request, db)
    return _redirect(state.clear_athletes())


async def _sync_for(
    db: AsyncSession, state: SelectionRailState
) -> tuple[AssignmentSync, list[TeamWithStats], SelectionRailState]:
    organization_id = await get_organization_id(db)
    data = await _load_page_data(db, organization_id)
    state = _resolve_state(state, data)
    board = AssignmentBoard.for_season(data.athletes, state.season_id)
    sync = AssignmentSync(
        board,
        assign=partial(assign_athletes_to_team, db),
        unassign=partial(unassign_athlete_from_team, db),
    )
    return sync, teams_for_season(data.teams, state.season_id), state


@router.post("/assign")
async def assign_selected(
    team_id: int = Form(...),
    submission_ids: list[int] = Form(default=[]),
    state: str = Form(default=""),
    db: AsyncSession = Depends(get_session),
) -> RedirectResponse:
    """Assign the selected athletes to one team card."""
    rail = _state_from_form(state)
    if not submission_ids:
        return _redirect(rail, "Select athletes to assign first", "error")

    sync, season_teams, rail = await _sync_for(db, rail)
    team = next((t for t in season_teams if t.id == team_id), None)
    if team is None:
        return _redirect(rail, "Team not found", "error")

    notification = await sync.drop(team.id, team.title, submission_ids)
    if notification.kind == "success":
        rail = rail.clear_athletes()
    return _redirect(rail, notification.message, notification.kind)


@router.post("/remove")
async def remove_from_team(
    team_id: int = Form(...),
    submission_id: int = Form(...),
    state: str = Form(default=""),
    db: AsyncSession = Depends(get_session),
) -> RedirectResponse:
    """Remove one athlete from a team card."""
    rail = _state_from_form(state)
    sync, _, rail = await _sync_for(db, rail)
    notification = await sync.remove(team_id, submission_id)
    return _redirect(rail, notification.message, notification.kind)
