"""Team, season and staff queries plus team management mutations.

Read functions log unexpected failures and return an empty collection so a
partial data problem never takes a whole page down. Mutations return result
envelopes (see ``app.models.results``) and never raise past their call site.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Iterable, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.results import CopyTeamsResult, DeleteTeamsResult, TeamActionResult
from app.models.teams import (
    CopyOptions,
    RosterAthlete,
    SeasonRead,
    StaffTeamRole,
    StaffUser,
    TeamUpdate,
    TeamWithStats,
)
from app.schemas.athletes import Athlete
from app.schemas.organizations import Organization
from app.schemas.registration_submissions import RegistrationSubmission
from app.schemas.seasons import Season
from app.schemas.team_assignments import TeamAssignment
from app.schemas.team_members import TeamMember
from app.schemas.teams import Team, TeamStatus
from app.schemas.users import User
from app.services.validation import (
    TeamValidationError,
    validate_new_team,
    validate_team_update,
)

logger = logging.getLogger(__name__)

DEFAULT_TEAM_TITLE = "New Team"
STAFF_ROLES = ("school-administrator", "team-admin", "coach")


def to_team_with_stats(team: Team, roster_count: int) -> TeamWithStats:
    """Convert a team row plus its derived roster count into the view model."""
    return TeamWithStats.model_validate(
        {
            "id": team.id,
            "title": team.title,
            "sport": team.sport,
            "gender": team.gender,
            "grade": team.grade,
            "avatar": team.avatar,
            "primary_color": team.primary_color,
            "secondary_color": team.secondary_color,
            "status": team.status,
            "season_id": team.season_id,
            "roster_count": roster_count,
            "max_roster_size": team.max_roster_size,
            "age_min": team.age_min,
            "age_max": team.age_max,
        }
    )


def _roster_count_subquery():
    return (
        select(
            TeamAssignment.team_id,
            func.count(TeamAssignment.id).label("roster_count"),  # type: ignore[arg-type]
        )
        .group_by(TeamAssignment.team_id)  # type: ignore[arg-type]
        .subquery()
    )


async def get_organization_id(db: AsyncSession) -> int | None:
    """Return the id of the (single) organization, if one exists."""
    try:
        async with db.begin():
            result = await db.execute(
                select(Organization.id).order_by(Organization.id).limit(1)  # type: ignore[arg-type]
            )
            return result.scalar_one_or_none()
    except Exception:
        logger.exception("Failed to load organization")
        return None


async def get_seasons(db: AsyncSession, organization_id: int) -> list[SeasonRead]:
    """Seasons for an organization, newest name first."""
    try:
        async with db.begin():
            result = await db.execute(
                select(Season)
                .where(Season.organization_id == organization_id)  # type: ignore[arg-type]
                .order_by(Season.name.desc())  # type: ignore[attr-defined]
            )
            seasons = result.scalars().all()
    except Exception:
        logger.exception("Failed to load seasons for organization %s", organization_id)
        return []

    return [
        SeasonRead.model_validate(
            {"id": s.id, "name": s.name, "is_active": s.is_active}
        )
        for s in seasons
    ]


def resolve_initial_season(
    seasons: Sequence[SeasonRead], requested_id: int | None = None
) -> SeasonRead | None:
    """Pick the season a page opens on: requested, then active, then first."""
    if requested_id is not None:
        for season in seasons:
            if season.id == requested_id:
                return season
    for season in seasons:
        if season.is_active:
            return season
    return seasons[0] if seasons else None


async def _select_teams_with_counts(db: AsyncSession, *criteria) -> list[TeamWithStats]:
    counts = _roster_count_subquery()
    query = (
        select(Team, func.coalesce(counts.c.roster_count, 0))
        .outerjoin(counts, counts.c.team_id == Team.id)
        .where(*criteria)
        .order_by(Team.sport, Team.title)  # type: ignore[arg-type]
    )
    async with db.begin():
        result = await db.execute(query)
        rows = result.all()
    return [to_team_with_stats(team, int(count)) for team, count in rows]


async def get_all_teams(db: AsyncSession, organization_id: int) -> list[TeamWithStats]:
    """All teams for an organization across seasons, ordered by sport and title."""
    try:
        return await _select_teams_with_counts(
            db, Team.organization_id == organization_id
        )
    except Exception:
        logger.exception("Failed to load teams for organization %s", organization_id)
        return []


async def get_provisioned_teams(
    db: AsyncSession, organization_id: int
) -> list[TeamWithStats]:
    """Provisioned teams of the organization's active season."""
    try:
        async with db.begin():
            result = await db.execute(
                select(Season.id)
                .where(
                    Season.organization_id == organization_id,  # type: ignore[arg-type]
                    Season.is_active.is_(True),  # type: ignore[attr-defined]
                )
                .order_by(Season.id)  # type: ignore[arg-type]
                .limit(1)
            )
            active_season_id = result.scalar_one_or_none()
        if active_season_id is None:
            return []
        return await _select_teams_with_counts(
            db,
            Team.organization_id == organization_id,
            Team.season_id == active_season_id,
            Team.status == TeamStatus.PROVISIONED,
        )
    except Exception:
        logger.exception(
            "Failed to load provisioned teams for organization %s", organization_id
        )
        return []


def _roster_query():
    return (
        select(
            TeamAssignment.submission_id,
            TeamAssignment.status,
            Athlete.id.label("athlete_id"),  # type: ignore[union-attr]
            Athlete.first_name,
            Athlete.last_name,
            Athlete.birthdate,
            Team.id.label("team_id"),  # type: ignore[union-attr]
            Team.title.label("team_title"),  # type: ignore[attr-defined]
            Team.season_id,
        )  # type: ignore[call-overload]
        .select_from(TeamAssignment)
        .join(Team, Team.id == TeamAssignment.team_id)
        .join(
            RegistrationSubmission,
            RegistrationSubmission.id == TeamAssignment.submission_id,
        )
        .join(Athlete, Athlete.id == RegistrationSubmission.athlete_id)
    )


def _to_roster_athletes(rows: Iterable) -> list[RosterAthlete]:
    return [RosterAthlete.model_validate(dict(row)) for row in rows]


async def get_team_roster(db: AsyncSession, team_id: int) -> list[RosterAthlete]:
    """Athletes currently assigned to one team."""
    try:
        async with db.begin():
            result = await db.execute(
                _roster_query()
                .where(TeamAssignment.team_id == team_id)  # type: ignore[arg-type]
                .order_by(Athlete.last_name, Athlete.first_name)  # type: ignore[arg-type]
            )
            rows = result.mappings().all()
        return _to_roster_athletes(rows)
    except Exception:
        logger.exception("Failed to load roster for team %s", team_id)
        return []


async def get_athletes_on_provisioned_teams(
    db: AsyncSession, organization_id: int
) -> list[RosterAthlete]:
    """One row per assignment on any provisioned team of the organization."""
    try:
        async with db.begin():
            result = await db.execute(
                _roster_query()
                .where(
                    Team.organization_id == organization_id,  # type: ignore[arg-type]
                    Team.status == TeamStatus.PROVISIONED,  # type: ignore[arg-type]
                )
                .order_by(Team.title, Athlete.last_name, Athlete.first_name)  # type: ignore[arg-type]
            )
            rows = result.mappings().all()
        return _to_roster_athletes(rows)
    except Exception:
        logger.exception(
            "Failed to load rostered athletes for organization %s", organization_id
        )
        return []


async def get_staff_users(db: AsyncSession, organization_id: int) -> list[StaffUser]:
    """Staff users of an organization with the team roles they hold."""
    try:
        async with db.begin():
            users_result = await db.execute(
                select(User)
                .where(
                    User.organization_id == organization_id,  # type: ignore[arg-type]
                    User.role.in_(STAFF_ROLES),  # type: ignore[attr-defined]
                )
                .order_by(User.last_name, User.first_name)  # type: ignore[arg-type]
            )
            users = users_result.scalars().all()

            roles_result = await db.execute(
                select(TeamMember.user_id, TeamMember.role, Team.id, Team.title)  # type: ignore[call-overload]
                .join(Team, Team.id == TeamMember.team_id)
                .where(Team.organization_id == organization_id)  # type: ignore[arg-type]
                .order_by(Team.title)
            )
            role_rows = roles_result.all()
    except Exception:
        logger.exception("Failed to load staff for organization %s", organization_id)
        return []

    roles_by_user: dict[int, list[StaffTeamRole]] = {}
    for user_id, role, team_id, team_title in role_rows:
        roles_by_user.setdefault(user_id, []).append(
            StaffTeamRole(team_id=team_id, team_title=team_title, role=role)
        )

    return [
        StaffUser.model_validate(
            {
                "id": user.id,
                "first_name": user.first_name,
                "last_name": user.last_name,
                "email": user.email,
                "role": user.role,
                "avatar": user.avatar,
                "team_roles": roles_by_user.get(user.id, []),  # type: ignore[arg-type]
            }
        )
        for user in users
    ]


async def create_team(
    db: AsyncSession,
    organization_id: int,
    title: str | None,
    season_id: int | None,
) -> TeamActionResult:
    """Create a draft team in a season."""
    try:
        clean_title = validate_new_team(title, season_id)
    except TeamValidationError as exc:
        return TeamActionResult(success=False, error=exc.message, field=exc.field)

    team = Team(organization_id=organization_id, season_id=season_id, title=clean_title)
    try:
        async with db.begin():
            db.add(team)
            await db.flush()
    except SQLAlchemyError:
        logger.exception("Failed to create team %r", clean_title)
        return TeamActionResult(success=False, error="Failed to create team")

    logger.info("Created team %s (%r) in season %s", team.id, team.title, season_id)
    return TeamActionResult(success=True, team=to_team_with_stats(team, 0))


async def update_team(
    db: AsyncSession, team_id: int, update: TeamUpdate
) -> TeamActionResult:
    """Apply a partial update to a team after validating it against stored values."""
    try:
        async with db.begin():
            team = await db.get(Team, team_id)
            if team is None:
                return TeamActionResult(success=False, error="Team not found")

            validate_team_update(
                update, current_age_min=team.age_min, current_age_max=team.age_max
            )
            for name, value in update.model_dump(exclude_unset=True).items():
                setattr(team, name, value)
            team.updated_at = datetime.now(UTC).replace(tzinfo=None)

            count_result = await db.execute(
                select(func.count(TeamAssignment.id)).where(  # type: ignore[arg-type]
                    TeamAssignment.team_id == team_id  # type: ignore[arg-type]
                )
            )
            roster_count = count_result.scalar_one()
    except TeamValidationError as exc:
        return TeamActionResult(success=False, error=exc.message, field=exc.field)
    except SQLAlchemyError:
        logger.exception("Failed to update team %s", team_id)
        return TeamActionResult(success=False, error="Failed to update team")

    return TeamActionResult(success=True, team=to_team_with_stats(team, roster_count))


async def delete_teams(db: AsyncSession, team_ids: Sequence[int]) -> DeleteTeamsResult:
    """Delete teams; memberships and assignments cascade, submissions are detached."""
    ids = sorted(set(team_ids))
    if not ids:
        return DeleteTeamsResult(success=False, error="No teams selected")

    try:
        async with db.begin():
            result = await db.execute(
                delete(Team).where(Team.id.in_(ids))  # type: ignore[union-attr]
            )
            deleted = result.rowcount or 0
    except SQLAlchemyError:
        logger.exception("Failed to delete teams %s", ids)
        return DeleteTeamsResult(success=False, error="Failed to delete teams")

    logger.info("Deleted %d team(s)", deleted)
    return DeleteTeamsResult(success=True, deleted_count=deleted)


async def copy_teams(
    db: AsyncSession,
    source_team_ids: Sequence[int],
    target_season_id: int | None,
    options: CopyOptions,
) -> CopyTeamsResult:
    """Duplicate teams into a season as new draft teams with empty rosters."""
    if target_season_id is None:
        return CopyTeamsResult(success=False, error="Please select a destination season")
    if not source_team_ids:
        return CopyTeamsResult(success=False, error="No teams selected")

    try:
        async with db.begin():
            season = await db.get(Season, target_season_id)
            if season is None:
                return CopyTeamsResult(success=False, error="Destination season not found")

            result = await db.execute(
                select(Team)
                .where(Team.id.in_(list(source_team_ids)))  # type: ignore[union-attr]
                .order_by(Team.sport, Team.title)  # type: ignore[arg-type]
            )
            sources = result.scalars().all()

            copies: list[Team] = []
            for source in sources:
                copy = Team(
                    organization_id=source.organization_id,
                    season_id=target_season_id,
                    title=source.title if options.name else DEFAULT_TEAM_TITLE,
                    status=TeamStatus.DRAFT,
                    max_roster_size=source.max_roster_size,
                    age_min=source.age_min,
                    age_max=source.age_max,
                )
                if options.sport:
                    copy.sport = source.sport
                if options.gender:
                    copy.gender = source.gender
                if options.grade:
                    copy.grade = source.grade
                if options.avatar:
                    copy.avatar = source.avatar
                if options.colors:
                    copy.primary_color = source.primary_color
                    copy.secondary_color = source.secondary_color
                db.add(copy)
                copies.append(copy)
            await db.flush()
    except SQLAlchemyError:
        logger.exception("Failed to copy teams %s", list(source_team_ids))
        return CopyTeamsResult(success=False, error="Failed to copy teams")

    if not copies:
        return CopyTeamsResult(success=False, error="No teams found to copy")

    logger.info("Copied %d team(s) into season %s", len(copies), target_season_id)
    return CopyTeamsResult(
        success=True, teams=[to_team_with_stats(team, 0) for team in copies]
    )
