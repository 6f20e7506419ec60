"""Programs, registrations and the athletes registered under them."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.programs import (
    ProgramCreator,
    ProgramWithStats,
    RegisteredAthlete,
    RegistrationRead,
    TeamAssignmentRef,
)
from app.models.results import ProgramActionResult
from app.schemas.athletes import Athlete
from app.schemas.programs import Program, ProgramStatus, Registration
from app.schemas.registration_submissions import RegistrationSubmission
from app.schemas.team_assignments import TeamAssignment
from app.schemas.teams import Team
from app.schemas.users import User

logger = logging.getLogger(__name__)


async def get_programs(db: AsyncSession, organization_id: int) -> list[ProgramWithStats]:
    """Programs of an organization with registrant counts, newest first.

    Args:
        db: Async database session
        organization_id: Owning organization

    Returns:
        List of ProgramWithStats; empty on failure
    """
    counts = (
        select(
            RegistrationSubmission.program_id,
            func.count(RegistrationSubmission.id).label("registrant_count"),  # type: ignore[arg-type]
        )
        .group_by(RegistrationSubmission.program_id)  # type: ignore[arg-type]
        .subquery()
    )
    query = (
        select(Program, User, func.coalesce(counts.c.registrant_count, 0))
        .outerjoin(counts, counts.c.program_id == Program.id)
        .outerjoin(User, User.id == Program.created_by)  # type: ignore[arg-type]
        .where(Program.organization_id == organization_id)  # type: ignore[arg-type]
        .order_by(Program.created_at.desc())  # type: ignore[attr-defined]
    )

    try:
        async with db.begin():
            result = await db.execute(query)
            rows = result.all()
    except Exception:
        logger.exception("Failed to load programs for organization %s", organization_id)
        return []

    programs: list[ProgramWithStats] = []
    for program, creator, registrant_count in rows:
        programs.append(
            ProgramWithStats.model_validate(
                {
                    "id": program.id,
                    "title": program.title,
                    "type": program.type,
                    "start_date": program.start_date,
                    "end_date": program.end_date,
                    "visibility": program.visibility,
                    "registration_status": program.registration_status,
                    "registrant_count": int(registrant_count),
                    "created_by": (
                        ProgramCreator(
                            id=creator.id,
                            first_name=creator.first_name,
                            last_name=creator.last_name,
                            avatar=creator.avatar,
                        )
                        if creator is not None
                        else None
                    ),
                }
            )
        )
    return programs


async def create_program(
    db: AsyncSession,
    organization_id: int,
    title: str | None,
    status: str = ProgramStatus.DRAFT.value,
    created_by: int | None = None,
) -> ProgramActionResult:
    """Create a program with a title and draft/published status."""
    clean_title = (title or "").strip()
    if not clean_title:
        return ProgramActionResult(success=False, error="Program title is required")
    try:
        program_status = ProgramStatus(status)
    except ValueError:
        return ProgramActionResult(success=False, error=f"Invalid program status: {status}")

    program = Program(
        organization_id=organization_id,
        title=clean_title,
        status=program_status,
        created_by=created_by,
    )
    try:
        async with db.begin():
            db.add(program)
            await db.flush()
    except SQLAlchemyError:
        logger.exception("Failed to create program %r", clean_title)
        return ProgramActionResult(success=False, error="Failed to create program")

    logger.info("Created program %s (%r)", program.id, program.title)
    return ProgramActionResult(success=True, program_id=program.id)


async def get_all_registrations(
    db: AsyncSession, organization_id: int
) -> list[RegistrationRead]:
    """Every registration under the organization's programs, by program then title."""
    try:
        async with db.begin():
            result = await db.execute(
                select(Registration)
                .join(Program, Program.id == Registration.program_id)  # type: ignore[arg-type]
                .where(Program.organization_id == organization_id)  # type: ignore[arg-type]
                .order_by(Registration.program_id, Registration.title)  # type: ignore[arg-type]
            )
            registrations = result.scalars().all()
    except Exception:
        logger.exception(
            "Failed to load registrations for organization %s", organization_id
        )
        return []

    return [
        RegistrationRead.model_validate(
            {
                "id": r.id,
                "program_id": r.program_id,
                "title": r.title,
                "sport": r.sport,
                "gender": r.gender,
                "age_min": r.age_min,
                "age_max": r.age_max,
            }
        )
        for r in registrations
    ]


async def get_all_athlete_submissions(
    db: AsyncSession, organization_id: int
) -> list[RegisteredAthlete]:
    """Every athlete submission with the team assignments it holds.

    Each assignment carries the season of its team so callers can scope the
    board to one season without another query.
    """
    try:
        async with db.begin():
            submissions_result = await db.execute(
                select(
                    RegistrationSubmission.id,
                    RegistrationSubmission.registration_id,
                    RegistrationSubmission.program_id,
                    Athlete.id,
                    Athlete.first_name,
                    Athlete.last_name,
                    Athlete.birthdate,
                    Athlete.gender,
                )  # type: ignore[call-overload]
                .join(Athlete, Athlete.id == RegistrationSubmission.athlete_id)
                .join(Program, Program.id == RegistrationSubmission.program_id)
                .where(Program.organization_id == organization_id)
                .order_by(Athlete.last_name, Athlete.first_name, RegistrationSubmission.id)
            )
            submission_rows = submissions_result.all()

            assignments_result = await db.execute(
                select(
                    TeamAssignment.submission_id,
                    TeamAssignment.team_id,
                    TeamAssignment.status,
                    Team.season_id,
                )  # type: ignore[call-overload]
                .join(Team, Team.id == TeamAssignment.team_id)
                .where(Team.organization_id == organization_id)
                .order_by(TeamAssignment.id)
            )
            assignment_rows = assignments_result.all()
    except Exception:
        logger.exception(
            "Failed to load athlete submissions for organization %s", organization_id
        )
        return []

    refs_by_submission: dict[int, list[TeamAssignmentRef]] = {}
    for submission_id, team_id, status, season_id in assignment_rows:
        refs_by_submission.setdefault(submission_id, []).append(
            TeamAssignmentRef(team_id=team_id, team_season_id=season_id, status=status)
        )

    return [
        RegisteredAthlete.model_validate(
            {
                "submission_id": submission_id,
                "registration_id": registration_id,
                "program_id": program_id,
                "athlete_id": athlete_id,
                "first_name": first_name,
                "last_name": last_name,
                "birthdate": birthdate,
                "gender": gender,
                "team_assignments": refs_by_submission.get(submission_id, []),
            }
        )
        for (
            submission_id,
            registration_id,
            program_id,
            athlete_id,
            first_name,
            last_name,
            birthdate,
            gender,
        ) in submission_rows
    ]
