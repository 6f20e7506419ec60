"""Integration tests for team, program and navigation queries."""

from __future__ import annotations

import pytest
import pytest_asyncio
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.teams import CopyOptions, TeamUpdate
from app.schemas.registration_submissions import RegistrationSubmission
from app.schemas.team_assignments import TeamAssignment
from app.schemas.team_members import TeamMember
from app.schemas.teams import TeamStatus
from app.services.assignment_service import assign_athletes_to_team
from app.services.navigation_service import get_current_user, get_nav_items
from app.services.program_service import (
    create_program,
    get_all_athlete_submissions,
    get_all_registrations,
    get_programs,
)
from app.services.team_service import (
    copy_teams,
    create_team,
    delete_teams,
    get_all_teams,
    get_athletes_on_provisioned_teams,
    get_organization_id,
    get_provisioned_teams,
    get_seasons,
    get_staff_users,
    update_team,
)
from tests.integration.factories import BoardData, create_board_data


@pytest_asyncio.fixture
async def board_data(db_session: AsyncSession) -> BoardData:
    return await create_board_data(db_session)


@pytest.mark.asyncio
async def test_organization_and_seasons(db_session: AsyncSession, board_data: BoardData) -> None:
    assert await get_organization_id(db_session) == board_data.organization_id

    seasons = await get_seasons(db_session, board_data.organization_id)
    assert [s.name for s in seasons] == ["2025-2026", "2024-2025"]
    assert [s.is_active for s in seasons] == [True, False]


@pytest.mark.asyncio
async def test_teams_carry_derived_roster_count(
    db_session: AsyncSession, board_data: BoardData
) -> None:
    await assign_athletes_to_team(
        db_session, board_data.varsity_id, board_data.submission_ids[:2]
    )

    teams = await get_all_teams(db_session, board_data.organization_id)
    by_id = {t.id: t for t in teams}

    assert len(teams) == 3
    assert by_id[board_data.varsity_id].roster_count == 2
    assert by_id[board_data.jv_id].roster_count == 0
    assert by_id[board_data.varsity_id].status is TeamStatus.PROVISIONED


@pytest.mark.asyncio
async def test_provisioned_teams_only_from_active_season(
    db_session: AsyncSession, board_data: BoardData
) -> None:
    teams = await get_provisioned_teams(db_session, board_data.organization_id)
    assert [t.id for t in teams] == [board_data.varsity_id]


@pytest.mark.asyncio
async def test_rostered_athletes_and_staff(db_session: AsyncSession, board_data: BoardData) -> None:
    await assign_athletes_to_team(
        db_session, board_data.varsity_id, board_data.submission_ids[:1]
    )
    await assign_athletes_to_team(db_session, board_data.jv_id, board_data.submission_ids[1:2])

    roster = await get_athletes_on_provisioned_teams(db_session, board_data.organization_id)
    assert [(r.team_id, r.name) for r in roster] == [(board_data.varsity_id, "Ava Brooks")]

    staff = await get_staff_users(db_session, board_data.organization_id)
    by_email = {s.email: s for s in staff}
    assert set(by_email) == {"admin@example.com", "coach@example.com"}
    assert [r.team_title for r in by_email["coach@example.com"].team_roles] == ["Varsity"]
    assert by_email["admin@example.com"].display_role == "School Administrator"


@pytest.mark.asyncio
async def test_create_team_defaults_and_validation(
    db_session: AsyncSession, board_data: BoardData
) -> None:
    created = await create_team(
        db_session, board_data.organization_id, "  Freshman  ", board_data.active_season_id
    )
    assert created.success is True
    assert created.team is not None
    assert created.team.title == "Freshman"
    assert created.team.status is TeamStatus.DRAFT
    assert created.team.sport == "Football"
    assert created.team.gender == "Male"

    missing_name = await create_team(
        db_session, board_data.organization_id, "", board_data.active_season_id
    )
    assert missing_name.success is False
    assert missing_name.error == "Please enter a team name"

    missing_season = await create_team(db_session, board_data.organization_id, "X", None)
    assert missing_season.error == "Please select a season"


@pytest.mark.asyncio
async def test_update_team_checks_merged_age_range(
    db_session: AsyncSession, board_data: BoardData
) -> None:
    ok = await update_team(
        db_session, board_data.jv_id, TeamUpdate(age_min=10, age_max=12, primary_color="#ABCDEF")
    )
    assert ok.success is True
    assert ok.team is not None
    assert (ok.team.age_min, ok.team.age_max) == (10, 12)

    # Only the minimum changes, but it is compared against the stored maximum
    bad = await update_team(db_session, board_data.jv_id, TeamUpdate(age_min=14))
    assert bad.success is False
    assert bad.field == "age_min"
    assert bad.error == "Minimum age cannot be greater than maximum age"

    missing = await update_team(db_session, 999_999, TeamUpdate(title="Ghost"))
    assert missing.success is False
    assert missing.error == "Team not found"


@pytest.mark.asyncio
async def test_delete_teams_cascades_assignments(
    db_session: AsyncSession, board_data: BoardData
) -> None:
    await assign_athletes_to_team(
        db_session, board_data.jv_id, board_data.submission_ids[:2]
    )

    result = await delete_teams(db_session, [board_data.jv_id])
    assert result.success is True
    assert result.deleted_count == 1

    async with db_session.begin():
        rows = (
            await db_session.execute(
                select(TeamAssignment).where(
                    TeamAssignment.team_id == board_data.jv_id  # type: ignore[arg-type]
                )
            )
        ).all()
    assert rows == []

    empty = await delete_teams(db_session, [])
    assert empty.success is False


@pytest.mark.asyncio
async def test_delete_team_removes_staff_and_detaches_submissions(
    db_session: AsyncSession, board_data: BoardData
) -> None:
    linked_id = board_data.submission_ids[0]
    async with db_session.begin():
        await db_session.execute(
            update(RegistrationSubmission)
            .where(RegistrationSubmission.id == linked_id)  # type: ignore[arg-type]
            .values(team_id=board_data.varsity_id)
        )
    await assign_athletes_to_team(
        db_session, board_data.varsity_id, board_data.submission_ids[:2]
    )
    await assign_athletes_to_team(
        db_session, board_data.jv_id, board_data.submission_ids[1:3]
    )

    result = await delete_teams(db_session, [board_data.varsity_id])
    assert result.success is True
    assert result.deleted_count == 1

    async with db_session.begin():
        members = (
            await db_session.execute(
                select(TeamMember.id).where(
                    TeamMember.team_id == board_data.varsity_id  # type: ignore[arg-type]
                )
            )
        ).all()
        submission_team = (
            await db_session.execute(
                select(RegistrationSubmission.id, RegistrationSubmission.team_id).where(
                    RegistrationSubmission.id == linked_id  # type: ignore[arg-type]
                )
            )
        ).one_or_none()
        varsity_assignments = (
            await db_session.execute(
                select(TeamAssignment.id).where(
                    TeamAssignment.team_id == board_data.varsity_id  # type: ignore[arg-type]
                )
            )
        ).all()
        jv_assignments = (
            await db_session.execute(
                select(TeamAssignment.submission_id)
                .where(TeamAssignment.team_id == board_data.jv_id)  # type: ignore[arg-type]
                .order_by(TeamAssignment.submission_id)  # type: ignore[arg-type]
            )
        ).scalars().all()

    assert members == []
    assert submission_team is not None
    assert submission_team.team_id is None
    assert varsity_assignments == []
    assert list(jv_assignments) == sorted(board_data.submission_ids[1:3])


@pytest.mark.asyncio
async def test_copy_teams_into_season(db_session: AsyncSession, board_data: BoardData) -> None:
    result = await copy_teams(
        db_session,
        [board_data.varsity_id],
        board_data.past_season_id,
        CopyOptions(name=False, colors=True, grade=False),
    )

    assert result.success is True
    assert len(result.teams) == 1
    copy = result.teams[0]
    assert copy.title == "New Team"
    assert copy.season_id == board_data.past_season_id
    assert copy.status is TeamStatus.DRAFT
    assert copy.primary_color == "#1D4ED8"
    assert copy.grade is None
    assert copy.roster_count == 0

    no_season = await copy_teams(db_session, [board_data.varsity_id], None, CopyOptions())
    assert no_season.success is False


@pytest.mark.asyncio
async def test_programs_registrations_and_submissions(
    db_session: AsyncSession, board_data: BoardData
) -> None:
    await assign_athletes_to_team(
        db_session, board_data.varsity_id, board_data.submission_ids[:1]
    )
    await assign_athletes_to_team(
        db_session, board_data.past_team_id, board_data.submission_ids[:1]
    )

    programs = await get_programs(db_session, board_data.organization_id)
    assert len(programs) == 1
    assert programs[0].registrant_count == 4
    assert programs[0].program_value == 0
    assert programs[0].created_by is not None
    assert programs[0].created_by.first_name == "David"

    registrations = await get_all_registrations(db_session, board_data.organization_id)
    assert [r.id for r in registrations] == [board_data.registration_id]

    athletes = await get_all_athlete_submissions(db_session, board_data.organization_id)
    assert len(athletes) == 4
    first = next(a for a in athletes if a.submission_id == board_data.submission_ids[0])
    assert {(ref.team_id, ref.team_season_id) for ref in first.team_assignments} == {
        (board_data.varsity_id, board_data.active_season_id),
        (board_data.past_team_id, board_data.past_season_id),
    }


@pytest.mark.asyncio
async def test_create_program(db_session: AsyncSession, board_data: BoardData) -> None:
    created = await create_program(db_session, board_data.organization_id, "Summer Camp", "published")
    assert created.success is True
    assert created.program_id is not None

    programs = await get_programs(db_session, board_data.organization_id)
    assert programs[0].title == "Summer Camp"

    blank = await create_program(db_session, board_data.organization_id, "   ")
    assert blank.success is False
    assert blank.error == "Program title is required"


@pytest.mark.asyncio
async def test_navigation_and_current_user(db_session: AsyncSession, board_data: BoardData) -> None:
    nav = await get_nav_items(db_session, board_data.organization_id)
    assert [item.label for item in nav] == ["Teams"]
    assert nav[0].is_current("/teams/assignments") is True

    user = await get_current_user(db_session)
    assert user is not None
    assert user.id == board_data.admin_id
    assert user.initials == "DM"
