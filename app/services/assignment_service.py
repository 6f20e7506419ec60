"""Persistence for team roster assignments.

Two entry points, both returning an :class:`ActionResult` instead of raising:

- :func:`assign_athletes_to_team` upserts one row per submission in a single
  transaction, so a batch from one drop commits atomically and repeating the
  same pair is harmless.
- :func:`unassign_athlete_from_team` hard-deletes the row for one
  ``(team, submission)`` pair and reports failure when there is none.

Identifiers are trusted: eligibility rules (age, gender) are only applied to
which athletes the page offers, not re-checked here.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Sequence

from sqlalchemy import delete
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.results import ActionResult
from app.schemas.team_assignments import ASSIGNED, TeamAssignment

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def _dedupe(ids: Sequence[int]) -> list[int]:
    seen: set[int] = set()
    ordered: list[int] = []
    for item in ids:
        if item not in seen:
            seen.add(item)
            ordered.append(item)
    return ordered


async def assign_athletes_to_team(
    db: AsyncSession,
    team_id: int,
    submission_ids: Sequence[int],
) -> ActionResult:
    """Upsert ``assigned`` rows for each submission on ``team_id``.

    Args:
        db: Async database session
        team_id: Target team
        submission_ids: Registration submissions to put on the roster

    Returns:
        ActionResult; an empty batch is a successful no-op
    """
    ids = _dedupe(submission_ids)
    if not ids:
        return ActionResult.ok()

    now = _now()
    stmt = pg_insert(TeamAssignment).values(
        [
            {
                "team_id": team_id,
                "submission_id": sid,
                "status": ASSIGNED,
                "created_at": now,
                "updated_at": now,
            }
            for sid in ids
        ]
    )
    stmt = stmt.on_conflict_do_update(
        constraint="uq_team_assignment",
        set_={"status": ASSIGNED, "updated_at": stmt.excluded.updated_at},
    )

    try:
        async with db.begin():
            await db.execute(stmt)
    except SQLAlchemyError:
        logger.exception(
            "Failed to assign %d submission(s) to team %s", len(ids), team_id
        )
        return ActionResult.fail("Failed to assign athletes")

    logger.info("Assigned %d submission(s) to team %s", len(ids), team_id)
    return ActionResult.ok()


async def unassign_athlete_from_team(
    db: AsyncSession,
    team_id: int,
    submission_id: int,
) -> ActionResult:
    """Delete the assignment row for ``(team_id, submission_id)``.

    Returns:
        ActionResult; ``success`` is False when the pair was not assigned
    """
    stmt = delete(TeamAssignment).where(
        TeamAssignment.team_id == team_id,  # type: ignore[arg-type]
        TeamAssignment.submission_id == submission_id,  # type: ignore[arg-type]
    )

    try:
        async with db.begin():
            result = await db.execute(stmt)
            deleted = result.rowcount or 0
    except SQLAlchemyError:
        logger.exception(
            "Failed to unassign submission %s from team %s", submission_id, team_id
        )
        return ActionResult.fail("Failed to remove athlete")

    if deleted == 0:
        logger.warning(
            "No assignment found for submission %s on team %s", submission_id, team_id
        )
        return ActionResult.fail("Assignment not found")

    logger.info("Unassigned submission %s from team %s", submission_id, team_id)
    return ActionResult.ok()
