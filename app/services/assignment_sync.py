"""Optimistic assignment updates reconciled against the database.

Each action updates the :class:`AssignmentBoard` first, awaits the server
write, and rolls the board back if the write fails. Rollback is applied on
every failure path so the board never shows a roster the database rejected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Literal, Sequence

from app.models.results import ActionResult
from app.services.assignment_board import AssignmentBoard

logger = logging.getLogger(__name__)

AssignFn = Callable[[int, Sequence[int]], Awaitable[ActionResult]]
UnassignFn = Callable[[int, int], Awaitable[ActionResult]]


@dataclass(frozen=True)
class Notification:
    """A transient toast shown after a mutation settles."""

    kind: Literal["success", "error"]
    message: str


def _athlete_text(count: int) -> str:
    return "athlete" if count == 1 else "athletes"


class AssignmentSync:
    """Ties a board to the assign/unassign persistence calls."""

    def __init__(self, board: AssignmentBoard, assign: AssignFn, unassign: UnassignFn) -> None:
        self.board = board
        self._assign = assign
        self._unassign = unassign

    async def drop(
        self, team_id: int, team_title: str, submission_ids: Sequence[int]
    ) -> Notification:
        """Assign a dragged batch to a team."""
        ids = list(submission_ids)
        change = self.board.apply_drop(team_id, ids)

        result = await self._assign(team_id, ids)
        if not result.success:
            self.board.revert(change)
            logger.warning("Reverted drop on team %s: %s", team_id, result.error)
            return Notification("error", result.error or "Failed to assign athletes")

        count = len(ids)
        return Notification("success", f"{count} {_athlete_text(count)} assigned to {team_title}")

    async def remove(self, team_id: int, submission_id: int) -> Notification:
        """Remove one athlete from a team card."""
        change = self.board.remove(team_id, submission_id)

        result = await self._unassign(team_id, submission_id)
        if not result.success:
            self.board.revert(change)
            logger.warning("Reverted removal on team %s: %s", team_id, result.error)
            return Notification("error", result.error or "Failed to remove athlete")

        return Notification("success", "Athlete removed from team")
