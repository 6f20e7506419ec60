"""Local view state for the assignment surface.

``AssignmentBoard`` holds, for one season, the submission ids currently shown
on each team card. Drops and removals are applied optimistically and return
an :class:`OptimisticChange` that can be reverted when the server write fails.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from app.models.programs import RegisteredAthlete
from app.models.teams import TeamWithStats


@dataclass(frozen=True)
class OptimisticChange:
    """Snapshot of one team's list taken before a local mutation."""

    team_id: int
    previous: tuple[int, ...]
    added: tuple[int, ...] = ()
    removed: tuple[int, ...] = ()


@dataclass
class AssignmentBoard:
    season_id: int | None
    assignments: dict[int, list[int]] = field(default_factory=dict)

    @classmethod
    def for_season(
        cls, athletes: Iterable[RegisteredAthlete], season_id: int | None
    ) -> "AssignmentBoard":
        """Build the board from assignment refs whose team belongs to ``season_id``."""
        board = cls(season_id=season_id)
        for athlete in athletes:
            for ref in athlete.team_assignments:
                if ref.team_season_id != season_id:
                    continue
                roster = board.assignments.setdefault(ref.team_id, [])
                if athlete.submission_id not in roster:
                    roster.append(athlete.submission_id)
        return board

    def roster(self, team_id: int) -> list[int]:
        return list(self.assignments.get(team_id, []))

    def count(self, team_id: int) -> int:
        return len(self.assignments.get(team_id, []))

    def assigned_ids(self) -> set[int]:
        """Every submission assigned to any team on the board."""
        return {sid for roster in self.assignments.values() for sid in roster}

    def apply_drop(self, team_id: int, submission_ids: Sequence[int]) -> OptimisticChange:
        """Add ids not already on the team (idempotent union, never a replace)."""
        current = self.assignments.setdefault(team_id, [])
        previous = tuple(current)
        added: list[int] = []
        for sid in submission_ids:
            if sid not in current and sid not in added:
                added.append(sid)
        current.extend(added)
        return OptimisticChange(team_id=team_id, previous=previous, added=tuple(added))

    def remove(self, team_id: int, submission_id: int) -> OptimisticChange:
        current = self.assignments.get(team_id, [])
        previous = tuple(current)
        self.assignments[team_id] = [sid for sid in current if sid != submission_id]
        removed = (submission_id,) if submission_id in previous else ()
        return OptimisticChange(team_id=team_id, previous=previous, removed=removed)

    def revert(self, change: OptimisticChange) -> None:
        self.assignments[change.team_id] = list(change.previous)


def drag_payload(dragged_id: int, selected_ids: Sequence[int]) -> list[int]:
    """Ids carried by a drag: the whole selection if the dragged athlete is in it."""
    if dragged_id in selected_ids:
        return list(selected_ids)
    return [dragged_id]


@dataclass(frozen=True)
class AthleteChip:
    submission_id: int
    name: str
    birthdate: str | None = None


@dataclass(frozen=True)
class TeamCardView:
    """Everything a team card renders.

    Only ``assigned`` is backed by data; invitations are not modelled yet so
    the other counters always read zero.
    """

    team_id: int
    title: str
    avatar: str | None
    athletes: tuple[AthleteChip, ...]
    invited: int = 0
    accepted: int = 0
    declined: int = 0

    @property
    def assigned(self) -> int:
        return len(self.athletes)


def build_team_cards(
    board: AssignmentBoard,
    selected_team_ids: Sequence[int],
    season_teams: Sequence[TeamWithStats],
    athletes: Sequence[RegisteredAthlete],
) -> list[TeamCardView]:
    """One card per selected team of the current season, in selection order."""
    teams_by_id = {team.id: team for team in season_teams}
    athletes_by_id = {athlete.submission_id: athlete for athlete in athletes}

    cards: list[TeamCardView] = []
    for team_id in selected_team_ids:
        team = teams_by_id.get(team_id)
        if team is None:
            continue
        chips = tuple(
            AthleteChip(
                submission_id=sid,
                name=athletes_by_id[sid].name,
                birthdate=(
                    athletes_by_id[sid].birthdate.isoformat()
                    if athletes_by_id[sid].birthdate
                    else None
                ),
            )
            for sid in board.roster(team_id)
            if sid in athletes_by_id
        )
        cards.append(
            TeamCardView(team_id=team.id, title=team.title, avatar=team.avatar, athletes=chips)
        )
    return cards
