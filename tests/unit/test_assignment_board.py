"""Unit tests for the optimistic assignment board."""

from datetime import date

from app.models.programs import RegisteredAthlete, TeamAssignmentRef
from app.models.teams import TeamWithStats
from app.schemas.teams import TeamStatus
from app.services.assignment_board import (
    AssignmentBoard,
    build_team_cards,
    drag_payload,
)


def _athlete(submission_id: int, name: str, refs: list[tuple[int, int]]) -> RegisteredAthlete:
    first, last = name.split()
    return RegisteredAthlete(
        submission_id=submission_id,
        athlete_id=submission_id,
        registration_id=1,
        program_id=1,
        first_name=first,
        last_name=last,
        birthdate=date(2012, 1, submission_id),
        team_assignments=[
            TeamAssignmentRef(team_id=team_id, team_season_id=season_id, status="assigned")
            for team_id, season_id in refs
        ],
    )


ATHLETES = [
    _athlete(1, "Ava Brooks", [(10, 1), (20, 2)]),
    _athlete(2, "Mia Carter", [(10, 1)]),
    _athlete(3, "Zoe Diaz", []),
]


class TestAssignmentBoard:
    """Tests for building, dropping, removing and reverting."""

    def test_for_season_only_keeps_that_seasons_teams(self):
        board = AssignmentBoard.for_season(ATHLETES, 1)
        assert board.assignments == {10: [1, 2]}

        other = AssignmentBoard.for_season(ATHLETES, 2)
        assert other.assignments == {20: [1]}
        assert other.assigned_ids() == {1}

    def test_drop_is_an_idempotent_union(self):
        board = AssignmentBoard.for_season(ATHLETES, 1)
        change = board.apply_drop(10, [2, 3, 3])

        assert board.roster(10) == [1, 2, 3]
        assert change.added == (3,)
        assert change.previous == (1, 2)

        repeat = board.apply_drop(10, [3])
        assert repeat.added == ()
        assert board.count(10) == 3

    def test_revert_restores_previous_roster(self):
        board = AssignmentBoard.for_season(ATHLETES, 1)
        change = board.apply_drop(10, [3])
        board.revert(change)
        assert board.roster(10) == [1, 2]

        removal = board.remove(10, 1)
        assert board.roster(10) == [2]
        assert removal.removed == (1,)
        board.revert(removal)
        assert board.roster(10) == [1, 2]

    def test_teams_are_independent(self):
        board = AssignmentBoard(season_id=1)
        board.apply_drop(10, [1])
        board.apply_drop(11, [1])
        board.remove(10, 1)
        assert board.roster(10) == []
        assert board.roster(11) == [1]


def test_drag_payload_uses_selection_when_dragged_item_is_selected():
    assert drag_payload(2, [1, 2, 3]) == [1, 2, 3]
    assert drag_payload(9, [1, 2, 3]) == [9]


def test_build_team_cards_follows_selection_order():
    teams = [
        TeamWithStats(
            id=team_id,
            title=title,
            sport="Cheerleading",
            gender="Female",
            status=TeamStatus.PROVISIONED,
            season_id=1,
            roster_count=0,
        )
        for team_id, title in ((10, "Varsity"), (11, "JV"))
    ]
    board = AssignmentBoard.for_season(ATHLETES, 1)

    cards = build_team_cards(board, [11, 10, 99], teams, ATHLETES)

    assert [c.title for c in cards] == ["JV", "Varsity"]
    varsity = cards[1]
    assert varsity.assigned == 2
    assert [chip.name for chip in varsity.athletes] == ["Ava Brooks", "Mia Carter"]
    assert varsity.athletes[0].birthdate == "2012-01-01"
    assert (varsity.invited, varsity.accepted, varsity.declined) == (0, 0, 0)
