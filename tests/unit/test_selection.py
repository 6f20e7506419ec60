"""Unit tests for selection rail state transitions."""

import pytest

from app.models.programs import RegisteredAthlete, RegistrationRead
from app.models.teams import TeamWithStats
from app.schemas.teams import TeamStatus
from app.services.selection import (
    RangeSelection,
    SelectionRailState,
    athletes_for_registration,
    registrations_for_program,
    teams_for_season,
)


def _team(team_id: int, title: str, season_id: int, sport: str = "Cheerleading") -> TeamWithStats:
    return TeamWithStats(
        id=team_id,
        title=title,
        sport=sport,
        gender="Female",
        status=TeamStatus.DRAFT,
        season_id=season_id,
        roster_count=0,
    )


def _athlete(submission_id: int, first: str, last: str, registration_id: int = 1) -> RegisteredAthlete:
    return RegisteredAthlete(
        submission_id=submission_id,
        athlete_id=submission_id,
        registration_id=registration_id,
        program_id=1,
        first_name=first,
        last_name=last,
    )


class TestRangeSelection:
    """Tests for click, shift-click and bulk helpers."""

    def test_plain_click_toggles(self):
        sel = RangeSelection().click([10, 20, 30], 1)
        assert sel.selected == (20,)
        assert sel.anchor == 1

        sel = sel.click([10, 20, 30], 1)
        assert sel.selected == ()
        assert sel.anchor == 1

    def test_shift_click_selects_range_between_anchor_and_index(self):
        ids = [10, 20, 30, 40, 50]
        sel = RangeSelection().click(ids, 1).click(ids, 3, shift=True)
        assert sel.selected == (20, 30, 40)
        assert sel.anchor == 3

    def test_shift_click_backwards(self):
        ids = [10, 20, 30, 40]
        sel = RangeSelection().click(ids, 3).click(ids, 0, shift=True)
        assert set(sel.selected) == {10, 20, 30, 40}

    def test_shift_click_on_selected_item_deselects_range(self):
        ids = [10, 20, 30, 40]
        sel = RangeSelection(selected=(10, 20, 30, 40), anchor=0)
        sel = sel.click(ids, 2, shift=True)
        assert sel.selected == (40,)

    def test_shift_click_without_anchor_behaves_like_click(self):
        sel = RangeSelection().click([10, 20, 30], 2, shift=True)
        assert sel.selected == (30,)

    def test_range_uses_visible_order_at_click_time(self):
        """Re-ordering between clicks changes which ids the range covers."""
        first_order = [1, 2, 3, 4]
        sel = RangeSelection().click(first_order, 0)

        reordered = [1, 4, 3, 2]
        sel = sel.click(reordered, 1, shift=True)
        assert set(sel.selected) == {1, 4}

    def test_index_outside_visible_list_raises(self):
        with pytest.raises(IndexError):
            RangeSelection().click([1, 2], 2)

    def test_select_all_and_restrict(self):
        sel = RangeSelection(selected=(5,)).select_all([1, 2, 5])
        assert sel.selected == (5, 1, 2)
        assert sel.restrict_to([1, 2]).selected == (1, 2)
        assert sel.clear() == RangeSelection()

    def test_negative_anchor_is_treated_as_no_anchor(self):
        sel = RangeSelection(anchor=-1).click([10, 11, 12, 13, 14], 3, shift=True)
        assert sel.selected == (13,)
        assert sel.anchor == 3


class TestSelectionRailState:
    """Tests for filter changes and query round-tripping."""

    def test_changing_season_resets_team_and_athlete_selection(self):
        state = SelectionRailState(
            season_id=1,
            teams=RangeSelection(selected=(3, 4), anchor=1),
            athletes=RangeSelection(selected=(7,), anchor=0),
            program_id=2,
        )
        switched = state.change_season(2)
        assert switched.season_id == 2
        assert switched.teams == RangeSelection()
        assert switched.athletes == RangeSelection()
        assert switched.program_id == 2

    def test_changing_program_clears_registration_and_athletes(self):
        state = SelectionRailState(
            program_id=1, registration_id=5, athletes=RangeSelection(selected=(9,))
        )
        changed = state.change_program(2)
        assert changed.program_id == 2
        assert changed.registration_id is None
        assert changed.athletes.selected == ()

    def test_search_keeps_selection_but_drops_anchor(self):
        state = SelectionRailState(athletes=RangeSelection(selected=(9,), anchor=3))
        searched = state.search_athletes("ava")
        assert searched.athlete_search == "ava"
        assert searched.athletes.selected == (9,)
        assert searched.athletes.anchor is None

    def test_query_round_trip(self):
        state = SelectionRailState(
            season_id=1,
            teams=RangeSelection(selected=(3, 4), anchor=1),
            program_id=2,
            registration_id=5,
            athlete_search="mia",
            athletes=RangeSelection(selected=(7, 8), anchor=0),
        )
        params = state.to_query()
        assert params["teams"] == "3,4"
        assert SelectionRailState.from_query(params) == state

    def test_from_query_drops_malformed_values(self):
        state = SelectionRailState.from_query(
            {"season": "abc", "teams": "1,x,2,1", "team_anchor": ""}
        )
        assert state.season_id is None
        assert state.teams.selected == (1, 2)
        assert state.teams.anchor is None

    def test_negative_anchor_in_query_is_dropped(self):
        state = SelectionRailState.from_query(
            {"season": "1", "team_anchor": "-1", "athlete_anchor": "-4"}
        )
        assert state.teams.anchor is None
        assert state.athletes.anchor is None

        clicked = state.click_team([10, 11, 12, 13, 14], 3, shift=True)
        assert clicked.teams.selected == (13,)
        assert clicked.teams.anchor == 3

    def test_select_all_athletes_keeps_existing_selection_first(self):
        state = SelectionRailState(athletes=RangeSelection(selected=(8,), anchor=2))
        selected = state.select_all_athletes([7, 8, 9])
        assert selected.athletes.selected == (8, 7, 9)
        assert selected.athletes.anchor == 2


class TestFilters:
    """Tests for the list projections the rails render."""

    def test_teams_for_season_sorted_by_sport_then_title(self):
        teams = [
            _team(1, "Varsity", 1),
            _team(2, "Junior Varsity", 1),
            _team(3, "Varsity", 2),
            _team(4, "Alpha", 1, sport="Football"),
        ]
        assert [t.id for t in teams_for_season(teams, 1)] == [2, 1, 4]
        assert teams_for_season(teams, None) == []

    def test_registrations_need_a_program(self):
        regs = [
            RegistrationRead(id=1, program_id=1, title="A"),
            RegistrationRead(id=2, program_id=2, title="B"),
        ]
        assert registrations_for_program(regs, None) == []
        assert [r.id for r in registrations_for_program(regs, 2)] == [2]

    def test_athlete_search_is_case_insensitive(self):
        athletes = [
            _athlete(1, "Ava", "Brooks"),
            _athlete(2, "Mia", "Carter"),
            _athlete(3, "Ava", "Diaz", registration_id=2),
        ]
        assert [a.submission_id for a in athletes_for_registration(athletes, 1, "AVA")] == [1]
        assert athletes_for_registration(athletes, None) == []
