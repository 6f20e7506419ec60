"""Unit tests for DTO conversion strictness."""

import pytest
from pydantic import ValidationError

from app.models.fields import Gender
from app.models.navigation import NavLink
from app.models.teams import StaffUser, TeamUpdate, TeamWithStats
from app.schemas.teams import Team, TeamStatus
from app.services.team_service import to_team_with_stats


def _row(**overrides):
    row = {
        "id": 1,
        "title": "Varsity",
        "sport": "Cheerleading",
        "gender": "Female",
        "status": TeamStatus.PROVISIONED,
        "season_id": 3,
        "roster_count": 2,
    }
    row.update(overrides)
    return row


class TestTeamWithStats:
    """Rows that do not match the view model fail instead of rendering."""

    def test_valid_row(self):
        team = TeamWithStats.model_validate(_row())
        assert team.is_provisioned is True

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            TeamWithStats.model_validate(_row(extra_column="x"))

    def test_no_type_coercion(self):
        with pytest.raises(ValidationError):
            TeamWithStats.model_validate(_row(roster_count="2"))

    def test_negative_roster_count_rejected(self):
        with pytest.raises(ValidationError):
            TeamWithStats.model_validate(_row(roster_count=-1))

    def test_converts_table_row(self):
        team = Team(
            id=5,
            organization_id=1,
            season_id=2,
            title="JV",
            status=TeamStatus.DRAFT,
        )
        view = to_team_with_stats(team, 4)
        assert view.roster_count == 4
        assert view.sport == "Football"
        assert view.gender == "Male"
        assert view.is_provisioned is False


def test_team_update_rejects_bad_color_and_unknown_fields():
    with pytest.raises(ValidationError):
        TeamUpdate(primary_color="#12345")
    with pytest.raises(ValidationError):
        TeamUpdate.model_validate({"name": "x"})


def test_staff_display_role():
    staff = StaffUser(id=1, first_name="K", last_name="L", email="k@example.com", role="team-admin")
    assert staff.display_role == "Team Admin"
    assert staff.model_copy(update={"role": "coach"}).display_role == "Coach"


def test_gender_labels():
    assert Gender("Female").label == "Girls"
    assert Gender.coed.label == "Coed"


def test_nav_link_current_path():
    link = NavLink(
        id=1,
        label="Teams",
        route="/teams",
        children=[NavLink(id=2, label="Assignments", route="/teams/assignments")],
    )
    assert link.is_current("/teams")
    assert link.is_current("/teams/assignments")
    assert not link.is_current("/programs")
    assert not link.children[0].is_current("/teams")
