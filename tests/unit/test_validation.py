"""Unit tests for team form parsing and validation."""

import pytest

from app.models.teams import TeamUpdate
from app.schemas.teams import TeamStatus
from app.services.validation import (
    TeamFormData,
    TeamValidationError,
    parse_team_form,
    validate_new_team,
    validate_team_update,
)


class TestParseTeamForm:
    """Tests for parse_team_form()."""

    def test_only_posted_fields_are_set(self):
        update = parse_team_form(TeamFormData(title="  Varsity  "))
        assert update.model_fields_set == {"title"}
        assert update.title == "Varsity"

    def test_numbers_and_status_are_parsed(self):
        update = parse_team_form(
            TeamFormData(grade="-1", age_min="5", age_max="7", status="provisioned", max_roster_size="20")
        )
        assert update.grade == -1
        assert (update.age_min, update.age_max) == (5, 7)
        assert update.status is TeamStatus.PROVISIONED
        assert update.max_roster_size == 20

    def test_colors_are_normalized(self):
        update = parse_team_form(TeamFormData(primary_color="1d4ed8", secondary_color="#facc15"))
        assert update.primary_color == "#1D4ED8"
        assert update.secondary_color == "#FACC15"

    def test_empty_color_clears_value(self):
        update = parse_team_form(TeamFormData(primary_color=""))
        assert "primary_color" in update.model_fields_set
        assert update.primary_color is None

    @pytest.mark.parametrize(
        "form, field, message",
        [
            (TeamFormData(title="   "), "title", "Team title is required"),
            (TeamFormData(sport=""), "sport", "Sport is required"),
            (TeamFormData(primary_color="blue"), "primary_color", "Primary color must be a valid hex color"),
            (TeamFormData(age_min="ten"), "age_min", "Minimum age must be a number"),
            (TeamFormData(status="archived"), "status", "Invalid status: archived"),
            (
                TeamFormData(age_min="12", age_max="10"),
                "age_min",
                "Minimum age cannot be greater than maximum age",
            ),
        ],
    )
    def test_invalid_forms_report_field(self, form, field, message):
        with pytest.raises(TeamValidationError) as exc_info:
            parse_team_form(form)
        assert exc_info.value.field == field
        assert exc_info.value.message == message

    def test_out_of_range_values_map_to_field(self):
        with pytest.raises(TeamValidationError) as exc_info:
            parse_team_form(TeamFormData(max_roster_size="0"))
        assert exc_info.value.field == "max_roster_size"


class TestValidateTeamUpdate:
    """Tests for merged age-range checks against stored values."""

    def test_single_bound_checked_against_stored_value(self):
        with pytest.raises(TeamValidationError):
            validate_team_update(TeamUpdate(age_min=15), current_age_min=8, current_age_max=12)

    def test_valid_merge_passes(self):
        validate_team_update(TeamUpdate(age_max=14), current_age_min=8, current_age_max=12)


def test_validate_new_team():
    assert validate_new_team("  Freshman ", 1) == "Freshman"
    with pytest.raises(TeamValidationError, match="Please enter a team name"):
        validate_new_team("", 1)
    with pytest.raises(TeamValidationError, match="Please select a season"):
        validate_new_team("Freshman", None)
