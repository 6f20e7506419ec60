"""Team form parsing and validation.

Runs before any mutation is attempted. Failures raise
:class:`TeamValidationError` carrying the offending form field so the page can
render the message inline next to it.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import ValidationError

from app.models.fields import is_hex_color
from app.models.teams import TeamUpdate
from app.schemas.teams import TeamStatus


class TeamValidationError(ValueError):
    """A team field failed validation."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


@dataclass
class TeamFormData:
    """Raw form data from the manage-teams page (all strings)."""

    title: str | None = None
    sport: str | None = None
    gender: str | None = None
    grade: str | None = None
    age_min: str | None = None
    age_max: str | None = None
    status: str | None = None
    max_roster_size: str | None = None
    primary_color: str | None = None
    secondary_color: str | None = None


def _clean_str(val: str | None) -> str | None:
    """Clean optional string field, returning None for empty strings."""
    if val and val.strip():
        return val.strip()
    return None


def _parse_int(field: str, raw: str | None, label: str) -> int | None:
    cleaned = _clean_str(raw)
    if cleaned is None:
        return None
    try:
        return int(cleaned)
    except ValueError:
        raise TeamValidationError(field, f"{label} must be a number") from None


def _parse_color(field: str, raw: str | None, label: str) -> str | None:
    cleaned = _clean_str(raw)
    if cleaned is None:
        return None
    if not cleaned.startswith("#"):
        cleaned = f"#{cleaned}"
    if not is_hex_color(cleaned):
        raise TeamValidationError(field, f"{label} must be a valid hex color")
    return cleaned.upper()


def parse_team_form(data: TeamFormData) -> TeamUpdate:
    """Convert raw form strings into a validated :class:`TeamUpdate`.

    Only fields present in the form (not ``None``) end up in the update, so a
    form that posts a single field performs a single-field update. Empty
    color and number inputs clear the stored value.
    """
    values: dict[str, object] = {}

    if data.title is not None:
        values["title"] = data.title.strip()
    if data.sport is not None:
        values["sport"] = data.sport.strip()
    if data.gender is not None:
        values["gender"] = data.gender.strip()
    if data.status is not None:
        try:
            values["status"] = TeamStatus(data.status.strip())
        except ValueError:
            raise TeamValidationError("status", f"Invalid status: {data.status}") from None
    if data.grade is not None:
        values["grade"] = _parse_int("grade", data.grade, "Grade")
    if data.age_min is not None:
        values["age_min"] = _parse_int("age_min", data.age_min, "Minimum age")
    if data.age_max is not None:
        values["age_max"] = _parse_int("age_max", data.age_max, "Maximum age")
    if data.max_roster_size is not None:
        values["max_roster_size"] = _parse_int(
            "max_roster_size", data.max_roster_size, "Roster size"
        )
    if data.primary_color is not None:
        values["primary_color"] = _parse_color(
            "primary_color", data.primary_color, "Primary color"
        )
    if data.secondary_color is not None:
        values["secondary_color"] = _parse_color(
            "secondary_color", data.secondary_color, "Secondary color"
        )

    try:
        update = TeamUpdate(**values)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = str(first["loc"][0]) if first.get("loc") else "form"
        raise TeamValidationError(field, first["msg"]) from exc

    validate_team_update(update)
    return update


def validate_team_update(
    update: TeamUpdate,
    current_age_min: int | None = None,
    current_age_max: int | None = None,
) -> None:
    """Check business rules on a partial update.

    Age bounds are compared after merging the update over the stored values,
    so changing only one bound still cannot invert the range.
    """
    fields = update.model_fields_set

    if "title" in fields and not (update.title or "").strip():
        raise TeamValidationError("title", "Team title is required")
    if "sport" in fields and not (update.sport or "").strip():
        raise TeamValidationError("sport", "Sport is required")
    if "gender" in fields and not (update.gender or "").strip():
        raise TeamValidationError("gender", "Gender is required")

    age_min = update.age_min if "age_min" in fields else current_age_min
    age_max = update.age_max if "age_max" in fields else current_age_max
    if age_min is not None and age_max is not None and age_min > age_max:
        raise TeamValidationError(
            "age_min", "Minimum age cannot be greater than maximum age"
        )

    for name, label in (("primary_color", "Primary color"), ("secondary_color", "Secondary color")):
        value = getattr(update, name)
        if name in fields and value is not None and not is_hex_color(value):
            raise TeamValidationError(name, f"{label} must be a valid hex color")


def validate_new_team(title: str | None, season_id: int | None) -> str:
    """Validate the create-team form, returning the cleaned title."""
    cleaned = _clean_str(title)
    if cleaned is None:
        raise TeamValidationError("title", "Please enter a team name")
    if season_id is None:
        raise TeamValidationError("season_id", "Please select a season")
    return cleaned
