"""Selection rail state for the team assignments page.

Everything here is a synchronous, local state transition: no I/O and no
failure modes. The page is server-rendered, so the rail state round-trips
through query parameters (see :meth:`SelectionRailState.to_query`).

Range selection operates over the *visible-order projection at click time*:
a shift-click selects or deselects the items between the anchor index and the
clicked index of whatever list is currently rendered (after season, search
and sort filters). Re-ordering or filtering the list between the anchor click
and the shift-click therefore changes which items the range covers.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Mapping, Sequence, TypeVar

from app.models.programs import RegisteredAthlete, RegistrationRead
from app.models.teams import TeamWithStats

T = TypeVar("T")


def teams_for_season(
    teams: Iterable[TeamWithStats], season_id: int | None
) -> list[TeamWithStats]:
    """Teams whose season matches, in rendered order (sport, then title)."""
    if season_id is None:
        return []
    return sorted(
        (team for team in teams if team.season_id == season_id),
        key=lambda team: (team.sport, team.title),
    )


def registrations_for_program(
    registrations: Iterable[RegistrationRead], program_id: int | None
) -> list[RegistrationRead]:
    """Registrations under a program; nothing is offered until one is chosen."""
    if program_id is None:
        return []
    return [r for r in registrations if r.program_id == program_id]


def athletes_for_registration(
    athletes: Iterable[RegisteredAthlete],
    registration_id: int | None,
    search: str = "",
) -> list[RegisteredAthlete]:
    """Submissions for a registration, filtered by a case-insensitive name search."""
    if registration_id is None:
        return []
    needle = search.strip().lower()
    return [
        athlete
        for athlete in athletes
        if athlete.registration_id == registration_id
        and needle in athlete.name.lower()
    ]


@dataclass(frozen=True)
class RangeSelection:
    """An ordered set of selected ids plus the index of the last click."""

    selected: tuple[int, ...] = ()
    anchor: int | None = None

    def is_selected(self, item_id: int) -> bool:
        return item_id in self.selected

    def click(
        self, visible_ids: Sequence[int], index: int, shift: bool = False
    ) -> "RangeSelection":
        """Apply a click on ``visible_ids[index]``.

        A plain click toggles the item. A shift-click with a previous anchor
        applies the clicked item's *new* state (selected if it was not, and
        vice versa) to the whole range between the anchor and ``index``. The
        anchor always moves to ``index``.
        """
        if not 0 <= index < len(visible_ids):
            raise IndexError(f"click index {index} outside visible list")

        item_id = visible_ids[index]
        will_select = item_id not in self.selected

        if shift and self.anchor is not None and self.anchor >= 0:
            start = min(self.anchor, index)
            end = min(max(self.anchor, index), len(visible_ids) - 1)
            range_ids = list(visible_ids[start : end + 1])
            if will_select:
                selected = _ordered_union(self.selected, range_ids)
            else:
                drop = set(range_ids)
                selected = tuple(i for i in self.selected if i not in drop)
        elif will_select:
            selected = self.selected + (item_id,)
        else:
            selected = tuple(i for i in self.selected if i != item_id)

        return RangeSelection(selected=selected, anchor=index)

    def select_all(self, visible_ids: Sequence[int]) -> "RangeSelection":
        return RangeSelection(
            selected=_ordered_union(self.selected, visible_ids), anchor=self.anchor
        )

    def clear(self) -> "RangeSelection":
        return RangeSelection()

    def restrict_to(self, allowed_ids: Iterable[int]) -> "RangeSelection":
        """Drop selected ids that are no longer offered."""
        allowed = set(allowed_ids)
        return replace(self, selected=tuple(i for i in self.selected if i in allowed))


def _ordered_union(existing: Sequence[int], extra: Iterable[int]) -> tuple[int, ...]:
    seen = set(existing)
    merged = list(existing)
    for item in extra:
        if item not in seen:
            seen.add(item)
            merged.append(item)
    return tuple(merged)


def _parse_ids(raw: str | None) -> tuple[int, ...]:
    if not raw:
        return ()
    ids: list[int] = []
    for part in raw.split(","):
        part = part.strip()
        if part.isdigit() and int(part) not in ids:
            ids.append(int(part))
    return tuple(ids)


def _parse_int(raw: str | None) -> int | None:
    if raw is None or not raw.strip().lstrip("-").isdigit():
        return None
    return int(raw.strip())


def _parse_index(raw: str | None) -> int | None:
    value = _parse_int(raw)
    if value is None or value < 0:
        return None
    return value


@dataclass(frozen=True)
class SelectionRailState:
    """Filter and multi-select state of the assignments page."""

    season_id: int | None = None
    teams: RangeSelection = field(default_factory=RangeSelection)
    program_id: int | None = None
    registration_id: int | None = None
    athlete_search: str = ""
    athletes: RangeSelection = field(default_factory=RangeSelection)

    def change_season(self, season_id: int | None) -> "SelectionRailState":
        """Switch season; team and athlete selections never carry across seasons."""
        return replace(
            self,
            season_id=season_id,
            teams=RangeSelection(),
            athletes=RangeSelection(),
        )

    def change_program(self, program_id: int | None) -> "SelectionRailState":
        return replace(
            self,
            program_id=program_id,
            registration_id=None,
            athletes=RangeSelection(),
        )

    def change_registration(self, registration_id: int | None) -> "SelectionRailState":
        return replace(self, registration_id=registration_id, athletes=RangeSelection())

    def search_athletes(self, query: str) -> "SelectionRailState":
        return replace(self, athlete_search=query, athletes=replace(self.athletes, anchor=None))

    def click_team(
        self, visible_team_ids: Sequence[int], index: int, shift: bool = False
    ) -> "SelectionRailState":
        return replace(self, teams=self.teams.click(visible_team_ids, index, shift))

    def click_athlete(
        self, visible_submission_ids: Sequence[int], index: int, shift: bool = False
    ) -> "SelectionRailState":
        return replace(
            self, athletes=self.athletes.click(visible_submission_ids, index, shift)
        )

    def select_all_athletes(
        self, visible_submission_ids: Sequence[int]
    ) -> "SelectionRailState":
        return replace(self, athletes=self.athletes.select_all(visible_submission_ids))

    def clear_athletes(self) -> "SelectionRailState":
        return replace(self, athletes=RangeSelection())

    def to_query(self) -> dict[str, str]:
        """Serialize to query parameters, omitting empty values."""
        params: dict[str, str] = {}
        if self.season_id is not None:
            params["season"] = str(self.season_id)
        if self.teams.selected:
            params["teams"] = ",".join(str(i) for i in self.teams.selected)
        if self.teams.anchor is not None:
            params["team_anchor"] = str(self.teams.anchor)
        if self.program_id is not None:
            params["program"] = str(self.program_id)
        if self.registration_id is not None:
            params["registration"] = str(self.registration_id)
        if self.athlete_search:
            params["q"] = self.athlete_search
        if self.athletes.selected:
            params["athletes"] = ",".join(str(i) for i in self.athletes.selected)
        if self.athletes.anchor is not None:
            params["athlete_anchor"] = str(self.athletes.anchor)
        return params

    @classmethod
    def from_query(cls, params: Mapping[str, str]) -> "SelectionRailState":
        """Parse query parameters leniently; malformed values are dropped."""
        return cls(
            season_id=_parse_int(params.get("season")),
            teams=RangeSelection(
                selected=_parse_ids(params.get("teams")),
                anchor=_parse_index(params.get("team_anchor")),
            ),
            program_id=_parse_int(params.get("program")),
            registration_id=_parse_int(params.get("registration")),
            athlete_search=params.get("q", ""),
            athletes=RangeSelection(
                selected=_parse_ids(params.get("athletes")),
                anchor=_parse_index(params.get("athlete_anchor")),
            ),
        )
