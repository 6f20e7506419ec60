"""
Contains PyDantic fields and option lists shared by team and program models.
"""
import re
from enum import Enum
from typing import Annotated

from pydantic import Field as PydField

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"
HEX_COLOR_RE = re.compile(HEX_COLOR_PATTERN)

HexColor = Annotated[str, PydField(pattern=HEX_COLOR_PATTERN)]
Age = Annotated[int, PydField(ge=0, le=99)]


class Gender(str, Enum):
    male = "Male"
    female = "Female"
    coed = "Coed"

    @property
    def label(self) -> str:
        return {
            "Male": "Boys",
            "Female": "Girls",
            "Coed": "Coed",
        }[self.value]


SPORTS = ["Football", "Cheerleading", "Basketball", "Baseball", "Soccer"]

# Grade values as stored on teams; -1 is Pre-K and 0 is Kindergarten
GRADE_LABELS = {
    -1: "Pre-K",
    0: "K",
    1: "1st",
    2: "2nd",
    3: "3rd",
    4: "4th",
    5: "5th",
    6: "6th",
    7: "7th",
    8: "8th",
    9: "9th",
    10: "10th",
    11: "11th",
    12: "12th",
}


def is_hex_color(value: str) -> bool:
    return HEX_COLOR_RE.match(value) is not None
