from datetime import date, datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class Athlete(SQLModel, table=True):  # type: ignore[call-arg]
    __tablename__ = "athletes"

    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str
    last_name: str
    gender: Optional[str] = Field(default=None)
    birthdate: Optional[date] = Field(default=None)
    grade: Optional[int] = Field(default=None)
    grad_year: Optional[int] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
