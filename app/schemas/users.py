"""Organization users: administrators, coaches, parents."""

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class User(SQLModel, table=True):  # type: ignore[call-arg]
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    organization_id: Optional[int] = Field(
        default=None, foreign_key="organizations.id", index=True
    )
    email: str = Field(unique=True, index=True)
    first_name: str
    last_name: str
    # "school-administrator" | "team-admin" | "coach" | "parent"
    role: str = Field(index=True)
    avatar: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
