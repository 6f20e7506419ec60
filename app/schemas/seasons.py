from typing import Optional
from sqlmodel import SQLModel, Field


class Season(SQLModel, table=True):  # type: ignore[call-arg]
    __tablename__ = "seasons"

    id: Optional[int] = Field(default=None, primary_key=True)
    organization_id: int = Field(foreign_key="organizations.id", index=True)
    name: str = Field(index=True, description="Season name like '2025-2026'")
    # One active season per organization by convention only; not enforced here
    is_active: bool = Field(default=False, index=True)
