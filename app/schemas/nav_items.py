from typing import Optional

from sqlmodel import Field, SQLModel


class NavItem(SQLModel, table=True):  # type: ignore[call-arg]
    """Sidebar navigation entry; children hang off ``parent_id``."""

    __tablename__ = "nav_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    organization_id: int = Field(foreign_key="organizations.id", index=True)
    parent_id: Optional[int] = Field(
        default=None, foreign_key="nav_items.id", index=True, ondelete="CASCADE"
    )
    label: str
    icon: Optional[str] = Field(default=None)
    route: Optional[str] = Field(default=None)
    order: int = Field(default=0)
    is_active: bool = Field(default=True, index=True)
