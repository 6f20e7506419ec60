"""Sidebar navigation and signed-in user models."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class NavLink(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    label: str
    icon: Optional[str] = None
    route: Optional[str] = None
    children: List["NavLink"] = Field(default_factory=list)

    def is_current(self, path: str) -> bool:
        """True when ``path`` is this link's route or one of its children's."""
        if self.route and (path == self.route or path.startswith(self.route.rstrip("/") + "/")):
            return True
        return any(child.is_current(path) for child in self.children)


class CurrentUser(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    first_name: str
    last_name: str
    email: str
    role: str
    avatar: Optional[str] = None
    organization_id: Optional[int] = None

    @property
    def initials(self) -> str:
        return f"{self.first_name[:1]}{self.last_name[:1]}".upper()
