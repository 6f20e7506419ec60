"""Sidebar navigation and the stubbed signed-in user."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.navigation import CurrentUser, NavLink
from app.schemas.nav_items import NavItem
from app.schemas.users import User

logger = logging.getLogger(__name__)


async def get_nav_items(db: AsyncSession, organization_id: int) -> list[NavLink]:
    """Active navigation items as a two-level tree ordered by ``order``.

    Children whose parent is inactive or missing are dropped.
    """
    try:
        async with db.begin():
            result = await db.execute(
                select(NavItem)
                .where(
                    NavItem.organization_id == organization_id,  # type: ignore[arg-type]
                    NavItem.is_active.is_(True),  # type: ignore[attr-defined]
                )
                .order_by(NavItem.order, NavItem.id)  # type: ignore[arg-type]
            )
            items = result.scalars().all()
    except Exception:
        logger.exception("Failed to load navigation for organization %s", organization_id)
        return []

    roots: list[NavLink] = []
    by_id: dict[int, NavLink] = {}
    for item in items:
        if item.parent_id is None:
            link = NavLink(id=item.id, label=item.label, icon=item.icon, route=item.route)  # type: ignore[arg-type]
            by_id[link.id] = link
            roots.append(link)
    for item in items:
        if item.parent_id is not None and item.parent_id in by_id:
            by_id[item.parent_id].children.append(
                NavLink(id=item.id, label=item.label, icon=item.icon, route=item.route)  # type: ignore[arg-type]
            )
    return roots


async def get_current_user(db: AsyncSession) -> CurrentUser | None:
    """Return the demo user: the first user holding ``settings.demo_user_role``.

    There is no authentication yet; every request acts as this user.
    """
    try:
        async with db.begin():
            result = await db.execute(
                select(User)
                .where(User.role == settings.demo_user_role)  # type: ignore[arg-type]
                .order_by(User.id)  # type: ignore[arg-type]
                .limit(1)
            )
            user = result.scalar_one_or_none()
    except Exception:
        logger.exception("Failed to load current user")
        return None

    if user is None:
        logger.warning("No user with role %r; pages render signed out", settings.demo_user_role)
        return None

    return CurrentUser(
        id=user.id,  # type: ignore[arg-type]
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        role=user.role,
        avatar=user.avatar,
        organization_id=user.organization_id,
    )
