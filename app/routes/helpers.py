"""Shared helpers for page routes."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping
from urllib.parse import urlencode

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.fields import GRADE_LABELS, SPORTS, Gender
from app.services.navigation_service import get_current_user, get_nav_items
from app.services.team_service import get_organization_id

NOTICE_KINDS = ("success", "error")


def url_with_query(path: str, params: Mapping[str, Any]) -> str:
    """Append non-empty ``params`` to ``path`` as a query string."""
    clean = {k: v for k, v in params.items() if v is not None and v != ""}
    if not clean:
        return path
    return f"{path}?{urlencode(clean)}"


def read_notice(request: Request) -> dict[str, str] | None:
    """Toast carried across a POST/redirect/GET round trip."""
    message = request.query_params.get("notice")
    kind = request.query_params.get("notice_kind", "success")
    if not message:
        return None
    return {"kind": kind if kind in NOTICE_KINDS else "success", "message": message}


async def base_context(
    request: Request,
    db: AsyncSession,
    **extra: Any,
) -> dict[str, Any]:
    """Build the template context every page shares.

    Args:
        request: The FastAPI request object.
        db: Database session.
        **extra: Additional context values to include.

    Returns:
        Dict with request, organization_id, nav_items, current_user, notice,
        form option lists, and any extra values.
    """
    organization_id = await get_organization_id(db)
    nav_items = await get_nav_items(db, organization_id) if organization_id else []
    current_user = await get_current_user(db)
    return {
        "request": request,
        "organization_id": organization_id,
        "nav_items": nav_items,
        "current_user": current_user,
        "current_path": request.url.path,
        "current_year": datetime.now().year,
        "notice": read_notice(request),
        "sports": SPORTS,
        "genders": list(Gender),
        "grade_labels": GRADE_LABELS,
        **extra,
    }
