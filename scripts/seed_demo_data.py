#!/usr/bin/env python
"""Seed a demo organization with seasons, teams, a program and athletes.

Usage:
    python scripts/seed_demo_data.py

Rows are matched on natural keys (names, emails, titles), so running the
script again only adds what is missing.
"""

import asyncio
import sys
from datetime import date
from decimal import Decimal
from typing import Any

from dotenv import load_dotenv
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

load_dotenv()

ORGANIZATION_NAME = "Demo Athletic Association"

USERS = [
    {
        "email": "david.mitchell@example.com",
        "first_name": "David",
        "last_name": "Mitchell",
        "role": "school-administrator",
    },
    {
        "email": "karen.lopez@example.com",
        "first_name": "Karen",
        "last_name": "Lopez",
        "role": "coach",
    },
    {
        "email": "parent.jones@example.com",
        "first_name": "Chris",
        "last_name": "Jones",
        "role": "parent",
    },
]

SEASONS = [
    {"name": "2025-2026", "is_active": True},
    {"name": "2024-2025", "is_active": False},
]

# (season, title, sport, gender, grade, status, primary, secondary)
TEAMS = [
    ("2025-2026", "Varsity", "Cheerleading", "Female", 12, "provisioned", "#1D4ED8", "#FACC15"),
    ("2025-2026", "Junior Varsity", "Cheerleading", "Female", 10, "provisioned", "#1D4ED8", "#FFFFFF"),
    ("2025-2026", "Middle School", "Cheerleading", "Coed", 7, "draft", "#DC2626", "#FFFFFF"),
    ("2025-2026", "Varsity Football", "Football", "Male", 12, "provisioned", "#111827", "#F97316"),
    ("2024-2025", "Varsity", "Cheerleading", "Female", 12, "provisioned", "#1D4ED8", "#FACC15"),
]

PROGRAM = {
    "title": "2025 Cheer Season",
    "type": "season",
    "start_date": date(2025, 8, 1),
    "end_date": date(2026, 3, 31),
}

# Divisions with their athletes as (first, last, birthdate)
REGISTRATIONS = {
    "3rd-4th Grade Cheer": {
        "age_min": 8,
        "age_max": 10,
        "athletes": [
            ("Ava", "Brooks", date(2016, 4, 12)),
            ("Mia", "Carter", date(2016, 9, 3)),
            ("Zoe", "Diaz", date(2015, 11, 21)),
        ],
    },
    "5th-6th Grade Cheer": {
        "age_min": 10,
        "age_max": 12,
        "athletes": [
            ("Emma", "Foster", date(2014, 2, 17)),
            ("Lily", "Grant", date(2013, 7, 30)),
            ("Chloe", "Hayes", date(2014, 5, 8)),
            ("Grace", "Irwin", date(2013, 12, 1)),
        ],
    },
    "High School Cheer": {
        "age_min": 14,
        "age_max": 18,
        "athletes": [
            ("Sophia", "Jensen", date(2009, 3, 14)),
            ("Olivia", "Kim", date(2008, 10, 2)),
            ("Isabella", "Lane", date(2009, 6, 25)),
            ("Harper", "Moore", date(2010, 1, 19)),
            ("Ella", "Nash", date(2008, 8, 9)),
        ],
    },
}

# (label, icon, route, children)
NAV_ITEMS = [
    ("Teams", "users", "/teams", [
        ("Overview", None, "/teams"),
        ("Manage", None, "/teams/manage"),
        ("Assignments", None, "/teams/assignments"),
    ]),
    ("Programs", "calendar", "/programs", []),
    ("Members", "id-card", "/members", []),
    ("Finances", "dollar-sign", "/finances", []),
    ("Tickets", "ticket", "/tickets", []),
    ("Community", "message-circle", "/community", []),
]


async def get_or_create(
    session: AsyncSession, model: Any, defaults: dict[str, Any] | None = None, **keys: Any
) -> tuple[Any, bool]:
    """Return the row matching ``keys``, creating it with ``defaults`` if missing."""
    stmt = select(model).filter_by(**keys)
    result = await session.execute(stmt)
    existing = result.scalars().first()
    if existing is not None:
        return existing, False
    row = model(**keys, **(defaults or {}))
    session.add(row)
    await session.flush()
    return row, True


async def seed(session: AsyncSession) -> dict[str, int]:
    from app.schemas.athletes import Athlete
    from app.schemas.nav_items import NavItem
    from app.schemas.organizations import Organization
    from app.schemas.programs import Program, ProgramStatus, Registration
    from app.schemas.registration_submissions import RegistrationSubmission
    from app.schemas.seasons import Season
    from app.schemas.team_members import TeamMember
    from app.schemas.teams import Team, TeamStatus
    from app.schemas.users import User

    added: dict[str, int] = {}

    def count(kind: str, created: bool) -> None:
        if created:
            added[kind] = added.get(kind, 0) + 1

    org, created = await get_or_create(session, Organization, name=ORGANIZATION_NAME)
    count("organizations", created)

    users: dict[str, Any] = {}
    for data in USERS:
        user, created = await get_or_create(
            session,
            User,
            defaults={
                "organization_id": org.id,
                "first_name": data["first_name"],
                "last_name": data["last_name"],
                "role": data["role"],
            },
            email=data["email"],
        )
        users[data["role"]] = user
        count("users", created)

    seasons: dict[str, Any] = {}
    for data in SEASONS:
        season, created = await get_or_create(
            session,
            Season,
            defaults={"is_active": data["is_active"]},
            organization_id=org.id,
            name=data["name"],
        )
        seasons[data["name"]] = season
        count("seasons", created)

    for season_name, title, sport, gender, grade, status, primary, secondary in TEAMS:
        team, created = await get_or_create(
            session,
            Team,
            defaults={
                "organization_id": org.id,
                "sport": sport,
                "gender": gender,
                "grade": grade,
                "status": TeamStatus(status),
                "primary_color": primary,
                "secondary_color": secondary,
                "max_roster_size": 20,
            },
            season_id=seasons[season_name].id,
            title=title,
        )
        count("teams", created)
        if created and season_name == "2025-2026" and sport == "Cheerleading":
            session.add(TeamMember(team_id=team.id, user_id=users["coach"].id, role="coach"))

    program, created = await get_or_create(
        session,
        Program,
        defaults={
            "type": PROGRAM["type"],
            "start_date": PROGRAM["start_date"],
            "end_date": PROGRAM["end_date"],
            "status": ProgramStatus.PUBLISHED,
            "created_by": users["school-administrator"].id,
        },
        organization_id=org.id,
        title=PROGRAM["title"],
    )
    count("programs", created)

    for title, data in REGISTRATIONS.items():
        registration, created = await get_or_create(
            session,
            Registration,
            defaults={
                "sport": "Cheerleading",
                "gender": "Female",
                "age_min": data["age_min"],
                "age_max": data["age_max"],
                "price": Decimal("150.00"),
            },
            program_id=program.id,
            title=title,
        )
        count("registrations", created)

        for first_name, last_name, birthdate in data["athletes"]:
            athlete, created = await get_or_create(
                session,
                Athlete,
                defaults={"gender": "Female"},
                first_name=first_name,
                last_name=last_name,
                birthdate=birthdate,
            )
            count("athletes", created)
            _, created = await get_or_create(
                session,
                RegistrationSubmission,
                defaults={
                    "program_id": program.id,
                    "parent_id": users["parent"].id,
                    "registration_status": "paid",
                },
                registration_id=registration.id,
                athlete_id=athlete.id,
            )
            count("registration_submissions", created)

    for position, (label, icon, route, children) in enumerate(NAV_ITEMS):
        parent, created = await get_or_create(
            session,
            NavItem,
            defaults={"icon": icon, "route": route, "order": position},
            organization_id=org.id,
            parent_id=None,
            label=label,
        )
        count("nav_items", created)
        for child_position, (child_label, child_icon, child_route) in enumerate(children):
            _, created = await get_or_create(
                session,
                NavItem,
                defaults={"icon": child_icon, "route": child_route, "order": child_position},
                organization_id=org.id,
                parent_id=parent.id,
                label=child_label,
            )
            count("nav_items", created)

    return added


async def main() -> None:
    """Seed demo data into the configured database."""
    import os

    from app.utils.db_async import Database

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        print("ERROR: DATABASE_URL not configured")
        sys.exit(1)

    database = Database(database_url)
    try:
        await database.init_db()
        async with database.session_factory() as session:
            async with session.begin():
                added = await seed(session)
    finally:
        await database.dispose()

    if not added:
        print("Seeding complete: nothing to add")
        return
    for kind, n in sorted(added.items()):
        print(f"  ADD: {n} {kind}")
    print("\nSeeding complete")


if __name__ == "__main__":
    print("Seeding demo data...")
    asyncio.run(main())
