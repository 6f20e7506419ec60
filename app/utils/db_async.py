"""Async SQLAlchemy engine and session helpers.

The application owns exactly one :class:`Database` for the lifetime of the
process. It is constructed in the FastAPI lifespan, stored on
``app.state.database`` and handed to request handlers through
:func:`get_session`. Scripts construct their own instance and dispose it when
they finish.
"""

from __future__ import annotations

import ssl
from typing import Any, AsyncGenerator, Dict, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel


def _normalize_db_url(url: str) -> str:
    """Ensure an async-capable PostgreSQL driver is selected when using Postgres.

    If the URL is plain "postgresql://..." or the alias "postgres://...",
    switch to the asyncpg driver via "postgresql+asyncpg://...".
    """
    try:
        u = make_url(url)
    except Exception:
        # Fallback string-level normalization for odd/partial URLs
        for prefix in ("postgresql://", "postgres://"):
            if url.startswith(prefix):
                return "postgresql+asyncpg://" + url.split("://", 1)[1]
        return url

    driver = (u.drivername or "").lower()
    # An explicit driver (e.g. postgresql+psycopg) is respected as-is.
    if "+" not in driver and driver in ("postgres", "postgresql"):
        u = u.set(drivername="postgresql+asyncpg")
    return u.render_as_string(hide_password=False)


def _ssl_connect_args(sslmode: str | None) -> Dict[str, Any]:
    """Translate a libpq ``sslmode`` into asyncpg connect kwargs."""
    if not sslmode:
        return {}

    mode = sslmode.lower()
    if mode == "disable":
        return {"ssl": False}
    if mode in {"allow", "prefer"}:
        # asyncpg negotiates TLS on its own when the server requires it
        return {}
    if mode == "require":
        ssl_context = ssl.create_default_context()
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE
        return {"ssl": ssl_context}
    if mode == "verify-ca":
        ssl_context = ssl.create_default_context()
        ssl_context.check_hostname = False
        return {"ssl": ssl_context}
    # verify-full and anything unrecognized get the secure default
    return {"ssl": ssl.create_default_context()}


def prepare_connection(url: str) -> Tuple[str, Dict[str, Any]]:
    """Strip query args asyncpg rejects and derive its connect kwargs."""
    normalized_url = _normalize_db_url(url)
    split = urlsplit(normalized_url)

    sslmode = None
    filtered_pairs = []
    for key, value in parse_qsl(split.query, keep_blank_values=True):
        if key == "sslmode":
            sslmode = value
            continue
        if key == "channel_binding":
            continue
        filtered_pairs.append((key, value))

    cleaned_query = urlencode(filtered_pairs, doseq=True)
    cleaned_url = urlunsplit(split._replace(query=cleaned_query)).rstrip("?")
    return cleaned_url, _ssl_connect_args(sslmode)


def describe_database_url(url: str) -> str:
    """Return a sanitized, human-readable description of the DB URL for logging.

    Example: "postgresql+asyncpg://user@host:5432/dbname"
    Passwords are never included.
    """
    try:
        u = make_url(url)
    except Exception:
        # On parse failure, do not log the raw URL
        return "<unparseable database URL>"
    auth = u.username or "?"
    host = u.host or "?"
    port = f":{u.port}" if u.port else ""
    db = u.database or "?"
    return f"{u.drivername}://{auth}@{host}{port}/{db}"


def load_table_modules() -> None:
    """Import every table module so SQLModel metadata is fully populated."""
    # Imported locally to avoid circular imports at module import time
    from app.schemas import (  # noqa: F401
        athletes,
        nav_items,
        organizations,
        programs,
        registration_submissions,
        seasons,
        team_assignments,
        team_members,
        teams,
        users,
    )


class Database:
    """Engine plus session factory with an explicit open/dispose lifecycle."""

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self.url, connect_args = prepare_connection(url)
        self.engine: AsyncEngine = create_async_engine(
            self.url,
            echo=echo,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
        self.session_factory = async_sessionmaker(
            bind=self.engine, expire_on_commit=False, class_=AsyncSession
        )

    @classmethod
    def from_settings(cls) -> "Database":
        from app.config import settings

        return cls(settings.database_url)

    def describe(self) -> str:
        return describe_database_url(self.url)

    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield an async database session."""
        async with self.session_factory() as session:
            yield session

    async def init_db(self) -> None:
        """Create all tables registered on the SQLModel metadata."""
        load_table_modules()

        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def dispose(self) -> None:
        """Dispose of the async engine and its connection pool."""
        await self.engine.dispose()


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a session from the app-owned Database."""
    database: Database = request.app.state.database
    async for session in database.session():
        yield session
