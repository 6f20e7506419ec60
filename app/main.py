"""
Main entry point for FastAPI application.
"""
from contextlib import asynccontextmanager
from pathlib import Path
import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from app.config import settings
from app.logging_config import setup_logging
from app.models.fields import GRADE_LABELS
from app.routes import api, assignments, teams, ui
from app.utils.db_async import Database

logger = logging.getLogger(__name__)

APP_DIR = Path(__file__).resolve().parent

setup_logging(
    level=settings.log_level,
    access_log=settings.access_log,
    sql_echo=settings.sql_echo,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    database = Database.from_settings()
    app.state.database = database
    logger.info(f"DB target: {database.describe()}")

    if settings.is_dev and settings.auto_init_db:
        logger.info("Running init_db()…")
        try:
            await database.init_db()
            logger.info("DB ready.")
        except Exception:
            logger.exception("init_db failed")
            raise
    else:
        logger.info("Skipping init_db(); auto_init_db disabled or not a dev environment")

    # Hand control to the application
    yield

    # Shutdown: dispose engine cleanly
    try:
        logger.info("Disposing DB engine…")
        await database.dispose()
        logger.info("DB engine disposed.")
    except Exception:
        logger.exception("Failed to dispose DB engine")


def grade_label(value):
    """Jinja filter: stored grade number to its display label."""
    if value is None:
        return ""
    return GRADE_LABELS.get(value, str(value))


# load in app details
app = FastAPI(title="RosterHub", lifespan=lifespan)
app.mount("/static", StaticFiles(directory=APP_DIR / "static"), name="static")
app.state.templates = Jinja2Templates(directory=APP_DIR / "templates")
app.state.templates.env.filters["grade_label"] = grade_label
app.include_router(api.router)
app.include_router(assignments.router)
app.include_router(teams.router)
app.include_router(ui.router)


@app.get("/health")
async def health_check():
    """Health Check Endpoint"""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
