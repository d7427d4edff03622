"""FastAPI application entry point.

Start with:
    uvicorn doctracker.main:app --reload
or the ``doctracker`` console script, which binds HOST:PORT from settings.

The app is built by ``create_app`` with:
- Lifespan events for logging setup and DB bootstrap
- Exception handlers for auth and database failures
- Router includes for the API, the UI entry points, and health
- Static UI assets mounted last
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from doctracker.config import Settings, get_settings
from doctracker.core.exceptions import UnauthorizedError
from doctracker.core.security import require_auth
from doctracker.models.database import close_db, init_db

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
#  Lifespan: startup / shutdown
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: configure logging, then bootstrap the schema.

    A failure creating the tables propagates and aborts startup.
    """
    settings: Settings = app.state.settings

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Doc Tracker starting up")
    if not settings.app_token:
        logger.warning("APP_TOKEN is not set; every authenticated request will be rejected")
    if not settings.index_file.exists():
        logger.warning("UI entry document not found at %s", settings.index_file)

    await init_db(app, settings)

    yield

    logger.info("Doc Tracker shutting down")
    await close_db(app)


# ---------------------------------------------------------------------------
#  Exception handlers
# ---------------------------------------------------------------------------

async def _unauthorized_handler(request: Request, exc: UnauthorizedError) -> JSONResponse:
    return JSONResponse(status_code=401, content={"error": exc.message})


async def _database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(
        "Database error",
        exc_info=exc,
        extra={"path": request.url.path, "method": request.method},
    )
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


# ---------------------------------------------------------------------------
#  FastAPI application
# ---------------------------------------------------------------------------

def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around an explicit ``Settings`` instance."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Doc Tracker",
        description="Tracks documentation reviews, issues, and support-driven gaps",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.settings = settings

    app.add_exception_handler(UnauthorizedError, _unauthorized_handler)
    app.add_exception_handler(SQLAlchemyError, _database_error_handler)

    from doctracker.api.gaps import router as gaps_router
    from doctracker.api.health import router as health_router
    from doctracker.api.issues import router as issues_router
    from doctracker.api.reviews import router as reviews_router
    from doctracker.api.stats import router as stats_router
    from doctracker.api.ui import router as ui_router

    protected = [Depends(require_auth)]
    app.include_router(reviews_router, dependencies=protected)
    app.include_router(issues_router, dependencies=protected)
    app.include_router(gaps_router, dependencies=protected)
    app.include_router(stats_router, dependencies=protected)
    app.include_router(health_router)
    app.include_router(ui_router)

    # Must come after every route: a mount at "/" matches all paths.
    app.mount("/", StaticFiles(directory=settings.static_dir), name="static")

    return app


app = create_app()


def run() -> None:
    """Console-script entry point: serve ``app`` on the configured port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "doctracker.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
