"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import HTMLResponse
from sqlalchemy import text

from app.core.config import get_settings
from app.core.database import SessionLocal, close_engine
from app.core.metrics import build_metrics_response, instrument_http_request
from app.modules.booking.router import router as booking_router
from app.modules.identity.repository import IdentityRepository
from app.modules.identity.router import router as identity_router
from app.modules.identity.service import IdentityService
from app.modules.mentors.router import router as mentors_router
from app.modules.scheduling.router import router as scheduling_router
from app.shared.exceptions import register_exception_handlers
from app.shared.utils import utc_now

settings = get_settings()
logger = logging.getLogger(__name__)


_LANDING_LINKS = (
    ("/docs", "Interactive API docs"),
    ("/health", "Liveness"),
    ("/ready", "Readiness"),
    ("/metrics", "Prometheus metrics"),
)

_LANDING_SECTIONS = (
    ("Schedule", "Mentors publish recurring weekly slots and block or free them."),
    ("Booking", "Students book sessions; the join button opens 10 minutes early."),
    ("Mentors", "Browse and maintain mentor profiles."),
)


def _landing_page_html() -> str:
    """Render the root page: what the API offers and where to look next."""
    links = "\n".join(f'        <li><a href="{href}">{label}</a></li>' for href, label in _LANDING_LINKS)
    sections = "\n".join(
        f"        <dt>{title}</dt><dd>{text}</dd>" for title, text in _LANDING_SECTIONS
    )
    return f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>{settings.app_name} API</title>
    <style>
      body {{ font-family: system-ui, sans-serif; max-width: 680px; margin: 40px auto; color: #222; }}
      dt {{ font-weight: 600; margin-top: 12px; }}
      code {{ background: #f2f2f2; padding: 2px 6px; border-radius: 4px; }}
    </style>
  </head>
  <body>
    <h1>{settings.app_name} API</h1>
    <p>Online coding mentorship: schedules, bookings and live session windows.</p>
    <dl>
{sections}
    </dl>
    <ul>
{links}
    </ul>
    <p>All resources live under <code>{settings.api_prefix}</code>.</p>
  </body>
</html>
"""


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Application startup and shutdown hooks."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logger.info("Starting %s (%s)", settings.app_name, settings.app_env)

    async with SessionLocal() as session:
        try:
            service = IdentityService(IdentityRepository(session))
            await service.ensure_default_roles()
            await session.commit()
            logger.info("Default roles ensured")
        except Exception:
            await session.rollback()
            logger.exception("Failed during startup initialization")
            raise

    yield

    logger.info("Shutting down %s", settings.app_name)
    await close_engine()


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
)
app.middleware("http")(instrument_http_request)

register_exception_handlers(app)

app.include_router(identity_router, prefix=settings.api_prefix)
app.include_router(mentors_router, prefix=settings.api_prefix)
app.include_router(scheduling_router, prefix=settings.api_prefix)
app.include_router(booking_router, prefix=settings.api_prefix)


@app.get("/", include_in_schema=False, response_class=HTMLResponse)
async def landing_page() -> HTMLResponse:
    """Root page with quick navigation links."""
    return HTMLResponse(content=_landing_page_html())


@app.get("/health")
async def healthcheck() -> dict[str, str]:
    """Liveness check endpoint."""
    return {"status": "ok"}


async def _is_database_ready() -> bool:
    """Return True if DB accepts basic queries."""
    try:
        async with SessionLocal() as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.exception("Database readiness check failed")
        return False


@app.get("/ready")
async def readiness_check() -> dict[str, str]:
    """Readiness check endpoint with DB dependency check."""
    if not await _is_database_ready():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database is not ready",
        )
    return {
        "status": "ready",
        "database": "ok",
        "timestamp": utc_now().isoformat(),
    }


@app.get("/metrics", include_in_schema=False)
async def metrics_endpoint(_: Request) -> Response:
    """Prometheus metrics endpoint."""
    return build_metrics_response()
