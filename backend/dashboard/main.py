"""Invoice Dashboard API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map DashboardError → structured JSON responses
    - Database engine created once on startup via lifespan and disposed on shutdown
    - Sessions travel in a signed cookie (SessionMiddleware, secret from settings)
    - Startup logs a warning while the development AUTH_SECRET is still in use

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py to keep this module small
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from dashboard.api.error_handlers import register_error_handlers
from dashboard.api.routes import accounts, health, invoices
from dashboard.config import Settings, get_settings
from dashboard.infrastructure.database import close_db, init_db
from dashboard.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


def warn_insecure_defaults(settings: Settings) -> None:
    if settings.uses_dev_auth_secret:
        logger.warning(
            "AUTH_SECRET is not set: session cookies are signed with the development secret",
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    warn_insecure_defaults(settings)
    init_db(
        settings.postgres_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        ssl=settings.database_ssl,
    )
    logger.info("Invoice dashboard started")
    yield
    await close_db()
    logger.info("Invoice dashboard shutting down")


app = FastAPI(
    title="Invoice Dashboard", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.auth_secret,
    session_cookie=settings.session_cookie_name,
    same_site="lax",
)

# Routes (explicit registration)
app.include_router(health.router)
app.include_router(accounts.router)
app.include_router(invoices.router)

register_error_handlers(app)
