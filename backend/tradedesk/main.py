"""TradeDesk Admin API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TradeDeskError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup and disposed on shutdown via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py; this module only wires things together
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tradedesk.api.error_handlers import register_error_handlers
from tradedesk.api.middleware import register_request_timing
from tradedesk.api.routes import (
    affiliate, auth, content, crm, ecommerce, finance, forex, health, ico, mailwizard,
    staking, system,
)
from tradedesk.config import get_settings
from tradedesk.infrastructure.database import close_db, init_db
from tradedesk.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("TradeDesk Admin API started")
    yield
    logger.info("TradeDesk Admin API shutting down")
    await close_db()


app = FastAPI(
    title="TradeDesk Admin API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_request_timing(app, settings.slow_request_ms)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(crm.router)
app.include_router(affiliate.router)
app.include_router(ecommerce.router)
app.include_router(forex.router)
app.include_router(ico.router)
app.include_router(mailwizard.router)
app.include_router(content.router)
app.include_router(staking.router)
app.include_router(finance.router)
app.include_router(system.router)

register_error_handlers(app)
