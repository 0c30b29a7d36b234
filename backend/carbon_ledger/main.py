"""Carbon Ledger API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CarbonLedgerError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and ledger initialized on startup via lifespan context manager;
      the newest persisted snapshot, if any, becomes the live ledger state

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - HTTP layer acts as the ledger host: caller and height arrive as headers
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import carbon_ledger.models  # noqa: F401
from carbon_ledger.infrastructure.database import init_db
from carbon_ledger.infrastructure.observability import setup_logging
from carbon_ledger.config import get_settings
from carbon_ledger.services.ledger_host import build_ledger_host
from carbon_ledger.services.ledger_service import LedgerService
from carbon_ledger.api.dependencies import init_ledger_service
from carbon_ledger.api.error_handlers import register_error_handlers
from carbon_ledger.api.routes import health, ledger_reads, ledger_operations, ledger_admin

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_auto_create:
        await manager.create_schema()

    service = LedgerService(
        build_ledger_host(settings), persist_snapshots=settings.persist_snapshots,
    )
    async with manager.session() as db:
        restored = await service.restore_snapshot(db)
    if not restored:
        logger.info("No persisted ledger snapshot, starting from genesis")
    init_ledger_service(service)
    logger.info("Carbon Ledger API started")
    yield
    init_ledger_service(None)
    await manager.dispose()
    logger.info("Carbon Ledger API shutting down")


app = FastAPI(
    title="Carbon Ledger API", version="1.0.0", lifespan=lifespan,
)

# CORS from settings
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(health.router)
app.include_router(ledger_reads.router)
app.include_router(ledger_operations.router)
app.include_router(ledger_admin.router)

register_error_handlers(app)
