"""questflow - gamified daily quest tracker with timers and random rewards."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.core.config import settings
from src.core.db_client import close_connection, init_db
from src.core.logging import configure_logfire, instrument_fastapi
from src.core.scheduler import start_scheduler, stop_scheduler
from src.interface.error_handlers import register_exception_handlers
from src.interface.identity import get_identity_provider
from src.interface.reward_router import router as reward_router
from src.interface.task_router import router as task_router
from src.services.timer_service import timer_registry


logger = logging.getLogger(__name__)


def validate_startup_configuration() -> None:
    """Fail fast when required credentials are missing."""
    logger.info("startup_validation_begin")
    try:
        get_identity_provider()
    except ValueError as e:
        logger.error("startup_validation_failed", extra={"error": str(e)})
        print(f"\n❌ Startup validation failed: {e}\n", file=sys.stderr)  # noqa: T201
        sys.exit(1)
    logger.info("startup_validation_complete", extra={"status": "ok"})


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Startup
    # Configure logging first so validation logs are captured
    configure_logfire()
    validate_startup_configuration()

    await init_db()
    logger.info("Database initialized")

    start_scheduler()
    yield
    # Shutdown
    await timer_registry.shutdown()
    stop_scheduler()
    await close_connection()


app = FastAPI(
    title="questflow",
    description="Gamified daily quest tracker",
    version="0.1.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Register routers
app.include_router(task_router)
app.include_router(reward_router)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=200)
