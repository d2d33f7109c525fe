"""easyclean - Household cleaning tracker with time-boxed task sessions."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from easyclean.core.config import constants
from easyclean.core.db_client import close_connection, init_db
from easyclean.core.logging import configure_logfire, instrument_fastapi
from easyclean.interface.api import handle_service_error, router as api_router


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Startup
    configure_logfire()
    await init_db()
    logger.info("Database initialized")
    yield
    # Shutdown
    await close_connection()


app = FastAPI(
    title="easyclean",
    description="Household cleaning tracker with time-boxed task sessions",
    version="0.1.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

# Service errors: not found (KeyError), invalid input/state (ValueError), storage (RuntimeError)
for error_type in (KeyError, ValueError, RuntimeError):
    app.add_exception_handler(error_type, handle_service_error)

# Register routers
app.include_router(api_router)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=constants.HTTP_OK)
