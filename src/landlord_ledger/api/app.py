"""FastAPI application factory."""

import time
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from landlord_ledger.api.routes import (
    analytics_router,
    health_router,
    property_router,
    report_router,
    transaction_router,
    usage_router,
)
from landlord_ledger.config import get_settings
from landlord_ledger.container import get_container, reset_container
from landlord_ledger.exceptions import LandlordLedgerError
from landlord_ledger.logging_config import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging and open the ledger store; close it on shutdown."""
    settings = get_settings()
    configure_logging(settings)

    container = get_container()
    logger.info(
        "application_started",
        version=settings.app_version,
        environment=settings.environment,
        sqlite_path=str(container.database.path),
    )
    yield
    reset_container()
    logger.info("application_stopped")


async def log_request_middleware(request: Request, call_next) -> Response:
    """Tag every event logged during a request with its id, path and method."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
    bind_context(request_id=request_id, path=request.url.path, method=request.method)
    started = time.perf_counter()
    try:
        response = await call_next(request)
        logger.debug(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
    finally:
        clear_context()


async def ledger_error_handler(request: Request, exc: LandlordLedgerError) -> JSONResponse:
    """Render a ledger error as ``{"error", "message", "context"}``."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log("request_failed", error_code=exc.error_code, message=exc.message, context=exc.context)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Financial statements, portfolio analytics and plan quotas for landlords",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.middleware("http")(log_request_middleware)
    app.add_exception_handler(LandlordLedgerError, ledger_error_handler)

    for router in (
        health_router,
        report_router,
        analytics_router,
        usage_router,
        property_router,
        transaction_router,
    ):
        app.include_router(router)

    return app
