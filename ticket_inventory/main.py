"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ticket_inventory.api.v1.router import router as v1_router
from ticket_inventory.config import get_settings
from ticket_inventory.database import close_db, init_db, ping_db
from ticket_inventory.errors import ErrorCode, InventoryError
from ticket_inventory.schemas.common import ErrorResponse, HealthResponse


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


settings = get_settings()


def error_response(
    status_code: int,
    code: ErrorCode,
    message: str,
    detail: str | None = None,
) -> JSONResponse:
    """Render a failure; internal detail is only exposed in debug mode."""
    body = ErrorResponse(
        error=code.value,
        message=message,
        detail=detail if settings.DEBUG else None,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info("Starting Ticket Inventory API...")

    if settings.DB_CREATE_TABLES:
        await init_db()
        logger.info("Database tables created")

    yield

    # Shutdown
    logger.info("Shutting down Ticket Inventory API...")
    await close_db()
    logger.info("Database connections closed")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="""
## Ticket Inventory API

Hold-and-purchase protocol for limited event ticket inventory.

- **Holds**: short-lived, all-or-nothing claims on ticket types; they reduce
  free capacity until they expire (default 2 minutes) or are purchased
- **Purchases**: turn a session's active holds into one confirmed order and
  decrement inventory atomically
- **Row locking**: ticket type rows are locked in ascending id order inside a
  single database transaction per request; no external lock manager

### Workflow
1. Browse events and ticket types
2. Reserve tickets (returns a `session_id` if you did not send one)
3. Purchase with the same `session_id` before the hold expires
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Include API routers
    app.include_router(v1_router, prefix="/api")

    # Health check endpoint
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        database_ok = await ping_db()
        return HealthResponse(
            status="healthy" if database_ok else "degraded",
            version=settings.APP_VERSION,
            database=database_ok,
        )

    @app.exception_handler(InventoryError)
    async def inventory_exception_handler(request: Request, exc: InventoryError):
        """Render taxonomy errors raised by the services."""
        if exc.status_code >= 500:
            logger.error(f"{request.url.path} failed: {exc} ({exc.detail})")
        else:
            logger.info(f"{request.url.path} rejected: {exc}")
        return error_response(exc.status_code, exc.code, exc.message, exc.detail)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        """Render malformed requests as validation errors."""
        return error_response(
            400,
            ErrorCode.VALIDATION_ERROR,
            "Invalid request",
            str(exc.errors()),
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return error_response(
            500,
            ErrorCode.INTERNAL_ERROR,
            "Internal server error",
            str(exc),
        )

    return app


# Create application instance
app = create_app()


def run():
    """Run the application with uvicorn."""
    uvicorn.run(
        "ticket_inventory.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
