"""FastAPI application entry point.

Feed management service: animal categories, consumption batches,
batch factors, weight conversions and batch insights, scoped per farm.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from feed_engine import __version__
from feed_engine.config import settings
from feed_engine.core.errors import FeedEngineError
from feed_engine.core.target_cache import get_target_cache
from feed_engine.infra.database import close_db_engine, verify_db_connection
from feed_engine.infra.logging import get_logger, setup_logging
from feed_engine.schemas.common import ErrorResponse

# Import routers
from feed_engine.api.routes.batches import router as batches_router
from feed_engine.api.routes.categories import router as categories_router
from feed_engine.api.routes.conversions import router as conversions_router
from feed_engine.api.routes.factors import router as factors_router
from feed_engine.api.routes.farm import router as farm_router
from feed_engine.api.routes.health import router as health_router

# Setup logging first
setup_logging()
logger = get_logger(__name__)

FEED_MANAGEMENT_PREFIX = "/farms/{farm_id}/feed-management"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Startup:
    - Create the target cache
    - Verify database connection

    Shutdown:
    - Close database connections
    - Clear cached batch targets
    """
    logger.info(
        "Feed engine starting",
        environment=settings.environment,
        cache_ttl_seconds=settings.target_cache_ttl_seconds,
    )

    get_target_cache()

    db_ok = await verify_db_connection()
    if not db_ok:
        logger.warning("Database connection failed - will retry on first request")

    yield

    # Shutdown
    logger.info("Feed engine shutting down")
    await close_db_engine()
    get_target_cache().clear()
    logger.info("Cleanup complete")


# Create FastAPI app
app = FastAPI(
    title="Herd Feed Engine",
    description="Feed consumption categorization and batch targeting service",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.environment == "dev" else None,
    redoc_url=None,
)

# CORS middleware (mainly for local development)
if settings.environment == "dev":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log mutating requests with their farm scope."""
    response = await call_next(request)

    if request.method != "GET":
        logger.info(
            "Request handled",
            method=request.method,
            path=request.url.path,
            farm_id=request.path_params.get("farm_id"),
            status_code=response.status_code,
        )

    return response


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(FeedEngineError)
async def feed_engine_exception_handler(request: Request, exc: FeedEngineError) -> JSONResponse:
    """Translate domain errors into their HTTP status."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "Request rejected",
        error=exc.message,
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        path=request.url.path,
    )

    body = ErrorResponse(
        error=exc.message,
        error_type=type(exc).__name__,
        detail=exc.detail,
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions."""
    logger.error(
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        exc_info=True,
    )

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "error_type": type(exc).__name__,
        },
    )


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(health_router, tags=["Health"])
app.include_router(
    categories_router,
    prefix=f"{FEED_MANAGEMENT_PREFIX}/animal-categories",
    tags=["Animal Categories"],
)
app.include_router(
    batches_router,
    prefix=f"{FEED_MANAGEMENT_PREFIX}/consumption-batches",
    tags=["Consumption Batches"],
)
app.include_router(
    factors_router,
    prefix=f"{FEED_MANAGEMENT_PREFIX}/batch-factors",
    tags=["Batch Factors"],
)
app.include_router(
    conversions_router,
    prefix=f"{FEED_MANAGEMENT_PREFIX}/weight-conversions",
    tags=["Weight Conversions"],
)
app.include_router(farm_router, prefix=FEED_MANAGEMENT_PREFIX, tags=["Farm"])


# =============================================================================
# Root Endpoint
# =============================================================================


@app.get("/")
async def root() -> dict:
    """Root endpoint - basic service info."""
    return {
        "service": "Herd Feed Engine",
        "version": __version__,
        "environment": settings.environment,
    }
