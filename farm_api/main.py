"""
Main FastAPI Application

Entry point for the multi-tenant poultry farm API.
Configures middleware, routes, error handlers, and startup/shutdown events.

create_app() builds a fully wired application; tests call it with their
own settings and database, the module-level `app` is what uvicorn serves.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import time
from contextlib import asynccontextmanager
from typing import Optional

from farm_api.config import Settings, get_settings
from farm_api.database import Database, init_db
from farm_api.middleware.tenant import TenantMiddleware, TENANT_HEADER
from farm_api.middleware.rate_limit import RateLimitMiddleware
from farm_api.core.error_handlers import register_exception_handlers
from farm_api.utils.logging import setup_logging, get_logger
from farm_api.utils.responses import success_response, utc_timestamp

# Import routers
from farm_api.api.endpoints import (
    attendance,
    auth,
    batches,
    birds,
    clients,
    eggs,
    employees,
    expenses,
    health,
    inventory,
    loans,
    mortality,
    products,
    sales,
    users,
    vehicles,
)

API_VERSION = "1.0.0"

ROUTERS = (
    auth.router,
    users.router,
    batches.router,
    birds.router,
    products.router,
    clients.router,
    sales.router,
    inventory.router,
    employees.router,
    attendance.router,
    loans.router,
    vehicles.router,
    health.router,
    mortality.router,
    eggs.router,
    expenses.router,
)

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or get_settings()

    setup_logging(
        log_level=settings.LOG_LEVEL,
        json_format=settings.is_production
    )

    db = database or Database(settings=settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan manager.

        Handles startup and shutdown events.
        """
        logger.info(f"Starting application in {settings.ENVIRONMENT} mode")

        # Initialize database tables (dev only - use migrations in production)
        if settings.ENVIRONMENT == "development":
            logger.warning("Initializing database tables (dev mode)")
            init_db(db)

        logger.info("Application startup complete")

        yield

        logger.info("Shutting down application")
        db.dispose()
        logger.info("Application shutdown complete")

    app = FastAPI(
        title="Granja API",
        description="Multi-tenant poultry farm management API",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.db = db
    app.state.settings = settings

    # ========================================================================
    # MIDDLEWARE CONFIGURATION
    # ========================================================================

    # Request timing middleware (for monitoring)
    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add X-Process-Time header to track request duration."""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        return response

    # Middleware added last runs first: CORS -> tenant -> rate limit -> timing
    if settings.RATE_LIMIT_ENABLED:
        app.add_middleware(RateLimitMiddleware, settings=settings)

    app.add_middleware(TenantMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", TENANT_HEADER],
    )

    register_exception_handlers(app, settings)

    # ========================================================================
    # ROUTES
    # ========================================================================

    # Health check endpoint (no auth required)
    @app.get("/health", tags=["health"])
    def health_check():
        """Liveness check for load balancers."""
        return {
            "status": "OK",
            "timestamp": utc_timestamp(),
            "environment": settings.ENVIRONMENT,
            "version": API_VERSION
        }

    @app.get(f"{settings.API_PREFIX}/test", tags=["health"])
    def api_status():
        """API status with the list of mounted resources."""
        return success_response(
            {
                "version": API_VERSION,
                "endpoints": [f"{settings.API_PREFIX}{router.prefix}" for router in ROUTERS],
            },
            "API funcionando correctamente",
        )

    for router in ROUTERS:
        app.include_router(router, prefix=settings.API_PREFIX)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    logger.info("=" * 80)
    logger.info("Granja API")
    logger.info("=" * 80)
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug: {settings.DEBUG}")
    logger.info(f"Database: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'configured'}")
    logger.info("=" * 80)

    uvicorn.run(
        "farm_api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
