"""
POS order API main application.
Entry point for the FastAPI server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from shared.config.settings import settings
from shared.config.logging import setup_logging, pos_api_logger as logger
from shared.infrastructure.correlation import CorrelationIdMiddleware
from shared.infrastructure.db import engine, SessionLocal
from pos_api.models import Base
from pos_api.routers import orders_router, tables_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    setup_logging()

    config_errors = settings.validate_production_settings()
    if config_errors:
        for error in config_errors:
            logger.error("Configuration error", error=error)
        if settings.environment == "production":
            raise RuntimeError(
                f"Production configuration errors: {'; '.join(config_errors)}. "
                "Server will not start with an unsafe configuration."
            )
        logger.warning("Running with unsafe defaults (acceptable for development only)")

    logger.info("Starting POS order API", port=settings.rest_api_port, env=settings.environment)

    if settings.auto_create_tables:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created/verified")

    yield

    logger.info("Shutting down POS order API")
    engine.dispose()


app = FastAPI(
    title="POS Orders API",
    description="Order lifecycle, numbering and kitchen/bar routing",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[CorrelationIdMiddleware.HEADER_NAME],
)
app.add_middleware(CorrelationIdMiddleware)

app.include_router(orders_router)
app.include_router(tables_router)


# =============================================================================
# Health Check
# =============================================================================


@app.get("/api/health")
def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "service": "pos-orders",
        "environment": settings.environment,
    }


@app.get("/api/health/detailed")
def detailed_health_check():
    """Health check that also verifies database connectivity."""
    checks = {
        "service": "pos-orders",
        "environment": settings.environment,
        "dependencies": {},
    }
    healthy = True

    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        checks["dependencies"]["database"] = {"status": "healthy"}
    except Exception as exc:
        logger.error("Database health check failed", error=str(exc))
        checks["dependencies"]["database"] = {"status": "unhealthy", "error": str(exc)}
        healthy = False

    checks["status"] = "healthy" if healthy else "degraded"
    return checks
