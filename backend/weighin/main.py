"""
Main FastAPI Application
Entry point for the WeighIn Groups API.

This module creates and configures the FastAPI application instance,
sets up middleware, and defines the health check endpoint.
"""

import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from weighin.core.config import settings
from weighin.middleware.cors import setup_cors
from weighin.middleware.error_handler import ErrorHandlerMiddleware
from weighin.db.session import engine, SessionLocal
from weighin.models import Base
from weighin.services.error_logging import configure_error_logging

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# Create FastAPI application instance
#
# Configuration:
# - docs_url: Swagger UI endpoint (interactive API documentation)
# - redoc_url: ReDoc endpoint (alternative documentation style)
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    description="""
    WeighIn Groups API - private weight tracking with group leaderboards.

    Features:
    - Multi-user authentication with JWT
    - Weight entries with progress computed against each user's first entry
    - Groups with invite codes, optional team challenges
    - Leaderboards, team rollups and end-of-challenge settlement
    - Inactivity reminders by email and in-app notifications
    - BMI and calorie summary
    """
)


# Setup CORS middleware
setup_cors(app)

# Setup error handler middleware
# Catches all unhandled exceptions and logs them
app.add_middleware(ErrorHandlerMiddleware)


@app.on_event("startup")
async def startup_event():
    """
    Application startup handler.

    Tasks performed:
    - Create all database tables if they don't exist
    - Configure error logging (database table + rotating files)

    Note: In production, use Alembic migrations instead of
    Base.metadata.create_all() for better schema management.
    """
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    configure_error_logging(SessionLocal, settings.LOG_DIR)
    logger.info("Error logging system configured")

    logger.info("API documentation available at /docs")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown complete")


@app.get(
    "/health",
    tags=["Health"],
    summary="Health Check",
    description="Simple endpoint to verify API is running"
)
async def health_check():
    """
    Used by monitoring tools and container orchestrators to verify
    the application is running.

    Example Response:
        {
            "status": "ok",
            "version": "1.0.0",
            "api": "WeighIn Groups API"
        }
    """
    return JSONResponse(
        status_code=200,
        content={
            "status": "ok",
            "version": "1.0.0",
            "api": settings.PROJECT_NAME
        }
    )


@app.get(
    "/",
    tags=["Root"],
    summary="API Root",
    description="Root endpoint with API information"
)
async def root():
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "version": "1.0.0",
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/health"
    }


# Include API v1 router
# All v1 endpoints are prefixed with /api/v1
from weighin.api.v1.router import api_router  # noqa: E402

app.include_router(
    api_router,
    prefix=f"/api/{settings.API_VERSION}",
)
