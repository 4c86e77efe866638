"""
CORS Middleware Configuration
Enables Cross-Origin Resource Sharing for the web and mobile clients.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from weighin.core.config import settings


def setup_cors(app: FastAPI) -> None:
    """
    Configure CORS middleware for the FastAPI application.

    Allowed origins come from the CORS_ORIGINS setting, e.g.
        CORS_ORIGINS='["http://localhost:5173", "capacitor://localhost"]'

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
