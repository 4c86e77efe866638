"""
Error Handler Middleware

FastAPI middleware that catches all unhandled exceptions
and logs them using the error logging service.
"""

from typing import Callable
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from weighin.services.error_logging import error_logger


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware that catches all unhandled exceptions and logs them.

    HTTPException never reaches this point (FastAPI's exception handlers
    turn it into a response first); what arrives here is a real bug or an
    infrastructure failure such as a lost database connection.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            error_id = error_logger.log_error(
                exc,
                request=request,
                user=getattr(request.state, "user", None),
                severity="critical",
                context={"unhandled": True}
            )

            # Generic response with error ID for reference
            return JSONResponse(
                status_code=500,
                content={
                    "detail": "An internal error occurred. Please contact the administrator.",
                    "error_id": str(error_id) if error_id else None
                }
            )
