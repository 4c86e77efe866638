"""
Error Logging Service

Error logging system that:
- Writes to rotating log files (when the log directory is writable)
- Stores errors in the database for later inspection
- Captures user and request context with the traceback
- Sanitizes sensitive data

Usage:
    from weighin.services.error_logging import error_logger

    try:
        # some code
    except Exception as e:
        error_logger.log_error(e, request=request, user=current_user)
        raise
"""

import logging
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from weighin.core.timeutils import utcnow
from weighin.models.error_log import ErrorLog


logger = logging.getLogger("error_logging")
logger.setLevel(logging.DEBUG)


# Sensitive fields to sanitize
SENSITIVE_FIELDS = {'password', 'password_hash', 'token', 'access_token', 'refresh_token',
                    'authorization', 'api_key', 'secret', 'credential'}


def sanitize_data(data: Any, depth: int = 0) -> Any:
    """
    Sanitize sensitive data from dictionaries and strings.
    Replaces sensitive field values with '[REDACTED]'.
    """
    if depth > 10:
        return "[MAX_DEPTH]"

    if isinstance(data, dict):
        sanitized = {}
        for key, value in data.items():
            key_lower = str(key).lower()
            if any(sensitive in key_lower for sensitive in SENSITIVE_FIELDS):
                sanitized[key] = "[REDACTED]"
            else:
                sanitized[key] = sanitize_data(value, depth + 1)
        return sanitized
    elif isinstance(data, list):
        return [sanitize_data(item, depth + 1) for item in data]
    elif isinstance(data, str):
        # JWT token pattern
        if len(data) > 20 and data.startswith("eyJ"):
            return "[REDACTED_TOKEN]"
        return data
    return data


def truncate_string(s: str, max_length: int = 10000) -> str:
    """Truncate string to max length."""
    if len(s) > max_length:
        return s[:max_length] + f"... [TRUNCATED, total {len(s)} chars]"
    return s


def setup_file_logging(log_dir: str) -> bool:
    """
    Attach rotating file handlers to the root logger.

    errors.log receives ERROR and above, app_detailed.log everything.
    Falls back to console-only logging when the directory is not writable.

    Returns:
        True if file handlers were installed
    """
    path = Path(log_dir)
    try:
        path.mkdir(parents=True, exist_ok=True)
        probe = path / ".write_test"
        probe.touch()
        probe.unlink()
    except OSError as e:
        logger.warning(f"Cannot write to logs directory {path}: {e}. File logging disabled.")
        return False

    root_logger = logging.getLogger()
    installed = {getattr(h, "baseFilename", None) for h in root_logger.handlers}

    error_file = str((path / "errors.log").resolve())
    if error_file not in installed:
        file_handler = RotatingFileHandler(
            error_file,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=10,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.ERROR)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        root_logger.addHandler(file_handler)

    detailed_file = str((path / "app_detailed.log").resolve())
    if detailed_file not in installed:
        detailed_handler = RotatingFileHandler(
            detailed_file,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding='utf-8'
        )
        detailed_handler.setLevel(logging.DEBUG)
        detailed_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        root_logger.addHandler(detailed_handler)

    return True


class ErrorLogger:
    """
    Error logging service that writes to both log files and the database.
    """

    def __init__(self):
        self.db_session_factory = None

    def set_db_session_factory(self, factory):
        """Set the database session factory for DB logging."""
        self.db_session_factory = factory

    def log_error(
        self,
        error: Exception,
        request: Optional[Any] = None,
        user: Optional[Any] = None,
        severity: str = "error",
        context: Optional[Dict] = None,
        save_to_db: bool = True
    ) -> Optional[UUID]:
        """
        Log an error with full context.

        Args:
            error: The exception that occurred
            request: FastAPI Request object (optional)
            user: Current user object (optional)
            severity: warning, error, critical
            context: Additional context data
            save_to_db: Whether to save to database

        Returns:
            UUID of the error log entry if saved to DB, None otherwise
        """
        error_type = type(error).__name__
        error_message = str(error)

        # Prefer the traceback attached to the exception itself
        exc_tb = error.__traceback__ or sys.exc_info()[2]
        location = None
        stack_trace = None
        if exc_tb is not None:
            stack_trace = ''.join(traceback.format_exception(type(error), error, exc_tb))
            frames = traceback.extract_tb(exc_tb)
            if frames:
                last_frame = frames[-1]
                location = f"{last_frame.filename}:{last_frame.name}:{last_frame.lineno}"

        request_method = request_path = client_ip = None
        if request is not None:
            request_method = request.method
            request_path = str(request.url.path)
            client_ip = request.client.host if request.client else None

        user_id = getattr(user, "id", None)
        sanitized_context = sanitize_data(context) if context else None

        log_message = (
            f"{error_type}: {error_message} | User: {user_id or 'anonymous'} | "
            f"Path: {request_path or 'N/A'}"
        )
        if severity == "critical":
            logger.critical(log_message)
        elif severity == "error":
            logger.error(log_message)
        elif severity == "warning":
            logger.warning(log_message)
        else:
            logger.info(log_message)

        if not (save_to_db and self.db_session_factory):
            return None

        db = self.db_session_factory()
        try:
            error_log = ErrorLog(
                occurred_at=utcnow(),
                error_type=error_type,
                status_code=str(getattr(error, "status_code", "")) or None,
                severity=severity,
                location=truncate_string(location, 500) if location else None,
                user_id=user_id,
                request_method=request_method,
                request_path=request_path,
                client_ip=client_ip,
                message=truncate_string(error_message or error_type, 1000),
                stack_trace=truncate_string(stack_trace, 20000) if stack_trace else None,
                context_data=sanitized_context,
            )
            db.add(error_log)
            db.commit()
            error_log_id = error_log.id
            logger.debug(f"Error logged to DB with ID: {error_log_id}")
            return error_log_id
        except SQLAlchemyError as db_err:
            db.rollback()
            logger.error(f"Failed to save error to database: {db_err}")
            return None
        finally:
            db.close()


# Singleton instance
error_logger = ErrorLogger()


def configure_error_logging(db_session_factory, log_dir: Optional[str] = None):
    """
    Configure the error logging system with database and file support.
    Call this during app startup.
    """
    error_logger.set_db_session_factory(db_session_factory)
    if log_dir:
        setup_file_logging(log_dir)
    logger.info("Error logging system configured")
