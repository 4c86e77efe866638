from fastapi import APIRouter
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from weighin.main import app
from weighin.models import ErrorLog
from weighin.services.error_logging import error_logger, sanitize_data, setup_file_logging


def test_sensitive_values_are_redacted():
    data = {
        "password": "hunter22",
        "nested": {"refresh_token": "abc", "note": "ok"},
        "items": ["eyJhbGciOiJIUzI1NiJ9.payload.signature"],
    }
    assert sanitize_data(data) == {
        "password": "[REDACTED]",
        "nested": {"refresh_token": "[REDACTED]", "note": "ok"},
        "items": ["[REDACTED_TOKEN]"],
    }


def test_errors_are_stored_with_context(engine):
    error_logger.set_db_session_factory(sessionmaker(bind=engine))
    try:
        try:
            raise RuntimeError("settlement exploded")
        except RuntimeError as e:
            error_id = error_logger.log_error(e, severity="critical", context={"api_key": "k", "group": "g"})
    finally:
        error_logger.set_db_session_factory(None)

    session = sessionmaker(bind=engine)()
    row = session.query(ErrorLog).filter(ErrorLog.id == error_id).one()
    assert row.error_type == "RuntimeError"
    assert row.severity == "critical"
    assert "settlement exploded" in row.stack_trace
    assert row.context_data == {"api_key": "[REDACTED]", "group": "g"}
    session.close()


def test_unhandled_exceptions_become_500(engine):
    router = APIRouter()

    @router.get("/__boom")
    def boom():
        raise RuntimeError("boom")

    app.include_router(router)
    error_logger.set_db_session_factory(sessionmaker(bind=engine))
    try:
        response = TestClient(app, raise_server_exceptions=False).get("/__boom")
    finally:
        error_logger.set_db_session_factory(None)
        app.router.routes = [r for r in app.router.routes if getattr(r, "path", None) != "/__boom"]

    assert response.status_code == 500
    assert response.json()["error_id"]


def test_file_logging_falls_back_when_directory_is_unwritable(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")
    assert setup_file_logging(str(blocker / "logs")) is False
