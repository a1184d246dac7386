import logging
import os
from contextlib import contextmanager
from contextvars import ContextVar

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import DB_APPLICATION_NAME

logger = logging.getLogger(__name__)

# Path of the request currently holding a connection, for transaction logging.
request_path_var: ContextVar[str | None] = ContextVar("request_path", default=None)


def get_database_url() -> str | None:
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        return None
    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql+psycopg2://", 1)
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+psycopg2://", 1)
    return database_url


def _create_engine():
    database_url = get_database_url()
    if not database_url:
        return None
    engine_kwargs = {"pool_pre_ping": True}

    if database_url.startswith("postgresql+psycopg2://"):
        engine_kwargs["connect_args"] = {"application_name": DB_APPLICATION_NAME}
    elif database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}

    return create_engine(database_url, **engine_kwargs)


engine = _create_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine) if engine else None


def _log_transaction_event(conn, event_name: str) -> None:
    logger.debug(
        "SQL TX %s conn_id=%s path=%s",
        event_name,
        id(conn),
        request_path_var.get(),
    )


if engine:
    event.listen(engine, "begin", lambda conn: _log_transaction_event(conn, "BEGIN"))
    event.listen(engine, "commit", lambda conn: _log_transaction_event(conn, "COMMIT"))
    event.listen(engine, "rollback", lambda conn: _log_transaction_event(conn, "ROLLBACK"))


def dispose_engine() -> None:
    if engine is None:
        return
    engine.dispose()
    logger.info("Database engine disposed")


def get_db():
    if SessionLocal is None:
        raise RuntimeError("DATABASE_URL not configured")
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session):
    """Commit on success, roll back and re-raise on any failure."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
