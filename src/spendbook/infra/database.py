"""Engine, schema and session plumbing for ledger and EMI storage."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Tuple

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig
from ..logging_config import get_logger

logger = get_logger(__name__)


def _apply_sqlite_pragmas(engine: Engine, pragmas: dict[str, str]) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        try:
            for name, value in pragmas.items():
                cursor.execute(f"PRAGMA {name}={value}")
        finally:
            cursor.close()


def create_db_engine(config: BaseConfig) -> Engine:
    """Create the engine; SQLite connections get ``SQLITE_PRAGMAS`` on connect."""

    engine = create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())
    if engine.dialect.name == "sqlite":
        _apply_sqlite_pragmas(engine, config.SQLITE_PRAGMAS)
    return engine


def init_database(engine: Engine) -> None:
    """Create the month_ledger and emi tables when missing."""

    from .. import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info(
        "Database schema ready",
        extra={"tables": sorted(SQLModel.metadata.tables), "dialect": engine.dialect.name},
    )


def create_session_factory(engine: Engine):
    """Return a factory of sessions that commit on success and roll back on error.

    Sessions keep attributes loaded after commit so repositories can hand
    detached ledgers and EMIs back to services.
    """

    @contextmanager
    def factory() -> Iterator[Session]:
        session = Session(engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


def bootstrap_database(config: BaseConfig | None = None) -> Tuple[Engine, object]:
    """Build the engine, create the schema and return ``(engine, session_factory)``."""

    cfg = config or BaseConfig()
    engine = create_db_engine(cfg)
    init_database(engine)
    return engine, create_session_factory(engine)
