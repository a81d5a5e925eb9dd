"""Database and repository wiring for the Flask app."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from flask import Flask, current_app

from .config import BaseConfig
from .infra.database import bootstrap_database
from .infra.repositories import SQLModelEmiRepository, SQLModelMonthLedgerRepository


@dataclass(slots=True)
class Repositories:
    """Repositories shared by every request of one app instance."""

    ledgers: SQLModelMonthLedgerRepository
    emis: SQLModelEmiRepository
    session_factory: Callable


def init_db(app: Flask) -> None:
    """Create the engine and schema, then attach repositories to the app."""

    config: BaseConfig = app.config["SPENDBOOK_CONFIG"]
    engine, session_factory = bootstrap_database(config)
    app.extensions["spendbook"] = Repositories(
        ledgers=SQLModelMonthLedgerRepository(session_factory),
        emis=SQLModelEmiRepository(session_factory),
        session_factory=session_factory,
    )
    app.extensions["spendbook_engine"] = engine


def get_repositories() -> Repositories:
    """Return the repositories of the active app."""

    repos = current_app.extensions.get("spendbook")
    if repos is None:  # pragma: no cover - exercised only on misconfiguration
        raise RuntimeError("Database not initialized")
    return repos
