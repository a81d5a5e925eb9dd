"""Pytest configuration and shared fixtures for Spendbook tests.

This module provides database fixtures, repositories, a Flask test client and
helper utilities for testing ledger and EMI logic without touching a real
application database.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from spendbook.models import Emi, MonthLedger  # noqa: F401
from spendbook.infra.repositories import SQLModelEmiRepository, SQLModelMonthLedgerRepository

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(
        f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False}
    )
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Create a session factory for repositories that expect Callable[[], Session].

    Returns:
        Callable: Factory function that returns session context managers
    """

    def factory():
        """Create a new Session with expire_on_commit disabled."""
        return Session(db_engine, expire_on_commit=False)

    return factory


@pytest.fixture
def ledger_repo(session_factory) -> SQLModelMonthLedgerRepository:
    return SQLModelMonthLedgerRepository(session_factory)


@pytest.fixture
def emi_repo(session_factory) -> SQLModelEmiRepository:
    return SQLModelEmiRepository(session_factory)


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture()
def app(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Flask app bound to a throwaway SQLite file."""
    from spendbook import create_app

    monkeypatch.setenv("SPENDBOOK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SPENDBOOK_DATABASE_URL", f"sqlite:///{tmp_path / 'spendbook.db'}")
    app = create_app("testing")
    yield app
    app.extensions["spendbook_engine"].dispose()


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture()
def auth_headers():
    return {"X-User-Id": "user-1"}


# =============================================================================
# Helper Utilities
# =============================================================================


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01):
    """Assert that two floats are equal within a tolerance.

    Args:
        actual: Actual value
        expected: Expected value
        tolerance: Maximum allowed difference (default 0.01 = 1 cent)

    Raises:
        AssertionError: If values differ by more than tolerance
    """
    assert (
        abs(actual - expected) < tolerance
    ), f"Expected {expected}, got {actual} (diff: {abs(actual - expected)})"


def assert_ledger_consistent(ledger) -> None:
    """Check every derived total of a ledger against its line items."""
    for day in ledger.days:
        assert_float_equal(day["day_total"], sum(item["amount"] for item in day["items"]))
        assert day["date"][:7] == ledger.month
    assert_float_equal(ledger.monthly_total, sum(day["day_total"] for day in ledger.days))
    assert_float_equal(ledger.balance, ledger.salary_credited - ledger.monthly_total)
    dates = [day["date"] for day in ledger.days]
    assert len(dates) == len(set(dates))
