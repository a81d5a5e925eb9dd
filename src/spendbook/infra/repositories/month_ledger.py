"""SQLModel implementation of the month ledger repository."""

from __future__ import annotations

from typing import Any, Callable, Optional
from uuid import uuid4

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.attributes import flag_modified
from sqlmodel import Session, select

from ...errors import Conflict, NotFound
from ...models.month_ledger import MonthLedger


def _stamp_item_ids(days: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Return a copy of ``days`` where every item carries an id unique within its day."""

    stamped: list[dict[str, Any]] = []
    for day in days:
        seen: set[str] = set()
        items = []
        for item in day.get("items", []):
            item_id = item.get("id")
            if not item_id or item_id in seen:
                item = {**item, "id": uuid4().hex}
            seen.add(item["id"])
            items.append(item)
        stamped.append({**day, "items": items})
    return stamped


class SQLModelMonthLedgerRepository:
    """SQLModel-based month ledger repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get(self, user_id: str, month: str) -> Optional[MonthLedger]:
        """Retrieve the ledger for a user-month."""
        with self.session_factory() as session:
            return session.exec(
                select(MonthLedger).where(
                    MonthLedger.user_id == user_id, MonthLedger.month == month
                )
            ).first()

    def create(self, ledger: MonthLedger) -> MonthLedger:
        """Insert a new ledger; the unique (user_id, month) index backs Conflict."""
        with self.session_factory() as session:
            ledger.days = _stamp_item_ids(ledger.days)
            session.add(ledger)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise Conflict(f"Month {ledger.month} already exists") from exc
            session.refresh(ledger)
            return ledger

    def replace(self, ledger: MonthLedger) -> MonthLedger:
        """Overwrite every mutable field of the stored ledger in one commit."""
        with self.session_factory() as session:
            stored = session.exec(
                select(MonthLedger).where(
                    MonthLedger.user_id == ledger.user_id, MonthLedger.month == ledger.month
                )
            ).first()
            if stored is None:
                raise NotFound(f"Month {ledger.month} not found")
            stored.salary_credited = ledger.salary_credited
            stored.days = _stamp_item_ids(ledger.days)
            stored.monthly_total = ledger.monthly_total
            stored.balance = ledger.balance
            flag_modified(stored, "days")
            session.add(stored)
            session.commit()
            session.refresh(stored)
            return stored

    def list_for_user(self, user_id: str) -> list[MonthLedger]:
        """List a user's ledgers, most recent month first."""
        with self.session_factory() as session:
            statement = (
                select(MonthLedger)
                .where(MonthLedger.user_id == user_id)
                .order_by(MonthLedger.month.desc())  # type: ignore
            )
            return list(session.exec(statement).all())
