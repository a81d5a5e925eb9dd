"""SQLModel implementation of the EMI repository."""

from __future__ import annotations

from typing import Any, Callable, Optional

from sqlalchemy.orm.attributes import flag_modified
from sqlmodel import Session, select

from ...models.emi import Emi


class SQLModelEmiRepository:
    """SQLModel-based EMI repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, emi_id: str) -> Optional[Emi]:
        """Retrieve an EMI by ID."""
        with self.session_factory() as session:
            return session.get(Emi, emi_id)

    def create(self, emi: Emi) -> Emi:
        """Insert a new EMI."""
        with self.session_factory() as session:
            session.add(emi)
            session.commit()
            session.refresh(emi)
            return emi

    def update_schedule(
        self, emi_id: str, *, schedule: list[dict[str, Any]], remaining_amount: float
    ) -> Optional[Emi]:
        """Replace the schedule and remaining amount of an EMI."""
        with self.session_factory() as session:
            emi = session.get(Emi, emi_id)
            if emi is None:
                return None
            emi.schedule = schedule
            emi.remaining_amount = remaining_amount
            flag_modified(emi, "schedule")
            session.add(emi)
            session.commit()
            session.refresh(emi)
            return emi

    def delete(self, emi_id: str) -> bool:
        """Delete an EMI, returning False when it did not exist."""
        with self.session_factory() as session:
            emi = session.get(Emi, emi_id)
            if emi is None:
                return False
            session.delete(emi)
            session.commit()
            return True

    def list_for_user(self, user_id: str) -> list[Emi]:
        """List a user's EMIs ordered by start month."""
        with self.session_factory() as session:
            statement = (
                select(Emi)
                .where(Emi.user_id == user_id)
                .order_by(Emi.start_month, Emi.title)  # type: ignore
            )
            return list(session.exec(statement).all())
