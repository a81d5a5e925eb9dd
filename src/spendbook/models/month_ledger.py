"""Month-keyed expense ledger document."""

from __future__ import annotations

from typing import Any, ClassVar, Optional
from uuid import uuid4

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel


def _new_id() -> str:
    return uuid4().hex


class MonthLedger(SQLModel, table=True):
    """One user's expense record for a single calendar month.

    ``days`` holds the nested day/item document::

        [{"date": "2025-06-05", "day_total": 200.0,
          "items": [{"id": "...", "purpose": "Food", "amount": 200.0}]}]

    ``monthly_total`` and ``balance`` are derived from ``days`` and
    ``salary_credited`` and are rewritten together with them.
    """

    __tablename__: ClassVar[str] = "month_ledger"
    __table_args__: ClassVar[tuple] = (
        UniqueConstraint("user_id", "month", name="uq_month_ledger_user_month"),
    )

    id: Optional[str] = Field(default_factory=_new_id, primary_key=True, max_length=32)
    user_id: str = Field(nullable=False, index=True, max_length=64)
    month: str = Field(nullable=False, index=True, max_length=7)
    salary_credited: float = Field(default=0.0, nullable=False)
    days: list[dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    monthly_total: float = Field(default=0.0, nullable=False)
    balance: float = Field(default=0.0, nullable=False)
