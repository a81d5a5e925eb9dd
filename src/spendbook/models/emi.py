"""Equated monthly installment (EMI) loan document."""

from __future__ import annotations

from typing import Any, ClassVar, Optional
from uuid import uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


def _new_id() -> str:
    return uuid4().hex


class Emi(SQLModel, table=True):
    """Fixed-installment loan with its eagerly generated schedule."""

    __tablename__: ClassVar[str] = "emi"

    id: Optional[str] = Field(default_factory=_new_id, primary_key=True, max_length=32)
    user_id: str = Field(nullable=False, index=True, max_length=64)
    title: str = Field(nullable=False, max_length=120)
    start_month: str = Field(nullable=False, max_length=7)
    amount_per_month: float = Field(nullable=False)
    duration: int = Field(nullable=False)
    # [{"month": "2025-11", "amount": 500.0, "status": "unpaid"}, ...]
    schedule: list[dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    total_amount: float = Field(nullable=False)
    remaining_amount: float = Field(nullable=False)
