"""Concrete repository implementations using SQLModel."""

from .emi import SQLModelEmiRepository
from .month_ledger import SQLModelMonthLedgerRepository

__all__ = ["SQLModelEmiRepository", "SQLModelMonthLedgerRepository"]
