"""Repository protocol definitions for domain layer."""

from .emi import EmiRepository
from .month_ledger import MonthLedgerRepository

__all__ = ["EmiRepository", "MonthLedgerRepository"]
