"""SQLModel table exports."""

from .emi import Emi
from .month_ledger import MonthLedger

__all__ = ["Emi", "MonthLedger"]
