"""Service module exports."""

from . import dashboard, emis, expenses, locks

__all__ = ["dashboard", "emis", "expenses", "locks"]
