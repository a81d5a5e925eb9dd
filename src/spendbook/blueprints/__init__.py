"""Blueprint exports."""

from . import dashboard, emis, expenses

__all__ = ["dashboard", "emis", "expenses"]
