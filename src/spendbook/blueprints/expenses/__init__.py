"""Expenses blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")

from . import routes  # noqa: E402,F401 - ensure routes get registered

__all__ = ["bp"]
