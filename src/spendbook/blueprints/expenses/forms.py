"""Expense payload definitions and validation helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List

from ...services.expenses import LineItem

MONTH_PATTERN = re.compile(r"^\d{4}-\d{2}$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _parse_amount(
    errors: Dict[str, List[str]], field_name: str, value: Any, *, required: bool = True
) -> float | None:
    """Parse a non-negative number, storing errors when parsing fails."""

    if value is None or value == "":
        if required:
            errors.setdefault(field_name, []).append("This field is required.")
        return None
    if isinstance(value, bool):
        errors.setdefault(field_name, []).append("Enter a valid number.")
        return None
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        errors.setdefault(field_name, []).append("Enter a valid number.")
        return None
    if not amount.is_finite():
        errors.setdefault(field_name, []).append("Enter a valid number.")
        return None
    if amount < 0:
        errors.setdefault(field_name, []).append("Amount must be at least zero.")
        return None
    return float(amount)


def validate_month_value(errors: Dict[str, List[str]], month: Any) -> None:
    if not isinstance(month, str) or not MONTH_PATTERN.match(month):
        errors.setdefault("month", []).append("Invalid month format. Use YYYY-MM")


@dataclass(slots=True)
class MonthForm:
    """Payload for creating a month."""

    month: Any = None
    salary_credited: Any = None
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)
    salary: float = field(default=0.0, init=False)

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "MonthForm":
        return cls(month=payload.get("month"), salary_credited=payload.get("salary_credited"))

    def validate(self) -> bool:
        self.errors.clear()
        validate_month_value(self.errors, self.month)
        salary = _parse_amount(self.errors, "salary_credited", self.salary_credited, required=False)
        self.salary = salary or 0.0
        return not self.errors


@dataclass(slots=True)
class SalaryForm:
    """Payload for setting the salary credited to a month."""

    salary_credited: Any = None
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)
    salary: float = field(default=0.0, init=False)

    def validate(self) -> bool:
        self.errors.clear()
        salary = _parse_amount(self.errors, "salary_credited", self.salary_credited)
        if salary is not None:
            self.salary = salary
        return not self.errors


@dataclass(slots=True)
class DayForm:
    """Payload for adding or replacing the items of a day."""

    date: Any = None
    items: Any = None
    require_items: bool = True
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)
    line_items: List[LineItem] = field(default_factory=list, init=False)

    @classmethod
    def from_json(cls, payload: Dict[str, Any], *, require_items: bool = True) -> "DayForm":
        return cls(
            date=payload.get("date"), items=payload.get("items"), require_items=require_items
        )

    def validate(self) -> bool:
        """Validate the date and every item, returning True when all are acceptable."""

        self.errors.clear()
        self.line_items = []

        if not isinstance(self.date, str) or not DATE_PATTERN.match(self.date):
            self.errors.setdefault("date", []).append("Date must be in YYYY-MM-DD format")

        if not isinstance(self.items, list):
            self.errors.setdefault("items", []).append("Items must be a list.")
            return False
        if self.require_items and not self.items:
            self.errors.setdefault("items", []).append("At least one item is required")

        for position, raw in enumerate(self.items):
            key = f"items.{position}"
            if not isinstance(raw, dict):
                self.errors.setdefault(key, []).append("Each item must be an object.")
                continue
            purpose = raw.get("purpose")
            if not isinstance(purpose, str) or not purpose.strip():
                self.errors.setdefault(key, []).append("Purpose is required")
            amount = _parse_amount(self.errors, key, raw.get("amount"))
            if amount is not None and isinstance(purpose, str) and purpose.strip():
                item_id = raw.get("id")
                self.line_items.append(
                    LineItem(purpose=purpose.strip(), amount=amount, id=str(item_id) if item_id else None)
                )

        return not self.errors

    @property
    def error_messages(self) -> Iterable[str]:
        """Flattened iterable of error strings for summaries."""

        for messages in self.errors.values():
            yield from messages
