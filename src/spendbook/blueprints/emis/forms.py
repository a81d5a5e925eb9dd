"""EMI payload definitions and validation helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

from ...services.emis import STATUSES

MONTH_PATTERN = re.compile(r"^\d{4}-\d{2}$")


def _parse_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


@dataclass(slots=True)
class EmiForm:
    """Represents EMI creation inputs and associated validation errors."""

    title: Any = None
    start_month: Any = None
    amount_per_month: Any = None
    duration: Any = None
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "EmiForm":
        return cls(
            title=payload.get("title"),
            start_month=payload.get("start_month"),
            amount_per_month=payload.get("amount_per_month"),
            duration=payload.get("duration"),
        )

    def validate(self) -> bool:
        """Validate EMI inputs returning True when all values are acceptable."""

        self.errors.clear()

        if not isinstance(self.title, str) or not self.title.strip():
            self.errors.setdefault("title", []).append("EMI title is required")
        else:
            self.title = self.title.strip()

        if not isinstance(self.start_month, str) or not MONTH_PATTERN.match(self.start_month):
            self.errors.setdefault("start_month", []).append("Invalid month format. Use YYYY-MM")

        self.amount_per_month = self._parse_amount(
            "amount_per_month", self.amount_per_month, minimum=Decimal("1")
        )

        duration = _parse_int(self.duration)
        if duration is None:
            self.errors.setdefault("duration", []).append("Duration must be a whole number.")
        elif duration < 1:
            self.errors.setdefault("duration", []).append("Duration must be at least 1 month")
        else:
            self.duration = duration

        return not self.errors

    def _parse_amount(self, field: str, value: Any, *, minimum: Decimal) -> float | None:
        """Parse a finite number no lower than ``minimum``, storing errors on failure."""

        if value is None or value == "":
            self.errors.setdefault(field, []).append("This field is required.")
            return None
        if isinstance(value, bool):
            self.errors.setdefault(field, []).append("Enter a valid number.")
            return None
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, TypeError, ValueError):
            self.errors.setdefault(field, []).append("Enter a valid number.")
            return None
        if not amount.is_finite():
            self.errors.setdefault(field, []).append("Enter a valid number.")
            return None
        if amount < minimum:
            self.errors.setdefault(field, []).append("Amount must be positive")
            return None
        return float(amount)


@dataclass(slots=True)
class StatusForm:
    """Payload toggling one schedule entry."""

    status: Any = None
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    def validate(self) -> bool:
        self.errors.clear()
        if self.status not in STATUSES:
            self.errors.setdefault("status", []).append("Status must be 'paid' or 'unpaid'")
        return not self.errors
