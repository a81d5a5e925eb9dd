"""Month ledger operations: days, line items and derived totals.

Every mutation follows the same cycle under the ledger's key lock: load the
ledger (or build a new one), rebuild the day list, recompute every derived
total from the line items, then persist with a single create or replace.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from ..domain.repositories.month_ledger import MonthLedgerRepository
from ..errors import InvalidInput, NotFound
from ..logging_config import get_logger
from ..models.month_ledger import MonthLedger
from .locks import key_lock

logger = get_logger(__name__)


@dataclass(slots=True)
class LineItem:
    """A single expense within a day."""

    purpose: str
    amount: float
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LineItem":
        return cls(
            purpose=str(data.get("purpose", "")),
            amount=float(data.get("amount", 0.0)),
            id=data.get("id") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"purpose": self.purpose, "amount": self.amount}
        if self.id:
            data["id"] = self.id
        return data


@dataclass(slots=True)
class ExpenseDay:
    """All line items recorded for one calendar date."""

    date: str
    items: list[LineItem] = field(default_factory=list)
    day_total: float = 0.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExpenseDay":
        return cls(
            date=str(data["date"]),
            items=[LineItem.from_dict(item) for item in data.get("items", [])],
            day_total=float(data.get("day_total", 0.0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "items": [item.to_dict() for item in self.items],
            "day_total": self.day_total,
        }


@dataclass(slots=True)
class LedgerLookup:
    """Result of the find-or-create step."""

    ledger: MonthLedger
    created: bool


def validate_month(month: str) -> str:
    """Return ``month`` when it is a ``YYYY-MM`` string."""

    try:
        datetime.strptime(month, "%Y-%m")
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Invalid month {month!r}; use YYYY-MM") from exc
    if len(month) != 7:
        raise InvalidInput(f"Invalid month {month!r}; use YYYY-MM")
    return month


def validate_day_in_month(day: str, month: str) -> str:
    """Return ``day`` when it is a ``YYYY-MM-DD`` date inside ``month``."""

    try:
        datetime.strptime(day, "%Y-%m-%d")
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Invalid date {day!r}; use YYYY-MM-DD") from exc
    if len(day) != 10:
        raise InvalidInput(f"Invalid date {day!r}; use YYYY-MM-DD")
    if day[:7] != month:
        raise InvalidInput("Date must belong to the specified month")
    return day


def _validate_salary(salary: float) -> float:
    if salary is None or salary < 0:
        raise InvalidInput("Salary credited must be zero or greater")
    return float(salary)


def load_days(ledger: MonthLedger) -> list[ExpenseDay]:
    """Decode the stored day documents of ``ledger``."""

    return [ExpenseDay.from_dict(day) for day in ledger.days or []]


def recompute_totals(ledger: MonthLedger, days: Iterable[ExpenseDay]) -> MonthLedger:
    """Re-derive every total of ``ledger`` from ``days`` and store them on it.

    day_total := sum(items); monthly_total := sum(day_total);
    balance := salary_credited - monthly_total.
    """

    ordered = sorted(days, key=lambda d: d.date)
    for day in ordered:
        day.day_total = sum(item.amount for item in day.items)
    ledger.days = [day.to_dict() for day in ordered]
    ledger.monthly_total = sum(day.day_total for day in ordered)
    ledger.balance = ledger.salary_credited - ledger.monthly_total
    return ledger


def find_or_create(
    repo: MonthLedgerRepository, *, user_id: str, month: str, salary: float = 0.0
) -> LedgerLookup:
    """Return the stored ledger, or an unsaved empty one flagged ``created``."""

    existing = repo.get(user_id, month)
    if existing is not None:
        return LedgerLookup(ledger=existing, created=False)
    ledger = MonthLedger(user_id=user_id, month=month, salary_credited=salary, days=[])
    recompute_totals(ledger, [])
    return LedgerLookup(ledger=ledger, created=True)


def _persist(repo: MonthLedgerRepository, lookup: LedgerLookup) -> MonthLedger:
    if lookup.created:
        return repo.create(lookup.ledger)
    return repo.replace(lookup.ledger)


def _require_ledger(repo: MonthLedgerRepository, user_id: str, month: str) -> MonthLedger:
    ledger = repo.get(user_id, month)
    if ledger is None:
        raise NotFound("Month not found")
    return ledger


def _day_index(days: list[ExpenseDay], day: str) -> int:
    for idx, existing in enumerate(days):
        if existing.date == day:
            return idx
    raise NotFound("Day not found")


def _item_index(items: list[LineItem], item_id: str) -> int:
    for idx, item in enumerate(items):
        if item.id and item.id == item_id:
            return idx
    # Items persisted without an id are addressed by position.
    try:
        position = int(item_id)
    except (TypeError, ValueError):
        position = -1
    if 0 <= position < len(items) and not items[position].id:
        return position
    raise NotFound("Item not found")


def _carry_item_ids(current: list[LineItem], incoming: Iterable[LineItem]) -> list[LineItem]:
    """Keep an incoming id only when it names an item already stored in the day."""

    known = {item.id for item in current if item.id}
    used: set[str] = set()
    replacement: list[LineItem] = []
    for item in incoming:
        item_id = item.id if item.id in known and item.id not in used else None
        if item_id:
            used.add(item_id)
        replacement.append(LineItem(purpose=item.purpose, amount=item.amount, id=item_id))
    return replacement


def create_month(
    repo: MonthLedgerRepository, *, user_id: str, month: str, salary: float = 0.0
) -> MonthLedger:
    """Create an empty ledger; Conflict when the month already exists."""

    validate_month(month)
    salary = _validate_salary(salary)
    with key_lock("ledger", user_id, month):
        ledger = MonthLedger(user_id=user_id, month=month, salary_credited=salary, days=[])
        recompute_totals(ledger, [])
        created = repo.create(ledger)
    logger.info("Created month ledger", extra={"user_id": user_id, "month": month})
    return created


def set_salary(
    repo: MonthLedgerRepository, *, user_id: str, month: str, salary: float
) -> MonthLedger:
    """Set the salary credited for a month, creating the ledger when absent."""

    validate_month(month)
    salary = _validate_salary(salary)
    with key_lock("ledger", user_id, month):
        lookup = find_or_create(repo, user_id=user_id, month=month, salary=salary)
        lookup.ledger.salary_credited = salary
        recompute_totals(lookup.ledger, load_days(lookup.ledger))
        saved = _persist(repo, lookup)
    logger.info(
        "Updated salary",
        extra={"user_id": user_id, "month": month, "ledger_created": lookup.created},
    )
    return saved


def add_day(
    repo: MonthLedgerRepository,
    *,
    user_id: str,
    month: str,
    date: str,
    items: Iterable[LineItem],
) -> MonthLedger:
    """Append ``items`` to the day, creating the day and the ledger as needed."""

    validate_month(month)
    validate_day_in_month(date, month)
    # Ids are assigned by the repository when the items are persisted.
    new_items = [LineItem(purpose=item.purpose, amount=item.amount) for item in items]
    if not new_items:
        raise InvalidInput("At least one item is required")

    with key_lock("ledger", user_id, month):
        lookup = find_or_create(repo, user_id=user_id, month=month)
        days = load_days(lookup.ledger)
        try:
            days[_day_index(days, date)].items.extend(new_items)
        except NotFound:
            days.append(ExpenseDay(date=date, items=new_items))
        recompute_totals(lookup.ledger, days)
        saved = _persist(repo, lookup)
    logger.info(
        "Added expense items",
        extra={"user_id": user_id, "date": date, "count": len(new_items)},
    )
    return saved


def update_day(
    repo: MonthLedgerRepository,
    *,
    user_id: str,
    month: str,
    date: str,
    items: Iterable[LineItem],
) -> MonthLedger:
    """Replace the full item list of an existing day."""

    validate_month(month)
    with key_lock("ledger", user_id, month):
        ledger = _require_ledger(repo, user_id, month)
        days = load_days(ledger)
        day = days[_day_index(days, date)]
        day.items = _carry_item_ids(day.items, items)
        recompute_totals(ledger, days)
        saved = repo.replace(ledger)
    logger.info("Replaced expense day", extra={"user_id": user_id, "date": date})
    return saved


def delete_day(
    repo: MonthLedgerRepository, *, user_id: str, month: str, date: str
) -> MonthLedger:
    """Remove a whole day from the ledger."""

    validate_month(month)
    with key_lock("ledger", user_id, month):
        ledger = _require_ledger(repo, user_id, month)
        days = load_days(ledger)
        del days[_day_index(days, date)]
        recompute_totals(ledger, days)
        saved = repo.replace(ledger)
    logger.info("Deleted expense day", extra={"user_id": user_id, "date": date})
    return saved


def delete_item(
    repo: MonthLedgerRepository, *, user_id: str, month: str, date: str, item_id: str
) -> MonthLedger:
    """Remove one line item; the day stays even when it becomes empty."""

    validate_month(month)
    with key_lock("ledger", user_id, month):
        ledger = _require_ledger(repo, user_id, month)
        days = load_days(ledger)
        day = days[_day_index(days, date)]
        del day.items[_item_index(day.items, item_id)]
        recompute_totals(ledger, days)
        saved = repo.replace(ledger)
    logger.info(
        "Deleted expense item",
        extra={"user_id": user_id, "date": date, "item_id": item_id},
    )
    return saved


def get_month(repo: MonthLedgerRepository, *, user_id: str, month: str) -> MonthLedger:
    """Return the ledger for a month or raise NotFound."""

    validate_month(month)
    return _require_ledger(repo, user_id, month)


def list_months(repo: MonthLedgerRepository, *, user_id: str) -> list[MonthLedger]:
    """Return all of a user's ledgers, most recent month first."""

    return sorted(repo.list_for_user(user_id), key=lambda ledger: ledger.month, reverse=True)


def serialize_ledger(ledger: MonthLedger) -> dict[str, Any]:
    """Return a JSON-friendly representation of a ledger."""

    return {
        "id": ledger.id,
        "user_id": ledger.user_id,
        "month": ledger.month,
        "salary_credited": ledger.salary_credited,
        "days": [ExpenseDay.from_dict(day).to_dict() for day in ledger.days or []],
        "monthly_total": ledger.monthly_total,
        "balance": ledger.balance,
    }


__all__ = [
    "ExpenseDay",
    "LedgerLookup",
    "LineItem",
    "add_day",
    "create_month",
    "delete_day",
    "delete_item",
    "find_or_create",
    "get_month",
    "list_months",
    "load_days",
    "recompute_totals",
    "serialize_ledger",
    "set_salary",
    "update_day",
]
