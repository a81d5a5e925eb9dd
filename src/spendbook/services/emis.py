"""EMI (installment loan) schedules and payment tracking."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from ..domain.repositories.emi import EmiRepository
from ..errors import InvalidInput, NotFound
from ..logging_config import get_logger
from ..models.emi import Emi
from .locks import key_lock

logger = get_logger(__name__)

PAID = "paid"
UNPAID = "unpaid"
STATUSES = (PAID, UNPAID)


@dataclass(slots=True)
class ScheduleEntry:
    """One installment period of an EMI."""

    month: str
    amount: float
    status: str = UNPAID

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScheduleEntry":
        return cls(
            month=str(data["month"]),
            amount=float(data["amount"]),
            status=str(data.get("status", UNPAID)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"month": self.month, "amount": self.amount, "status": self.status}


def add_months(month: str, count: int) -> str:
    """Return the ``YYYY-MM`` month ``count`` months after ``month``."""

    try:
        start = datetime.strptime(month, "%Y-%m")
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Invalid month {month!r}; use YYYY-MM") from exc
    offset = start.month - 1 + count
    year = start.year + offset // 12
    return f"{year:04d}-{offset % 12 + 1:02d}"


def generate_schedule(
    *, start_month: str, amount_per_month: float, duration: int
) -> list[ScheduleEntry]:
    """Build ``duration`` unpaid entries starting at ``start_month``."""

    return [
        ScheduleEntry(month=add_months(start_month, i), amount=amount_per_month)
        for i in range(duration)
    ]


def remaining_amount(total_amount: float, schedule: list[ScheduleEntry]) -> float:
    """Total minus every paid entry's amount."""

    paid = sum(entry.amount for entry in schedule if entry.status == PAID)
    return total_amount - paid


def is_active(emi: Emi) -> bool:
    """Return True while any amount is still outstanding."""

    return emi.remaining_amount > 0


def create_emi(
    repo: EmiRepository,
    *,
    user_id: str,
    title: str,
    start_month: str,
    amount_per_month: float,
    duration: int,
) -> Emi:
    """Create an EMI with its full schedule generated up front."""

    if not title or not title.strip():
        raise InvalidInput("EMI title is required")
    if amount_per_month is None or not math.isfinite(amount_per_month) or amount_per_month < 1:
        raise InvalidInput("Amount per month must be at least 1")
    if duration is None or int(duration) != duration or duration < 1:
        raise InvalidInput("Duration must be at least 1 month")
    if len(start_month or "") != 7:
        raise InvalidInput(f"Invalid month {start_month!r}; use YYYY-MM")

    duration = int(duration)
    schedule = generate_schedule(
        start_month=start_month, amount_per_month=float(amount_per_month), duration=duration
    )
    total_amount = float(amount_per_month) * duration
    emi = Emi(
        user_id=user_id,
        title=title.strip(),
        start_month=start_month,
        amount_per_month=float(amount_per_month),
        duration=duration,
        schedule=[entry.to_dict() for entry in schedule],
        total_amount=total_amount,
        remaining_amount=remaining_amount(total_amount, schedule),
    )
    created = repo.create(emi)
    logger.info(
        "Created EMI",
        extra={"user_id": user_id, "emi_id": created.id, "duration": duration},
    )
    return created


def get_emi(repo: EmiRepository, *, emi_id: str, user_id: Optional[str] = None) -> Emi:
    """Return an EMI, raising NotFound when absent or owned by someone else."""

    emi = repo.get_by_id(emi_id)
    if emi is None or (user_id is not None and emi.user_id != user_id):
        raise NotFound("EMI not found")
    return emi


def list_emis(repo: EmiRepository, *, user_id: str) -> list[Emi]:
    return repo.list_for_user(user_id)


def set_entry_status(
    repo: EmiRepository,
    *,
    emi_id: str,
    index: int,
    status: str,
    user_id: Optional[str] = None,
) -> Emi:
    """Mark one schedule entry paid or unpaid and recompute the remaining amount.

    Both transitions are allowed; repeating the current status is a no-op on
    ``remaining_amount``.
    """

    if status not in STATUSES:
        raise InvalidInput(f"Status must be one of {', '.join(STATUSES)}")

    with key_lock("emi", emi_id):
        emi = get_emi(repo, emi_id=emi_id, user_id=user_id)
        schedule = [ScheduleEntry.from_dict(entry) for entry in emi.schedule]
        if not 0 <= index < len(schedule):
            raise InvalidInput(f"Schedule index {index} is out of range")
        schedule[index].status = status
        updated = repo.update_schedule(
            emi_id,
            schedule=[entry.to_dict() for entry in schedule],
            remaining_amount=remaining_amount(emi.total_amount, schedule),
        )
    if updated is None:
        raise NotFound("EMI not found")
    logger.info(
        "Updated EMI schedule entry",
        extra={"emi_id": emi_id, "index": index, "status": status},
    )
    return updated


def delete_emi(repo: EmiRepository, *, emi_id: str, user_id: Optional[str] = None) -> bool:
    """Delete an EMI; returns False without side effects when it is absent."""

    with key_lock("emi", emi_id):
        if user_id is not None:
            emi = repo.get_by_id(emi_id)
            if emi is None or emi.user_id != user_id:
                return False
        deleted = repo.delete(emi_id)
    if deleted:
        logger.info("Deleted EMI", extra={"emi_id": emi_id})
    return deleted


def serialize_emi(emi: Emi) -> dict[str, Any]:
    """Return a JSON-friendly representation of an EMI."""

    return {
        "id": emi.id,
        "user_id": emi.user_id,
        "title": emi.title,
        "start_month": emi.start_month,
        "amount_per_month": emi.amount_per_month,
        "duration": emi.duration,
        "schedule": [ScheduleEntry.from_dict(entry).to_dict() for entry in emi.schedule],
        "total_amount": emi.total_amount,
        "remaining_amount": emi.remaining_amount,
    }


__all__ = [
    "PAID",
    "UNPAID",
    "ScheduleEntry",
    "add_months",
    "create_emi",
    "delete_emi",
    "generate_schedule",
    "get_emi",
    "is_active",
    "list_emis",
    "remaining_amount",
    "serialize_emi",
    "set_entry_status",
]
