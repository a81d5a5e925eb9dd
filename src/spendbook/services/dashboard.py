"""Read-only rollup of a user's ledgers and EMIs."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from ..domain.repositories.emi import EmiRepository
from ..domain.repositories.month_ledger import MonthLedgerRepository
from .emis import is_active


@dataclass(slots=True)
class DashboardStats:
    total_expenses: float
    salary_credited: float
    balance: float
    months_tracked: int
    active_emis: int
    emi_remaining: float

    def to_dict(self) -> dict[str, float | int]:
        return asdict(self)


def load_dashboard_stats(
    *, ledgers: MonthLedgerRepository, emis: EmiRepository, user_id: str
) -> DashboardStats:
    """Aggregate totals across every month and EMI owned by ``user_id``."""

    months = ledgers.list_for_user(user_id)
    loans = emis.list_for_user(user_id)

    total_expenses = sum(ledger.monthly_total for ledger in months)
    salary_credited = sum(ledger.salary_credited for ledger in months)
    return DashboardStats(
        total_expenses=total_expenses,
        salary_credited=salary_credited,
        balance=salary_credited - total_expenses,
        months_tracked=len(months),
        active_emis=sum(1 for emi in loans if is_active(emi)),
        emi_remaining=sum(emi.remaining_amount for emi in loans),
    )
