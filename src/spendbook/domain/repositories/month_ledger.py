"""Month ledger repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.month_ledger import MonthLedger


class MonthLedgerRepository(Protocol):
    """Persistence for ledger documents keyed by (user_id, month)."""

    def get(self, user_id: str, month: str) -> Optional[MonthLedger]:
        """Retrieve the ledger for a user-month."""
        ...

    def create(self, ledger: MonthLedger) -> MonthLedger:
        """Insert a new ledger; raise Conflict when the user-month exists."""
        ...

    def replace(self, ledger: MonthLedger) -> MonthLedger:
        """Overwrite the stored ledger for the ledger's (user_id, month)."""
        ...

    def list_for_user(self, user_id: str) -> list[MonthLedger]:
        """List a user's ledgers, most recent month first."""
        ...
