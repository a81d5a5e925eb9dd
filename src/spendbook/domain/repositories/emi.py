"""EMI repository protocol."""

from __future__ import annotations

from typing import Any, Optional, Protocol

from ...models.emi import Emi


class EmiRepository(Protocol):
    """Persistence for EMI documents keyed by id."""

    def get_by_id(self, emi_id: str) -> Optional[Emi]:
        """Retrieve an EMI by ID."""
        ...

    def create(self, emi: Emi) -> Emi:
        """Insert a new EMI."""
        ...

    def update_schedule(
        self, emi_id: str, *, schedule: list[dict[str, Any]], remaining_amount: float
    ) -> Optional[Emi]:
        """Replace the schedule and remaining amount of an EMI."""
        ...

    def delete(self, emi_id: str) -> bool:
        """Delete an EMI, returning False when it did not exist."""
        ...

    def list_for_user(self, user_id: str) -> list[Emi]:
        """List a user's EMIs."""
        ...
