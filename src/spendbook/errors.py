"""Error kinds raised by the ledger and EMI services."""

from __future__ import annotations


class SpendbookError(Exception):
    """Base class for locally-detected, non-retryable failures."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Conflict(SpendbookError):
    """Raised when a record already exists for the requested key."""

    status_code = 409


class NotFound(SpendbookError):
    """Raised when a month, day, item, EMI or entry is absent."""

    status_code = 404


class InvalidInput(SpendbookError, ValueError):
    """Raised for negative amounts, out-of-range indexes or mismatched dates."""

    status_code = 400


__all__ = ["SpendbookError", "Conflict", "NotFound", "InvalidInput"]
