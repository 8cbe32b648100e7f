"""
errors.py
---------

Exception types raised by the tracker core. The web layer catches
``TrackerError`` at the route boundary and turns it into a flashed
message, so every exception here carries a user-facing message.
"""

from dataclasses import dataclass
from typing import Optional


class TrackerError(Exception):
    """Base class for all errors surfaced to the user."""


@dataclass(eq=False)
class ValidationError(TrackerError):
    field: str
    message: str
    title: str = "Invalid Input"

    def __str__(self) -> str:
        return self.message


class ParseError(TrackerError):
    """A numeric CSV column did not hold a decimal value."""

    def __init__(self, message: str, row: Optional[int] = None) -> None:
        self.row = row
        if row is not None:
            message = f"Row {row}: {message}"
        super().__init__(message)


class StorageError(TrackerError):
    """Reading or writing a local store failed."""


class AuthError(TrackerError):
    """Credential mismatch, closed gate or credential store failure."""


class UnknownUserError(AuthError):
    """No credential record exists for the given trader name."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"No account found for '{username}'.")


class EmptyStateError(TrackerError):
    """Statistics were requested for an empty ledger."""
