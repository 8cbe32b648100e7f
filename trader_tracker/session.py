"""
session.py
----------

State belonging to one logged-in trader: identity, ledger and profile.
A session is created by the auth gate on login and closed on logout.
"""

from dataclasses import dataclass, field
from typing import Optional

from .ledger import Ledger
from .models import TraderProfile


@dataclass
class TraderSession:
    username: str
    ledger: Ledger = field(default_factory=Ledger)
    profile: Optional[TraderProfile] = None
    closed: bool = False

    @property
    def has_valid_profile(self) -> bool:
        return self.profile is not None

    def close(self) -> None:
        """Discard the ledger and profile held by this session."""
        self.ledger.clear()
        self.profile = None
        self.closed = True
