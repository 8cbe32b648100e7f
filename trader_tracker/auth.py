"""
auth.py
-------

The gate every other part of the application sits behind. It resolves a
trader name and password into a ``TraderSession``.

States::

    PROMPTING --login/register--> AUTHENTICATED --logout--> PROMPTING
        |
        +--cancel--> TERMINATED   (final; no further logins)

Passwords are stored as salted one-way hashes, never as plain text.
"""

import logging
from enum import Enum
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from .database import TrackerDB
from .errors import AuthError, UnknownUserError
from .session import TraderSession

logger = logging.getLogger(__name__)


class GateState(Enum):
    PROMPTING = "prompting"
    AUTHENTICATED = "authenticated"
    TERMINATED = "terminated"


class AuthGate:
    def __init__(self, db: TrackerDB) -> None:
        self.db = db
        self.state = GateState.PROMPTING
        self._session: Optional[TraderSession] = None

    @property
    def current(self) -> Optional[TraderSession]:
        return self._session

    def _ensure_open(self) -> None:
        if self.state is GateState.TERMINATED:
            raise AuthError("The application has been closed.")

    @staticmethod
    def _clean_name(username: str) -> str:
        username = (username or "").strip()
        if not username:
            raise AuthError("Trader name is required.")
        return username

    def has_account(self, username: str) -> bool:
        return self.db.get_password_hash(self._clean_name(username)) is not None

    def login(self, username: str, password: str) -> TraderSession:
        """Authenticate an existing trader.

        Raises ``UnknownUserError`` when there is no account, so the caller
        can offer to create one, and ``AuthError`` on a wrong password.
        """
        self._ensure_open()
        username = self._clean_name(username)
        stored = self.db.get_password_hash(username)
        if stored is None:
            raise UnknownUserError(username)
        if not check_password_hash(stored, password):
            logger.warning("Rejected login for %s", username)
            raise AuthError("Incorrect password.")
        return self._open_session(username)

    def register(self, username: str, password: str) -> TraderSession:
        """Create an account for a new trader and log them in."""
        self._ensure_open()
        username = self._clean_name(username)
        if self.db.get_password_hash(username) is not None:
            raise AuthError(f"An account for '{username}' already exists.")
        self.db.create_credentials(username, generate_password_hash(password))
        logger.info("Created account for %s", username)
        return self._open_session(username)

    def _open_session(self, username: str) -> TraderSession:
        if self._session is not None:
            self._session.close()
        session = TraderSession(username=username)
        session.profile = self.db.load_profile(username)
        self._session = session
        self.state = GateState.AUTHENTICATED
        logger.info("Logged in as %s", username)
        return session

    def logout(self) -> None:
        """Tear down the current session and go back to prompting."""
        if self._session is not None:
            logger.info("Logged out %s", self._session.username)
            self._session.close()
        self._session = None
        if self.state is not GateState.TERMINATED:
            self.state = GateState.PROMPTING

    def cancel(self) -> None:
        """Close the gate for good."""
        if self._session is not None:
            self._session.close()
        self._session = None
        self.state = GateState.TERMINATED
        logger.info("Login cancelled; application closed")
