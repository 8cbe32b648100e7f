"""
database.py
-----------

This module encapsulates all interactions with the SQLite file that
persists credentials, trader profiles and saved ledgers. Every record
is keyed by the trader name, and each save overwrites that trader's
previous record wholesale.

Prices are stored as decimal text so a save/load cycle returns exactly
the values that were saved.
"""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Iterator, List, Optional

from .errors import StorageError
from .models import Trade, TraderProfile

logger = logging.getLogger(__name__)


class TrackerDB:
    """SQLite-backed store for credentials, profiles and ledgers."""

    def __init__(self, db_path: str = "trader_tracker.db") -> None:
        self.db_path = db_path
        try:
            self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open {db_path}: {e}") from e
        self.conn.row_factory = sqlite3.Row
        self._create_tables()

    @contextmanager
    def _transaction(self, action: str) -> Iterator[sqlite3.Connection]:
        try:
            with self.conn:
                yield self.conn
        except sqlite3.Error as e:
            logger.warning("Storage failure while trying to %s: %s", action, e)
            raise StorageError(f"Failed to {action}: {e}") from e

    # ---------- schema ----------
    def _create_tables(self) -> None:
        """Create the credential, profile and ledger tables."""
        with self._transaction("create tables") as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS credentials (
                    username TEXT PRIMARY KEY,
                    password_hash TEXT NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS profiles (
                    username TEXT PRIMARY KEY,
                    email TEXT NOT NULL,
                    dob TEXT NOT NULL,
                    phone TEXT NOT NULL,
                    country TEXT NOT NULL,
                    account_id TEXT NOT NULL
                )
                """
            )
            # one row per saved ledger, so an empty save is still a save
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS ledgers (
                    username TEXT PRIMARY KEY,
                    saved_at TEXT NOT NULL -- ISO8601
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS ledger_trades (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username TEXT NOT NULL,
                    position INTEGER NOT NULL,
                    symbol TEXT NOT NULL,
                    side TEXT NOT NULL,
                    entry_price TEXT NOT NULL,
                    exit_price TEXT NOT NULL,
                    profit TEXT NOT NULL,
                    date TEXT NOT NULL
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_ledger_trades_user "
                "ON ledger_trades(username, position)"
            )

    # ---------- credentials ----------
    def get_password_hash(self, username: str) -> Optional[str]:
        try:
            row = self.conn.execute(
                "SELECT password_hash FROM credentials WHERE username = ?",
                (username,),
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read credentials: {e}") from e
        return row["password_hash"] if row else None

    def create_credentials(self, username: str, password_hash: str) -> None:
        with self._transaction("save new user") as conn:
            conn.execute(
                "INSERT INTO credentials (username, password_hash) VALUES (?, ?)",
                (username, password_hash),
            )

    # ---------- profiles ----------
    def save_profile(self, username: str, profile: TraderProfile) -> None:
        """Insert or overwrite the trader's profile."""
        with self._transaction("save profile") as conn:
            conn.execute(
                """
                INSERT INTO profiles (username, email, dob, phone, country, account_id)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(username) DO UPDATE SET
                    email=excluded.email,
                    dob=excluded.dob,
                    phone=excluded.phone,
                    country=excluded.country,
                    account_id=excluded.account_id
                """,
                (
                    username,
                    profile.email,
                    profile.dob,
                    profile.phone,
                    profile.country,
                    profile.account_id,
                ),
            )

    def load_profile(self, username: str) -> Optional[TraderProfile]:
        """Return the saved profile, or None if the trader has none."""
        try:
            row = self.conn.execute(
                "SELECT * FROM profiles WHERE username = ?", (username,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to load profile: {e}") from e
        if row is None:
            return None
        return TraderProfile(
            email=row["email"],
            dob=row["dob"],
            phone=row["phone"],
            country=row["country"],
            account_id=row["account_id"],
        )

    # ---------- ledgers ----------
    def save_ledger(self, username: str, trades: Iterable[Trade]) -> int:
        """Overwrite the trader's saved ledger, keeping trade order."""
        trades = list(trades)
        with self._transaction("save trades") as conn:
            conn.execute("DELETE FROM ledger_trades WHERE username = ?", (username,))
            conn.executemany(
                """
                INSERT INTO ledger_trades
                    (username, position, symbol, side, entry_price, exit_price, profit, date)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        username,
                        position,
                        t.symbol,
                        t.side,
                        str(t.entry_price),
                        str(t.exit_price),
                        str(t.profit),
                        t.date,
                    )
                    for position, t in enumerate(trades)
                ],
            )
            conn.execute(
                """
                INSERT INTO ledgers (username, saved_at) VALUES (?, ?)
                ON CONFLICT(username) DO UPDATE SET saved_at=excluded.saved_at
                """,
                (username, datetime.now().isoformat()),
            )
        logger.info("Saved %d trades for %s", len(trades), username)
        return len(trades)

    def has_saved_ledger(self, username: str) -> bool:
        try:
            row = self.conn.execute(
                "SELECT 1 FROM ledgers WHERE username = ?", (username,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read saved trades: {e}") from e
        return row is not None

    def load_ledger(self, username: str) -> List[Trade]:
        """Return the trader's saved trades in their saved order."""
        if not self.has_saved_ledger(username):
            raise StorageError(f"No saved trades found for '{username}'.")
        try:
            rows = self.conn.execute(
                "SELECT * FROM ledger_trades WHERE username = ? ORDER BY position",
                (username,),
            ).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to load trades: {e}") from e
        return [self._row_to_trade(r) for r in rows]

    def _row_to_trade(self, row: sqlite3.Row) -> Trade:
        """Convert DB row -> Trade."""
        return Trade(
            symbol=row["symbol"],
            side=row["side"],
            entry_price=Decimal(row["entry_price"]),
            exit_price=Decimal(row["exit_price"]),
            profit=Decimal(row["profit"]),
            date=row["date"],
        )

    # ---------- housekeeping ----------
    def close(self) -> None:
        self.conn.close()
