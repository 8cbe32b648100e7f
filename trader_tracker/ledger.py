"""
ledger.py
---------

In-memory, ordered collection of the trades of the active session,
plus the undo history of trades added by import.

Undo tracks ledger-assigned ids rather than trade values, so with two
identical trades the one added last is the one removed.
"""

import dataclasses
import itertools
import logging
from typing import Iterable, Iterator, List, Optional, Sequence

from .errors import ParseError
from .models import TRADE_FIELD_COUNT, Trade

logger = logging.getLogger(__name__)


class Ledger:
    """Ordered trades with a last-in-first-out undo stack."""

    def __init__(self, trades: Optional[Iterable[Trade]] = None) -> None:
        self._trades: List[Trade] = []
        self._undo: List[int] = []
        self._ids = itertools.count(1)
        if trades is not None:
            self.replace(trades)

    def __len__(self) -> int:
        return len(self._trades)

    def __iter__(self) -> Iterator[Trade]:
        return iter(list(self._trades))

    @property
    def trades(self) -> List[Trade]:
        """Snapshot of the ledger in its current order."""
        return list(self._trades)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    def _stamp(self, trade: Trade) -> Trade:
        return dataclasses.replace(trade, id=next(self._ids))

    # ---------- mutation ----------
    def add(self, trade: Trade) -> Trade:
        """Append a trade and make it undoable. Returns the stored copy."""
        stored = self._stamp(trade)
        self._trades.append(stored)
        self._undo.append(stored.id)
        return stored

    def clear(self) -> None:
        self._trades.clear()
        self._undo.clear()

    def replace(self, trades: Iterable[Trade]) -> None:
        """Swap in a saved ledger. Loaded trades are not undoable."""
        stamped = [self._stamp(t) for t in trades]
        self._trades = stamped
        self._undo.clear()

    def import_trades(self, trades: Iterable[Trade]) -> int:
        """Replace the ledger and undo history with ``trades``."""
        trades = list(trades)
        self.clear()
        for trade in trades:
            self.add(trade)
        return len(trades)

    def import_rows(self, rows: Iterable[Sequence[str]]) -> int:
        """Replace the ledger with trades parsed from CSV rows.

        Rows that do not have exactly six fields are skipped. Parsing is
        all-or-nothing: if any row fails, ``ParseError`` is raised and
        the ledger keeps its previous contents.
        """
        parsed: List[Trade] = []
        skipped = 0
        for number, row in enumerate(rows, start=1):
            if len(row) != TRADE_FIELD_COUNT:
                skipped += 1
                continue
            try:
                parsed.append(Trade.from_row(row))
            except ParseError as e:
                raise ParseError(str(e), row=number) from e
        count = self.import_trades(parsed)
        logger.info("Imported %d trades (%d rows skipped)", count, skipped)
        return count

    def undo_last(self) -> Optional[Trade]:
        """Remove the most recently added trade; None if nothing to undo."""
        if not self._undo:
            return None
        trade_id = self._undo.pop()
        for index, trade in enumerate(self._trades):
            if trade.id == trade_id:
                return self._trades.pop(index)
        return None

    def sort_by_profit_descending(self) -> None:
        # list.sort is stable, ties keep their relative order
        self._trades.sort(key=lambda t: t.profit, reverse=True)

    # ---------- queries ----------
    def search(self, query: str) -> List[Trade]:
        """Trades whose symbol or side contains ``query`` (case-insensitive)."""
        needle = query.strip().lower()
        return [
            t for t in self._trades
            if needle in t.symbol.lower() or needle in t.side.lower()
        ]
