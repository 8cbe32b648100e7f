"""
models.py
---------

Defines the core data model: a single trade and the trader profile.
Keeping these in a separate module lets the ledger, the storage layer
and the exporters share them without depending on each other.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence

from .errors import ParseError

TRADE_FIELD_COUNT = 6
# largest decimal exponent a price or profit may have (double precision range)
MAX_EXPONENT = 308

NOTE_GREAT = "Great trade!"
NOTE_GOOD = "Good job."
NOTE_HIGH_LOSS = "High loss. Review setup."
NOTE_CAUTIOUS = "Be cautious."


def note_for_profit(profit: Decimal) -> str:
    """Return the annotation shown next to a trade with this profit."""
    if profit > 100:
        return NOTE_GREAT
    if profit > 0:
        return NOTE_GOOD
    if profit < -100:
        return NOTE_HIGH_LOSS
    return NOTE_CAUTIOUS


def _to_decimal(value: str, column: str) -> Decimal:
    try:
        number = Decimal(value.strip())
    except (InvalidOperation, ValueError, TypeError, AttributeError):
        raise ParseError(f"{column} '{value}' is not a number.")
    if not number.is_finite():
        raise ParseError(f"{column} '{value}' is not a number.")
    # beyond the float range; sums of such values overflow the context
    if number and number.adjusted() > MAX_EXPONENT:
        raise ParseError(f"{column} '{value}' is out of range.")
    return number


@dataclass(frozen=True)
class Trade:
    """Represents a single logged trade.

    Attributes
    ----------
    symbol: str
        Ticker or instrument name (e.g. 'AAPL').
    side: str
        Trade type as typed by the user, usually 'BUY' or 'SELL'.
    entry_price: Decimal
        Price at which the position was opened.
    exit_price: Decimal
        Price at which the position was closed.
    profit: Decimal
        Realised profit or loss. Supplied with the trade, not derived
        from the prices.
    date: str
        Free-text date label.
    id: Optional[int]
        Ledger-assigned identifier (None until the trade joins a ledger).
        Not part of value equality.
    """

    symbol: str
    side: str
    entry_price: Decimal
    exit_price: Decimal
    profit: Decimal
    date: str
    id: Optional[int] = field(default=None, compare=False)

    @property
    def note(self) -> str:
        return note_for_profit(self.profit)

    @classmethod
    def from_row(cls, fields: Sequence[str]) -> "Trade":
        """Build a trade from the six text columns of an import row."""
        if len(fields) != TRADE_FIELD_COUNT:
            raise ParseError(
                f"expected {TRADE_FIELD_COUNT} columns, got {len(fields)}."
            )
        symbol, side, entry, exit_, profit, date = fields
        symbol = symbol.strip()
        if not symbol:
            raise ParseError("Symbol is empty.")
        return cls(
            symbol=symbol,
            side=side.strip(),
            entry_price=_to_decimal(entry, "Entry"),
            exit_price=_to_decimal(exit_, "Exit"),
            profit=_to_decimal(profit, "Profit"),
            date=date.strip(),
        )


@dataclass(frozen=True)
class TraderProfile:
    """Contact and account details of the logged-in trader.

    Instances are only created by ``validation.validate_profile`` so a
    stored profile has always passed the field format checks.
    """

    email: str
    dob: str
    phone: str
    country: str
    account_id: str
