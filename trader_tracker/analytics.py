"""
analytics.py
-------------

This module contains functions to compute performance metrics from a list
of Trade objects. Keeping analytics apart from the UI and storage layers
lets the web pages, the PDF report and the tests share one implementation.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from .errors import EmptyStateError
from .models import Trade

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class TradeStatistics:
    total_trades: int
    win_count: int
    loss_count: int
    win_rate: Decimal
    total_net_profit: Decimal
    total_winning_amount: Decimal
    total_losing_amount: Decimal
    max_profit: Decimal
    max_loss: Decimal
    average_win: Decimal
    average_loss: Decimal
    average_profit: Decimal

    def as_rows(self) -> List[Tuple[str, str]]:
        """Labelled values for display, money and rates to 2 decimals."""
        return [
            ("Total Trades", str(self.total_trades)),
            ("Winning Trades", str(self.win_count)),
            ("Losing Trades", str(self.loss_count)),
            ("Win Rate (%)", f"{self.win_rate:.2f}"),
            ("Total Profit", f"{self.total_net_profit:.2f}"),
            ("Total Winning Amt", f"{self.total_winning_amount:.2f}"),
            ("Total Losing Amt", f"{self.total_losing_amount:.2f}"),
            ("Max Profit Trade", f"{self.max_profit:.2f}"),
            ("Max Loss Trade", f"{self.max_loss:.2f}"),
            ("Avg Profit (Wins)", f"{self.average_win:.2f}"),
            ("Avg Loss (Losses)", f"{self.average_loss:.2f}"),
            ("Avg Profit/Trade", f"{self.average_profit:.2f}"),
        ]


def compute_statistics(trades: Iterable[Trade]) -> TradeStatistics:
    """Compute aggregate statistics for the given trades in one pass.

    Parameters
    ----------
    trades: Iterable[Trade]
        Snapshot of the ledger.

    Returns
    -------
    TradeStatistics
        Unrounded values. Trades with zero profit count toward the total
        but are neither wins nor losses. ``max_loss`` is the lowest
        profit value, not the largest magnitude.

    Raises
    ------
    EmptyStateError
        If there are no trades.
    """
    total = 0
    wins = losses = 0
    net = won = lost = ZERO
    highest = lowest = None

    for trade in trades:
        profit = trade.profit
        total += 1
        net += profit
        if profit > 0:
            wins += 1
            won += profit
        elif profit < 0:
            losses += 1
            lost += profit
        highest = profit if highest is None else max(highest, profit)
        lowest = profit if lowest is None else min(lowest, profit)

    if total == 0:
        raise EmptyStateError("No trade data available.")

    return TradeStatistics(
        total_trades=total,
        win_count=wins,
        loss_count=losses,
        win_rate=HUNDRED * wins / total,
        total_net_profit=net,
        total_winning_amount=won,
        total_losing_amount=lost,
        max_profit=highest,
        max_loss=lowest,
        average_win=won / wins if wins else ZERO,
        average_loss=lost / losses if losses else ZERO,
        average_profit=net / total,
    )


def summarize(trades: Iterable[Trade]) -> Dict[str, object]:
    """Headline numbers for the summary line; zeros for an empty ledger."""
    total = 0
    wins = 0
    net = ZERO
    for trade in trades:
        total += 1
        net += trade.profit
        if trade.profit > 0:
            wins += 1
    win_rate = HUNDRED * wins / total if total else ZERO
    return {"total_trades": total, "win_rate": win_rate, "total_net_profit": net}
