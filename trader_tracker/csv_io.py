"""
csv_io.py
---------

CSV import and export of trades.

Import expects a header line followed by rows of
``symbol,type,entry,exit,profit,date``; the header is skipped and rows
with a different column count are left for the ledger to drop.
Export writes one extra ``Note`` column with the trade annotation.
"""

import csv
import io
import logging
from typing import Iterable, List

from .models import Trade

logger = logging.getLogger(__name__)

EXPORT_HEADER = ["Symbol", "Type", "Entry", "Exit", "Profit", "Date", "Note"]
REPLACEMENT_CHAR = "\ufffd"


def decode_upload(data: bytes) -> str:
    """Decode an uploaded file as UTF-8.

    Undecodable bytes become U+FFFD so they stay visible in the imported
    text instead of silently vanishing.
    """
    text = data.decode("utf-8", errors="replace")
    if REPLACEMENT_CHAR in text:
        logger.warning("Upload is not valid UTF-8; undecodable bytes replaced")
    return text


def read_trade_rows(text: str) -> List[List[str]]:
    """Split CSV text into rows of fields, dropping the header line."""
    reader = csv.reader(io.StringIO(text))
    rows = list(reader)
    return rows[1:]


def export_csv(trades: Iterable[Trade]) -> str:
    """Render trades as CSV text with prices and profit to 2 decimals."""
    out = io.StringIO()
    w = csv.writer(out, lineterminator="\n")
    w.writerow(EXPORT_HEADER)
    for t in trades:
        w.writerow([
            t.symbol,
            t.side,
            f"{t.entry_price:.2f}",
            f"{t.exit_price:.2f}",
            f"{t.profit:.2f}",
            t.date,
            t.note,
        ])
    return out.getvalue()
