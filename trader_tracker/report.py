"""
report.py
---------

PDF report of a trader's session: profile details, the full statistics
block and a table of all trades with rows tinted by outcome.
"""

from datetime import datetime
from typing import Iterable, Optional, Sequence

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from .analytics import compute_statistics
from .errors import EmptyStateError
from .models import Trade, TraderProfile

WIN_FILL = (200, 255, 200)
LOSS_FILL = (255, 200, 200)
FLAT_FILL = (255, 255, 255)
HEADER_FILL = (192, 192, 192)

TABLE_HEADERS = ["#", "Symbol", "Type", "Entry", "Exit", "Profit", "Date", "Note"]
# millimetres; sums to the A4 width inside the default 10mm margins
COLUMN_WIDTHS = [10, 25, 18, 22, 22, 22, 28, 43]
ROW_HEIGHT = 7


def _latin1(text: str) -> str:
    # core PDF fonts only cover latin-1
    return text.encode("latin-1", "replace").decode("latin-1")


def row_fill(profit) -> tuple:
    if profit > 0:
        return WIN_FILL
    if profit < 0:
        return LOSS_FILL
    return FLAT_FILL


def _line(pdf: FPDF, text: str, height: float = 7) -> None:
    pdf.cell(0, height, _latin1(text), new_x=XPos.LMARGIN, new_y=YPos.NEXT)


def _table_row(pdf: FPDF, cells: Sequence[str], fill: tuple) -> None:
    pdf.set_fill_color(*fill)
    for text, width in zip(cells, COLUMN_WIDTHS):
        pdf.cell(width, ROW_HEIGHT, _latin1(text), border=1, fill=True)
    pdf.ln(ROW_HEIGHT)


def build_report(
    username: str,
    profile: Optional[TraderProfile],
    trades: Iterable[Trade],
    generated_at: Optional[datetime] = None,
    compress: bool = True,
) -> bytes:
    """Render the report and return the PDF document as bytes.

    ``compress=False`` leaves the page content streams as plain text.
    """
    trades = list(trades)
    generated_at = generated_at or datetime.now()

    pdf = FPDF()
    pdf.set_compression(compress)
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    pdf.set_font("Helvetica", style="B", size=18)
    _line(pdf, f"Smart Trader Report - {username}", height=10)
    pdf.set_font("Helvetica", size=12)
    _line(pdf, f"Date: {generated_at:%Y-%m-%d %H:%M:%S}")
    pdf.ln(4)

    pdf.set_font("Helvetica", style="B", size=14)
    _line(pdf, "Trader Info:")
    pdf.set_font("Helvetica", size=12)
    if profile is not None:
        _line(pdf, f"Email      : {profile.email}")
        _line(pdf, f"DOB        : {profile.dob}")
        _line(pdf, f"Phone      : {profile.phone}")
        _line(pdf, f"Country    : {profile.country}")
        _line(pdf, f"Account ID : {profile.account_id}")
    else:
        _line(pdf, "No profile on record.")
    pdf.ln(4)

    pdf.set_font("Helvetica", style="B", size=14)
    _line(pdf, "Summary Stats:")
    pdf.set_font("Helvetica", size=12)
    try:
        stats = compute_statistics(trades)
    except EmptyStateError as e:
        _line(pdf, str(e))
    else:
        for label, value in stats.as_rows():
            _line(pdf, f"{label:<20}: {value}")
    pdf.ln(6)

    pdf.set_font("Helvetica", style="B", size=10)
    _table_row(pdf, TABLE_HEADERS, HEADER_FILL)
    pdf.set_font("Helvetica", size=8)
    for number, t in enumerate(trades, start=1):
        _table_row(
            pdf,
            [
                str(number),
                t.symbol,
                t.side,
                f"{t.entry_price:.2f}",
                f"{t.exit_price:.2f}",
                f"{t.profit:.2f}",
                t.date,
                t.note,
            ],
            row_fill(t.profit),
        )

    return bytes(pdf.output())

