"""Tests for CSV import and export."""

import csv
import io

from trader_tracker.csv_io import EXPORT_HEADER, decode_upload, export_csv, read_trade_rows
from trader_tracker.ledger import Ledger

from .conftest import SAMPLE_CSV, make_trade


class TestReadRows:
    def test_header_is_dropped(self):
        rows = read_trade_rows(SAMPLE_CSV)
        assert len(rows) == 3
        assert rows[0] == ["AAPL", "BUY", "100", "110", "150", "2024-01-01"]

    def test_empty_text(self):
        assert read_trade_rows("") == []

    def test_header_only(self):
        assert read_trade_rows("symbol,type,entry,exit,profit,date\n") == []

    def test_windows_line_endings(self):
        rows = read_trade_rows("h\r\nA,B,1,2,3,d\r\n")
        assert rows == [["A", "B", "1", "2", "3", "d"]]


class TestExport:
    def test_header_and_formatting(self, aapl, tsla):
        text = export_csv([aapl, tsla])
        lines = text.splitlines()
        assert lines[0] == "Symbol,Type,Entry,Exit,Profit,Date,Note"
        assert lines[1] == "AAPL,BUY,100.00,110.00,150.00,2024-01-01,Great trade!"
        assert lines[2] == "TSLA,SELL,50.00,40.00,-120.00,2024-01-02,High loss. Review setup."

    def test_rounds_to_two_places(self):
        text = export_csv([make_trade(entry="1.005", exit_="2.999", profit="0.1")])
        row = text.splitlines()[1].split(",")
        assert row[2:5] == ["1.00", "3.00", "0.10"]

    def test_empty_ledger_writes_header_only(self):
        assert export_csv([]) == ",".join(EXPORT_HEADER) + "\n"

    def test_round_trip_without_note_column(self, aapl, tsla):
        original = [aapl, tsla, make_trade("MSFT", "BUY", "300.5", "301.25", "0.75", "x")]
        exported = export_csv(original)

        stripped = io.StringIO()
        writer = csv.writer(stripped)
        for row in csv.reader(io.StringIO(exported)):
            writer.writerow(row[:-1])

        ledger = Ledger()
        ledger.import_rows(read_trade_rows(stripped.getvalue()))
        assert ledger.trades == original

    def test_exported_file_with_note_is_skipped_on_import(self, aapl):
        ledger = Ledger()
        assert ledger.import_rows(read_trade_rows(export_csv([aapl]))) == 0



class TestDecodeUpload:
    def test_utf8_passes_through(self):
        assert decode_upload("h\nSociété,BUY,1,2,3,d\n".encode()) == "h\nSociété,BUY,1,2,3,d\n"

    def test_undecodable_bytes_are_replaced_not_dropped(self):
        text = decode_upload(b"h\nSoci\xe9t\xe9,BUY,1,2,3,d\n")
        rows = read_trade_rows(text)
        assert rows[0][0] == "Soci\ufffdt\ufffd"

    def test_replacement_is_logged(self, caplog):
        with caplog.at_level("WARNING", logger="trader_tracker.csv_io"):
            decode_upload(b"\xff")
        assert "not valid UTF-8" in caplog.text

    def test_quoted_commas_survive_round_trip(self):
        text = export_csv([make_trade(symbol="BRK,B")])
        assert read_trade_rows(text)[0][0] == "BRK,B"
