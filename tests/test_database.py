"""Tests for TrackerDB: profiles, ledgers and credentials."""

from decimal import Decimal

import pytest

from trader_tracker.database import TrackerDB
from trader_tracker.errors import StorageError

from .conftest import make_profile, make_trade


class TestProfiles:
    def test_missing_profile_is_none(self, db):
        assert db.load_profile("alice") is None

    def test_save_and_load(self, db):
        profile = make_profile()
        db.save_profile("alice", profile)
        assert db.load_profile("alice") == profile

    def test_overwrite(self, db):
        db.save_profile("alice", make_profile())
        db.save_profile("alice", make_profile(country="Spain"))
        assert db.load_profile("alice").country == "Spain"

    def test_scoped_per_user(self, db):
        db.save_profile("alice", make_profile())
        assert db.load_profile("bob") is None


class TestLedgers:
    def test_load_without_save_raises(self, db):
        with pytest.raises(StorageError):
            db.load_ledger("alice")

    def test_round_trip_preserves_order_and_values(self, db):
        trades = [
            make_trade("ZZZ", profit="-0.333"),
            make_trade("AAA", profit="12.5"),
            make_trade("MMM", profit="0"),
        ]
        assert db.save_ledger("alice", trades) == 3
        loaded = db.load_ledger("alice")
        assert loaded == trades
        assert loaded[0].profit == Decimal("-0.333")

    def test_save_overwrites(self, db):
        db.save_ledger("alice", [make_trade("A"), make_trade("B")])
        db.save_ledger("alice", [make_trade("C")])
        assert [t.symbol for t in db.load_ledger("alice")] == ["C"]

    def test_empty_save_loads_empty(self, db):
        db.save_ledger("alice", [])
        assert db.load_ledger("alice") == []

    def test_scoped_per_user(self, db):
        db.save_ledger("alice", [make_trade("A")])
        db.save_ledger("bob", [make_trade("B")])
        assert [t.symbol for t in db.load_ledger("alice")] == ["A"]

    def test_persists_across_connections(self, tmp_path):
        path = str(tmp_path / "p.db")
        first = TrackerDB(path)
        first.save_ledger("alice", [make_trade()])
        first.close()
        second = TrackerDB(path)
        assert second.load_ledger("alice") == [make_trade()]
        second.close()


class TestCredentials:
    def test_unknown_user(self, db):
        assert db.get_password_hash("alice") is None

    def test_create_and_read(self, db):
        db.create_credentials("alice", "hash")
        assert db.get_password_hash("alice") == "hash"

    def test_duplicate_user_raises(self, db):
        db.create_credentials("alice", "hash")
        with pytest.raises(StorageError):
            db.create_credentials("alice", "other")


def test_closed_connection_raises_storage_error(tmp_path):
    store = TrackerDB(str(tmp_path / "c.db"))
    store.close()
    with pytest.raises(StorageError):
        store.load_profile("alice")
