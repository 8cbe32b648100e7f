"""Shared fixtures for the trader tracker test suite."""

from decimal import Decimal

import pytest

from trader_tracker.app import create_app
from trader_tracker.database import TrackerDB
from trader_tracker.ledger import Ledger
from trader_tracker.models import Trade, TraderProfile


def make_trade(
    symbol: str = "AAPL",
    side: str = "BUY",
    entry="100",
    exit_="110",
    profit="150",
    date: str = "2024-01-01",
) -> Trade:
    return Trade(
        symbol=symbol,
        side=side,
        entry_price=Decimal(str(entry)),
        exit_price=Decimal(str(exit_)),
        profit=Decimal(str(profit)),
        date=date,
    )


def make_profile(**overrides) -> TraderProfile:
    fields = dict(
        email="trader@gmail.com",
        dob="01-02-1990",
        phone="9876543210",
        country="India",
        account_id="AB123456",
    )
    fields.update(overrides)
    return TraderProfile(**fields)


SAMPLE_CSV = (
    "symbol,type,entry,exit,profit,date\n"
    "AAPL,BUY,100,110,150,2024-01-01\n"
    "TSLA,SELL,50,40,-120,2024-01-02\n"
    "MSFT,BUY,300,305,40,2024-01-03\n"
)


@pytest.fixture
def aapl():
    return make_trade()


@pytest.fixture
def tsla():
    return make_trade("TSLA", "SELL", 50, 40, -120, "2024-01-02")


@pytest.fixture
def ledger():
    return Ledger()


@pytest.fixture
def db(tmp_path):
    store = TrackerDB(str(tmp_path / "tracker.db"))
    yield store
    store.close()


@pytest.fixture
def app(tmp_path):
    return create_app({
        "TESTING": True,
        "SECRET_KEY": "test",
        "TRACKER_DB": str(tmp_path / "app.db"),
    })


@pytest.fixture
def client(app):
    return app.test_client()
