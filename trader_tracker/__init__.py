"""Smart Trader Tracker: a local trade journal with statistics and reports."""

from .app import create_app

__all__ = ["create_app"]
