"""Shared fixtures: a fixed "now" and a hand-driven feed.

``now`` is Saturday 2024-06-15 at noon, so every bucketing test reads the same
calendar regardless of when the suite runs.
"""

from __future__ import annotations

from datetime import datetime

import pytest


NOW = datetime(2024, 6, 15, 12, 0)


class ManualFeed:
    """Feed that only delivers when the test says so."""

    def __init__(self) -> None:
        self.callbacks = {"expenses": [], "income": []}
        self.unsubscribed = []

    def _subscribe(self, stream, user_id, callback):
        self.callbacks[stream].append(callback)

        def unsubscribe():
            self.callbacks[stream].remove(callback)
            self.unsubscribed.append(stream)

        return unsubscribe

    def subscribe_expenses(self, user_id, callback):
        return self._subscribe("expenses", user_id, callback)

    def subscribe_income(self, user_id, callback):
        return self._subscribe("income", user_id, callback)

    def push(self, stream, records):
        for cb in list(self.callbacks[stream]):
            cb(records)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def manual_feed() -> ManualFeed:
    return ManualFeed()


@pytest.fixture
def expense_records() -> list[dict]:
    return [
        {"id": "e1", "title": "Coffee", "amount": "4.50", "date": "2024-06-15", "category": "Food"},
        {"id": "e2", "title": "Groceries", "amount": 40, "date": "06/10", "category": "Food"},
        {"id": "e3", "title": "Rent", "amount": 1200, "date": "2024-03-01", "category": "Housing"},
        {"id": "e4", "title": "Refund", "amount": -20, "date": "2024-06-15", "category": "Food"},
    ]


@pytest.fixture
def income_records() -> list[dict]:
    return [
        {"id": "i1", "title": "Salary", "amount": 3000, "date": "2024-06-01"},
        {"id": "i2", "title": "Correction", "amount": -100, "date": "2024-06-15"},
    ]
