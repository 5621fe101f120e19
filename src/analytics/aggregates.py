from __future__ import annotations
from typing import Dict, Iterable, List

from analytics.periods import PERIODS, as_moment
from core.models import Granularity, Transaction
from normalize import dated

Series = List[float]

def empty_series() -> Dict[Granularity, Series]:
    return {g: [0.0] * spec.window for g, spec in PERIODS.items()}

def bucket_series(transactions: Iterable[Transaction], now) -> Dict[Granularity, Series]:
    """Return { granularity: per-slot sums, oldest first } for all four granularities.

    Records with unreadable dates are dropped (and logged) before bucketing;
    a date outside a granularity's window contributes nothing to it.
    """
    now = as_moment(now)
    out = empty_series()
    for t, d in dated(transactions, now):
        for g, spec in PERIODS.items():
            slot = spec.slot_of(d, now)
            if slot is not None:
                out[g][slot] += t.amount
    return out

def aggregate_expenses(transactions: Iterable[Transaction], now) -> Dict[Granularity, Series]:
    return bucket_series([t for t in transactions if t.amount > 0], now)

def aggregate_income(transactions: Iterable[Transaction], now) -> Dict[Granularity, Series]:
    # no sign filter on income
    return bucket_series(transactions, now)
