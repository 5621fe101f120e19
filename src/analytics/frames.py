from __future__ import annotations
from typing import Dict, Iterable, Sequence

from analytics.aggregates import aggregate_expenses, aggregate_income
from analytics.periods import PERIODS, as_moment, period_spec
from core.models import ChartFrame, Granularity, PeriodSummary, Transaction

def compose_frame(granularity, expenses: Sequence[float], income: Sequence[float], now) -> ChartFrame:
    spec = period_spec(granularity)
    labels = spec.labels(as_moment(now))
    return ChartFrame(
        granularity=spec.granularity,
        labels=tuple(labels),
        expenses=tuple(float(v) for v in expenses),
        income=tuple(float(v) for v in income),
    )

def compose_frames(
    expenses: Iterable[Transaction],
    income: Iterable[Transaction],
    now,
) -> Dict[Granularity, ChartFrame]:
    """All four chart frames from one pair of snapshots."""
    now = as_moment(now)
    exp = aggregate_expenses(expenses, now)
    inc = aggregate_income(income, now)
    return {g: compose_frame(g, exp[g], inc[g], now) for g in PERIODS}

def summarize(frame: ChartFrame) -> PeriodSummary:
    """Current totals = most recent slot of each series."""
    spec = PERIODS[frame.granularity]
    return PeriodSummary(
        granularity=frame.granularity,
        display=spec.display,
        expenses=frame.expenses[-1] if frame.expenses else 0.0,
        income=frame.income[-1] if frame.income else 0.0,
    )
