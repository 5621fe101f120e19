from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Callable, Dict, List, Optional

from core.models import Granularity

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

SlotFn = Callable[[date, datetime], Optional[int]]
LabelFn = Callable[[datetime], List[str]]

@dataclass(frozen=True)
class PeriodSpec:
  granularity: Granularity
  window: int
  slot_of: SlotFn     # (day, now) -> slot index or None
  labels: LabelFn     # now -> labels, oldest first
  display: str        # text for the most recent slot

def _daily_slot(d: date, now: datetime) -> Optional[int]:
  today = now.date()
  for i in range(7):
    if d == today - timedelta(days=i):
      return 6 - i
  return None

def _weekly_slot(d: date, now: datetime) -> Optional[int]:
  diff_days = (now - datetime.combine(d, time())) // timedelta(days=1)
  diff_weeks = diff_days // 7
  if 0 <= diff_weeks < 4:
    return 3 - diff_weeks
  return None

def _monthly_slot(d: date, now: datetime) -> Optional[int]:
  diff_months = (now.year - d.year) * 12 + (now.month - d.month)
  if 0 <= diff_months < 6:
    return 5 - diff_months
  return None

def _yearly_slot(d: date, now: datetime) -> Optional[int]:
  diff_years = now.year - d.year
  if 0 <= diff_years < 4:
    return 3 - diff_years
  return None

def _daily_labels(now: datetime) -> List[str]:
  today = now.date()
  return [_WEEKDAYS[(today - timedelta(days=6 - i)).weekday()] for i in range(7)]

def _weekly_labels(now: datetime) -> List[str]:
  return ["4 weeks ago", "3 weeks ago", "2 weeks ago", "This week"]

def _monthly_labels(now: datetime) -> List[str]:
  out = []
  for i in range(6):
    # months since year 0, stepping back (5 - i) months
    m = now.year * 12 + (now.month - 1) - (5 - i)
    out.append(_MONTHS[m % 12])
  return out

def _yearly_labels(now: datetime) -> List[str]:
  return [str(now.year - (3 - i)) for i in range(4)]

PERIODS: Dict[Granularity, PeriodSpec] = {
  Granularity.DAILY: PeriodSpec(Granularity.DAILY, 7, _daily_slot, _daily_labels, "Today"),
  Granularity.WEEKLY: PeriodSpec(Granularity.WEEKLY, 4, _weekly_slot, _weekly_labels, "This week"),
  Granularity.MONTHLY: PeriodSpec(Granularity.MONTHLY, 6, _monthly_slot, _monthly_labels, "This month"),
  Granularity.YEARLY: PeriodSpec(Granularity.YEARLY, 4, _yearly_slot, _yearly_labels, "This year"),
}

def as_moment(now) -> datetime:
  """Naive wall-clock datetime for `now` (a date means its midnight)."""
  if isinstance(now, datetime):
    return now.replace(tzinfo=None)
  if isinstance(now, date):
    return datetime.combine(now, time())
  raise TypeError(f"now must be a date or datetime, got {type(now).__name__}")

def period_spec(granularity) -> PeriodSpec:
  return PERIODS[Granularity.coerce(granularity)]

def assign_slots(d: date, now: datetime) -> Dict[Granularity, Optional[int]]:
  """Slot index per granularity for one date; each granularity is independent."""
  return {g: spec.slot_of(d, now) for g, spec in PERIODS.items()}
