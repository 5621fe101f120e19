from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

INCOME_CATEGORY = "Income"
DEFAULT_TITLE = "Untitled"
DEFAULT_CATEGORY = "Uncategorized"

class Granularity(str, Enum):
  # order is the selector index order
  DAILY = "Daily"
  WEEKLY = "Weekly"
  MONTHLY = "Monthly"
  YEARLY = "Yearly"

  @classmethod
  def coerce(cls, value) -> "Granularity":
    """Accept a Granularity, its name/value ("monthly", "Monthly") or a 0..3 index."""
    if isinstance(value, cls):
      return value
    if isinstance(value, int) and not isinstance(value, bool):
      members = list(cls)
      if 0 <= value < len(members):
        return members[value]
      raise ValueError(f"Granularity index out of range: {value}")
    if isinstance(value, str):
      key = value.strip().lower()
      for g in cls:
        if key in (g.value.lower(), g.name.lower()):
          return g
    raise ValueError(f"Unknown granularity: {value!r}")

@dataclass(frozen=True)
class Transaction:
  id: str
  title: str
  amount: float       # sign preserved; expenses keep amount > 0 only
  date: str           # raw, format not guaranteed ("MM/DD", ISO, ...)
  category: str

  @property
  def is_income(self) -> bool:
    return self.category == INCOME_CATEGORY

@dataclass(frozen=True)
class ChartFrame:
  granularity: Granularity
  labels: Tuple[str, ...]
  expenses: Tuple[float, ...]
  income: Tuple[float, ...]

  def __post_init__(self):
    n = len(self.labels)
    if len(self.expenses) != n or len(self.income) != n:
      raise ValueError(
        f"{self.granularity.value} frame is misaligned: "
        f"{n} labels, {len(self.expenses)} expenses, {len(self.income)} income"
      )

  def rows(self):
    """(label, expenses, income) per slot, oldest first."""
    return list(zip(self.labels, self.expenses, self.income))

  def to_dict(self) -> dict:
    return {
      "labels": list(self.labels),
      "expenses": list(self.expenses),
      "income": list(self.income),
    }

@dataclass(frozen=True)
class PeriodSummary:
  granularity: Granularity
  display: str        # "Today" | "This week" | "This month" | "This year"
  expenses: float = 0.0
  income: float = 0.0
