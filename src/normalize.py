from __future__ import annotations
import math
import re
from datetime import date, datetime
from dateutil import parser as dup
from typing import Any, Iterable, List, Mapping, Optional

from core.models import (
  DEFAULT_CATEGORY,
  DEFAULT_TITLE,
  INCOME_CATEGORY,
  Transaction,
)
from logging_setup import get_logger

logger = get_logger("finance_tracker.normalize")

_YEAR = re.compile(r"\d{4}")

def _try_parse(s: str, now: datetime) -> Optional[date]:
  try:
    # fields missing from s fall back to Jan 1st of the current year
    return dup.parse(s, default=datetime(now.year, 1, 1)).date()
  except (ValueError, OverflowError, TypeError):
    return None

def parse_transaction_date(raw: str, now: datetime) -> Optional[date]:
  """Calendar date for a stored date string, or None when it can't be read.

  Strings without a 4-digit year ("06/10") are read as belonging to now's year.
  """
  if not raw:
    return None
  d = _try_parse(raw, now)
  if d is None or not _YEAR.search(raw):
    # "MM/DD" → "MM/DD/YYYY"
    d = _try_parse(f"{raw}/{now.year}", now)
  return d

def coerce_amount(x: Any) -> float:
  if x is None:
    return 0.0
  if isinstance(x, bool):
    return float(x)
  if isinstance(x, (int, float)):
    try:
      v = float(x)
    except OverflowError:
      return 0.0
  else:
    s = str(x).strip()
    if not s:
      return 0.0
    try:
      v = float(s)
    except ValueError:
      return 0.0
  return v if math.isfinite(v) else 0.0

def _date_str(x: Any, now: datetime) -> str:
  if isinstance(x, (datetime, date)):
    return x.isoformat()
  s = "" if x is None else str(x).strip()
  # missing dates count as "now"
  return s or now.isoformat()

def _to_transaction(rec: Mapping[str, Any], category: str, now: datetime) -> Transaction:
  return Transaction(
    id=str(rec.get("id", "")),
    title=str(rec.get("title") or "").strip() or DEFAULT_TITLE,
    amount=coerce_amount(rec.get("amount")),
    date=_date_str(rec.get("date"), now),
    category=category,
  )

def normalize_expense(rec: Mapping[str, Any], now: datetime) -> Transaction:
  category = str(rec.get("category") or "").strip() or DEFAULT_CATEGORY
  return _to_transaction(rec, category, now)

def normalize_income(rec: Mapping[str, Any], now: datetime) -> Transaction:
  return _to_transaction(rec, INCOME_CATEGORY, now)

def normalize_snapshot(records: Iterable[Mapping[str, Any]], now: datetime, income: bool = False) -> List[Transaction]:
  """Turn one feed snapshot (list of raw record mappings) into Transactions.

  A record that can't be read is logged and left out; the rest still count.
  """
  fn = normalize_income if income else normalize_expense
  out: List[Transaction] = []
  for r in records:
    try:
      out.append(fn(r, now))
    except Exception as e:
      logger.warning("Unreadable %s record %r; skipped: %s", "income" if income else "expense", r, e)
  return out

def dated(transactions: Iterable[Transaction], now: datetime) -> List[tuple]:
  """(transaction, date) pairs; records whose date can't be parsed are logged and dropped."""
  out = []
  skipped = 0
  for t in transactions:
    d = parse_transaction_date(t.date, now)
    if d is None:
      logger.warning("Invalid date for transaction id=%r title=%r date=%r; skipped", t.id, t.title, t.date)
      skipped += 1
      continue
    out.append((t, d))
  if skipped:
    logger.debug("skipped %d of %d transactions with unreadable dates", skipped, skipped + len(out))
  return out
