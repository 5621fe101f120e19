from __future__ import annotations
from pathlib import Path
from typing import List, Dict, Any, Tuple
import pandas as pd

from core.models import INCOME_CATEGORY

_ID_COLS = ["id", "transaction id", "doc id"]
_TITLE_COLS = ["title", "description", "name"]
_AMOUNT_COLS = ["amount", "total", "value"]
_DATE_COLS = ["date", "created on"]
_CATEGORY_COLS = ["category"]

def _to_str(x) -> str:
    if x is None or pd.isna(x):
        return ""
    return str(x)

def _find_col(df: pd.DataFrame, names: list[str]) -> str | None:
    low = {c.strip().lower(): c for c in df.columns if isinstance(c, str)}
    for n in names:
        if n in low:
            return low[n]
    return None

def _read_frame(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return pd.read_csv(path, dtype=object, keep_default_na=True)
    if suffix == ".xls":
        return pd.read_excel(path, dtype=object, engine="xlrd")
    raise ValueError(f"Unsupported transactions file type: {path.name}")

def load_records(path: Path) -> List[Dict[str, Any]]:
    """Read an exported transactions file into raw feed records.

    Cells that are empty are left out of the record so the feed defaults
    (title "Untitled", amount 0, date "now") apply downstream.
    """
    df = _read_frame(path)

    id_col       = _find_col(df, _ID_COLS)
    title_col    = _find_col(df, _TITLE_COLS)
    amount_col   = _find_col(df, _AMOUNT_COLS)
    date_col     = _find_col(df, _DATE_COLS)
    category_col = _find_col(df, _CATEGORY_COLS)

    if not amount_col or not date_col:
        raise ValueError(f"Missing expected columns in {path.name}. Found: {list(df.columns)}")

    out: List[Dict[str, Any]] = []
    for i, row in df.iterrows():
        rec: Dict[str, Any] = {}
        for key, col in (("id", id_col), ("title", title_col), ("amount", amount_col),
                         ("date", date_col), ("category", category_col)):
            if col is None:
                continue
            val = _to_str(row.get(col)).strip()
            if val:
                rec[key] = val
        # skip truly empty rows
        if not rec:
            continue
        rec.setdefault("id", f"{path.stem}-{i}")
        out.append(rec)
    return out

def split_streams(records: List[Dict[str, Any]]) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """(expense records, income records); income is anything categorised "Income"."""
    expenses: List[Dict[str, Any]] = []
    income: List[Dict[str, Any]] = []
    for r in records:
        if str(r.get("category", "")).strip().lower() == INCOME_CATEGORY.lower():
            income.append(r)
        else:
            expenses.append(r)
    return expenses, income
