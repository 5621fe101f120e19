from __future__ import annotations
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Optional

from config.loader import UnifiedConfig
from core.models import ChartFrame, Granularity
from feeds.live import AnalysisEngine, InMemoryFeed
from ingest.transactions import load_records, split_streams
from logging_setup import get_logger
from reports import write_analysis_md, write_frames_csv

logger = get_logger("finance_tracker.pipeline")

LOCAL_USER = "local"

def _find_latest_input(inputs_dir: Path, pattern: str) -> Path:
    candidates = sorted([p for p in inputs_dir.glob(pattern) if p.is_file()],
                        key=lambda p: p.stat().st_mtime, reverse=True)
    if not candidates:
        raise FileNotFoundError(f"No transaction files matching {pattern!r} found in {inputs_dir}")
    return candidates[0]

def run_pipeline(cfg: UnifiedConfig, now: Optional[datetime] = None, period=None) -> Dict[Granularity, ChartFrame]:
  # 1) Read the newest export
  path = _find_latest_input(cfg.paths.inputs_dir, cfg.analysis.file_glob)
  records = load_records(path)
  expenses, income = split_streams(records)
  logger.info("Loaded %s: %d expense and %d income records", path.name, len(expenses), len(income))

  # 2) Feed both streams to an engine for the configured user
  user_id = cfg.user.id or LOCAL_USER
  feed = InMemoryFeed()
  feed.publish_expenses(user_id, expenses)
  feed.publish_income(user_id, income)

  clock: Callable[[], datetime] = (lambda: now) if now is not None else datetime.now
  selected = Granularity.coerce(period) if period is not None else cfg.analysis.period

  with AnalysisEngine(feed, user_id, clock=clock, period=selected) as engine:
    frames = engine.frames

  # 3) Reports
  write_frames_csv(cfg.paths.data_dir, frames)
  md = write_analysis_md(cfg.paths.reports_dir, frames, selected)
  logger.info("Wrote %s", md)
  return frames
