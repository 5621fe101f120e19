from __future__ import annotations
import csv
from pathlib import Path
from typing import Dict, List

from analytics.frames import summarize
from core.models import ChartFrame, Granularity

def ensure_dir(p: Path):
  p.mkdir(parents=True, exist_ok=True)

def write_frames_csv(data_dir: Path, frames: Dict[Granularity, ChartFrame]) -> List[Path]:
  ensure_dir(data_dir)
  written = []
  fieldnames = ["label", "expenses", "income"]
  for g, frame in frames.items():
    path = data_dir / f"period={g.value}.csv"
    with path.open("w", newline="", encoding="utf-8") as f:
      w = csv.DictWriter(f, fieldnames=fieldnames)
      w.writeheader()
      for label, exp, inc in frame.rows():
        w.writerow({"label": label, "expenses": f"{exp:.2f}", "income": f"{inc:.2f}"})
    written.append(path)
  return written

def write_analysis_md(reports_dir: Path, frames: Dict[Granularity, ChartFrame], selected: Granularity) -> Path:
  ensure_dir(reports_dir)
  path = reports_dir / "analysis.md"
  s = summarize(frames[selected])

  lines = []
  lines.append(f"# Analysis — {selected.value}\n")
  lines.append(f"- **Income ({s.display.lower()}):** ${s.income:,.2f}")
  lines.append(f"- **Expenses ({s.display.lower()}):** ${round(s.expenses):,.0f}")
  lines.append("")  # spacer

  for g, frame in frames.items():
    lines.append(f"## {g.value}\n")
    lines.append("| Period | Income | Expenses |")
    lines.append("|---|---:|---:|")
    for label, exp, inc in frame.rows():
      lines.append(f"| {label} | ${inc:,.2f} | ${exp:,.2f} |")
    lines.append("")

  path.write_text("\n".join(lines), encoding="utf-8")
  return path
