from pathlib import Path
import argparse
import sys

REPO = Path(__file__).resolve().parents[1]
SRC = REPO / "src"
if str(SRC) not in sys.path:
  sys.path.insert(0, str(SRC))

from config.loader import load_unified_config
from core.models import Granularity
from logging_setup import configure_logging
from pipeline import run_pipeline
from analytics.frames import summarize

def main(argv=None, repo: Path = REPO):
  ap = argparse.ArgumentParser(description="Bucket exported transactions into daily/weekly/monthly/yearly charts.")
  ap.add_argument("--period", choices=[g.value for g in Granularity], help="override analysis.period from settings.yaml")
  args = ap.parse_args(argv)

  cfg = load_unified_config(repo)
  configure_logging(cfg.logging.level)
  selected = Granularity.coerce(args.period) if args.period else cfg.analysis.period

  frames = run_pipeline(cfg=cfg, period=selected)
  s = summarize(frames[selected])
  print(f"{selected.value} — {s.display}: income ${s.income:,.2f}, expenses ${round(s.expenses):,.0f}")

if __name__ == "__main__":
  main()
