from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from core.models import Granularity

@dataclass
class UserCfg:
  id: Optional[str]

@dataclass
class PathsCfg:
  inputs_dir: Path
  data_dir: Path
  reports_dir: Path
  config_dir: Path

@dataclass
class AnalysisCfg:
  period: Granularity
  file_glob: str

@dataclass
class LoggingCfg:
  level: str

@dataclass
class UnifiedConfig:
  user: UserCfg
  paths: PathsCfg
  analysis: AnalysisCfg
  logging: LoggingCfg

def load_unified_config(repo_root: Path) -> UnifiedConfig:
    """Load config/settings.yaml."""
    cfg_dir = repo_root / "config"
    yaml_cfg = cfg_dir / "settings.yaml"

    # Require PyYAML
    try:
        import yaml  # type: ignore
    except ImportError as e:
        raise ImportError(
            "PyYAML is required to read config/settings.yaml. Install with: pip install pyyaml"
        ) from e

    if not yaml_cfg.exists():
        raise FileNotFoundError(
            f"Missing {yaml_cfg}. Create it from the settings.yaml shipped with the repo."
        )

    y: Dict[str, Any] = yaml.safe_load(yaml_cfg.read_text(encoding="utf-8")) or {}

    # minimal structure checks (fail fast with clear messages)
    for section in ["user", "paths"]:
        if section not in y:
            raise KeyError(f"settings.yaml is missing the '{section}' section")

    user = y["user"] or {}
    paths = y["paths"] or {}
    analysis = y.get("analysis") or {}
    log = y.get("logging") or {}

    user_id = user.get("id")

    return UnifiedConfig(
        user=UserCfg(id=None if user_id is None else str(user_id)),
        paths=PathsCfg(
            inputs_dir=(repo_root / paths.get("inputs_dir", "inputs")).resolve(),
            data_dir=(repo_root / paths.get("data_dir", "data")).resolve(),
            reports_dir=(repo_root / paths.get("reports_dir", "reports")).resolve(),
            config_dir=cfg_dir.resolve(),
        ),
        analysis=AnalysisCfg(
            period=Granularity.coerce(analysis.get("period", Granularity.MONTHLY.value)),
            file_glob=str(analysis.get("file_glob", "*.csv")),
        ),
        logging=LoggingCfg(level=str(log.get("level", "INFO"))),
    )
