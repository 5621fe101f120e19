import importlib.util
import textwrap
from datetime import date
from pathlib import Path

import pytest

CLI_PATH = Path(__file__).resolve().parents[1] / "scripts" / "cli.py"


@pytest.fixture
def cli(monkeypatch):
    spec = importlib.util.spec_from_file_location("finance_tracker_cli", CLI_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    # keep the package logger untouched for the rest of the suite
    monkeypatch.setattr(module, "configure_logging", lambda *a, **k: None)
    return module


@pytest.fixture
def repo(tmp_path):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "settings.yaml").write_text(
        textwrap.dedent(
            """
            user:
              id: u1
            paths:
              inputs_dir: inputs
              data_dir: data
              reports_dir: reports
            analysis:
              period: Weekly
            """
        ),
        encoding="utf-8",
    )
    (tmp_path / "inputs").mkdir()
    # always inside the current year
    jan1 = date(date.today().year, 1, 1).isoformat()
    (tmp_path / "inputs" / "export.csv").write_text(
        "id,title,amount,date,category\n"
        f"e1,Rent,40.4,{jan1},Housing\n"
        f"i1,Salary,3000,{jan1},Income\n",
        encoding="utf-8",
    )
    return tmp_path


def test_period_flag_overrides_settings(cli, repo, capsys):
    cli.main(["--period", "Yearly"], repo=repo)
    out = capsys.readouterr().out
    assert out.strip() == "Yearly — This year: income $3,000.00, expenses $40"
    md = (repo / "reports" / "analysis.md").read_text(encoding="utf-8")
    assert md.startswith("# Analysis — Yearly")


def test_settings_period_used_without_flag(cli, repo, capsys):
    cli.main([], repo=repo)
    out = capsys.readouterr().out
    assert out.startswith("Weekly — This week: income $")


def test_unknown_period_rejected(cli, repo):
    with pytest.raises(SystemExit):
        cli.main(["--period", "Hourly"], repo=repo)
