# Shared pytest fixtures
from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path

import pytest

from roster_import.logging.init import reset_logging

TODAY = date(2025, 6, 15)


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for var in ("ROSTER_API_URL", "ROSTER_API_TOKEN", "DISABLE_API_SUBMIT"):
        monkeypatch.delenv(var, raising=False)
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def today() -> date:
    return TODAY


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
campaign_id: bkk-marathon-2025
rosters:
  marathon.csv:
    category: 42K
  funrun.csv:
    category: 5K
options:
  check_duplicate_bib: true
  auto_age_group: true
  update_existing: false
timezone: Asia/Bangkok
api:
  base_url: http://api.test:3001
  timeout: 5
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def sample_roster_csv() -> str:
    # row1 READY, row2 duplicate of row1, row3 invalid gender, row4 missing chip
    return (
        "BIB,FirstName,LastName,Gender,BirthDate,Nationality,ChipCode\r\n"
        "101,Somchai,Jaidee,M,1990-01-01,THA,CHIP101\r\n"
        "101,Anan,Sukjai,M,1985-03-02,THA,CHIP999\r\n"
        "102,A,B,X,,,\r\n"
        "103,Malee,,F,2010-07-01,,\r\n"
    )
