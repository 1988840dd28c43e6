from __future__ import annotations

from pathlib import Path

import pytest

from roster_import.config.loader import ConfigError, load_config
from roster_import.models.config_models import ImportOptions


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.source_directory == "./data"
    assert cfg.campaign_id == "bkk-marathon-2025"
    assert cfg.timezone == "Asia/Bangkok"
    assert cfg.rosters["marathon.csv"].category == "42K"
    assert cfg.rosters["funrun.csv"].file_name == "funrun.csv"
    assert cfg.options == ImportOptions(True, True, False)
    assert cfg.api.base_url == "http://api.test:3001"
    assert cfg.api.timeout == 5.0


def test_load_config_defaults(temp_workdir: Path):
    p = temp_workdir / "config" / "import.yml"
    p.write_text("source_directory: ./data\ncampaign_id: 42\nrosters: {}\n", encoding="utf-8")
    cfg = load_config(p)
    assert cfg.campaign_id == "42"
    assert cfg.timezone == "UTC"
    assert cfg.options == ImportOptions()
    assert cfg.api.base_url == "http://localhost:3001"
    assert cfg.api.timeout == 30.0
    assert cfg.rosters == {}


def test_load_config_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError):
        load_config(temp_workdir / "config" / "not_exists.yml")


def test_load_config_invalid_yaml(write_config: Path):
    write_config.write_text("rosters: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "invalid yaml" in str(e.value)


def test_load_config_missing_required(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("campaign_id: bkk-marathon-2025\n", "")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value) and "required property" in str(e.value)


def test_load_config_roster_without_category(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("    category: 5K\n", "    {}\n")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_extra_field(write_config: Path):
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_bad_option_type(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace(
        "check_duplicate_bib: true", "check_duplicate_bib: sometimes"
    )
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(write_config)


def test_load_config_unknown_timezone(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("Asia/Bangkok", "Mars/Olympus")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "unknown timezone" in str(e.value)
