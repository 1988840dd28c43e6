from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import ApiConfig, ImportConfig, ImportOptions, RosterMappingConfig

"""Config loader.

Responsibilities:
- Load YAML config/import.yml
- Validate against the bundled JSON schema (config_schema.json)
- Apply defaults (timezone=UTC, options all default, api defaults)
"""

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails schema validation.
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _validate_timezone(name: str) -> str:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"unknown timezone: {name}") from e
    return name


def load_config(path: Path) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)

    opts_raw = data.get("options") or {}
    options = ImportOptions(
        check_duplicate_bib=opts_raw.get("check_duplicate_bib", True),
        auto_age_group=opts_raw.get("auto_age_group", True),
        update_existing=opts_raw.get("update_existing", False),
    )
    api_raw = data.get("api") or {}
    api = ApiConfig(
        base_url=api_raw.get("base_url", ApiConfig.base_url),
        timeout=float(api_raw.get("timeout", ApiConfig.timeout)),
    )
    rosters = {
        name: RosterMappingConfig(file_name=name, category=m["category"])
        for name, m in data["rosters"].items()
    }
    return ImportConfig(
        source_directory=data["source_directory"],
        campaign_id=str(data["campaign_id"]),
        rosters=rosters,
        options=options,
        timezone=_validate_timezone(data.get("timezone", "UTC")),
        api=api,
    )
