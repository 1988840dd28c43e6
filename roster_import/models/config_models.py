from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the roster import tool.

These are the typed configuration values produced by config.loader.load_config
and consumed by the pipeline and services. ImportOptions is the explicit
switch set passed into validation instead of reading ambient state.
"""


@dataclass(frozen=True)
class ImportOptions:
    """Operator switches for a single import run.

    ``update_existing`` is accepted and forwarded to the remote store by the
    bulk-insert client, but no validation or payload rule consults it.
    """
    check_duplicate_bib: bool = True
    auto_age_group: bool = True
    update_existing: bool = False


@dataclass(frozen=True)
class ApiConfig:
    """Bulk-insert endpoint settings.

    Environment variables (ROSTER_API_URL / ROSTER_API_TOKEN) take precedence,
    see cli.__main__._build_client.
    """
    base_url: str = "http://localhost:3001"
    timeout: float = 30.0


@dataclass(frozen=True)
class RosterMappingConfig:
    """Configuration for a single roster CSV file."""
    file_name: str  # rosters のキー (ファイル名)
    category: str  # 距離/カテゴリ (payload の category)


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for the import process."""
    source_directory: str  # Directory to scan for roster CSV files
    campaign_id: str
    rosters: dict[str, RosterMappingConfig]  # file name -> mapping
    options: ImportOptions = field(default_factory=ImportOptions)
    timezone: str = "UTC"
    api: ApiConfig = field(default_factory=ApiConfig)
