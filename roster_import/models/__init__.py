"""Domain models for the roster import tool.

This package contains the domain model classes used throughout the pipeline
and the services built on top of it.
"""

from .column_map import ColumnMap
from .config_models import ApiConfig, ImportConfig, ImportOptions, RosterMappingConfig
from .participant import Gender, ParsedRow, RowStatus
from .processing_result import FileStat, ParseResult, ProcessingResult, SubmitResult

__all__ = [
    # Configuration models
    "ApiConfig",
    "ImportConfig",
    "ImportOptions",
    "RosterMappingConfig",
    # Pipeline models
    "ColumnMap",
    "Gender",
    "ParsedRow",
    "RowStatus",
    # Result models
    "FileStat",
    "ParseResult",
    "ProcessingResult",
    "SubmitResult",
]
