"""
Strong motion noise checks for the hazard database.

Ranks strong motion stations most likely to have data quality problems and
appends the rankings to CSV reports on every (hourly) run.
"""

try:
    from importlib import metadata

    __version__ = metadata.version("strong-motion-noise-checks")
except Exception:
    __version__ = "unknown"

from .config import Settings, load_settings
from .database import HazardDatabase
from .exceptions import (
    ConfigurationError,
    DatabaseConnectionError,
    NoiseCheckError,
    QueryError,
    ReportWriteError,
)
from .models import NoiseCountRecord, RatioRecord
from .noise_count import build_noise_count_query, noise_count
from .ratio_diff import build_ratio_query, ratio_diff
from .reports import (
    NOISE_COUNT_REPORT,
    RATIO_DIFF_REPORT,
    ReportStore,
    load_report,
)
from .runner import CHECKS, CheckOutcome, RunContext, RunResult, run, run_checks

__all__ = [
    "Settings",
    "load_settings",
    "HazardDatabase",
    "NoiseCheckError",
    "ConfigurationError",
    "DatabaseConnectionError",
    "QueryError",
    "ReportWriteError",
    "NoiseCountRecord",
    "RatioRecord",
    "build_noise_count_query",
    "noise_count",
    "build_ratio_query",
    "ratio_diff",
    "NOISE_COUNT_REPORT",
    "RATIO_DIFF_REPORT",
    "ReportStore",
    "load_report",
    "CHECKS",
    "CheckOutcome",
    "RunContext",
    "RunResult",
    "run",
    "run_checks",
]
