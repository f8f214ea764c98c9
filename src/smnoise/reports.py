"""
Append-only CSV reports for the noise checks.

Each check has its own report file which is created on the first run and
grows by one batch of rows per run. Nothing is ever rewritten, so the files
build up a longer record than the hazard database keeps.
"""

import logging
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Union

import pandas as pd

from .exceptions import ReportWriteError

logger = logging.getLogger(__name__)

NOISE_COUNT_REPORT = "noiseCount.csv"
RATIO_DIFF_REPORT = "ratioDiff.csv"


def _format_value(value: Any) -> Any:
    """Render booleans, timestamps and floats the way the reports expect."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, float):
        # shortest repr, but never in exponent form (2e-05 -> 0.00002)
        return format(Decimal(repr(value)), "f")
    return value


def render_rows(records: Sequence[Any]) -> str:
    """
    Render records as newline-terminated CSV lines.

    Records must provide ``COLUMNS`` and ``to_row()``. No header is written
    and missing values become empty fields.
    """
    if not records:
        return ""

    columns = list(records[0].COLUMNS)
    frame = pd.DataFrame(
        [[_format_value(v) for v in record.to_row()] for record in records],
        columns=columns,
    )
    return frame.to_csv(header=False, index=False, na_rep="", lineterminator="\n")


class ReportStore:
    """Directory holding the accumulated report files."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def path(self, filename: str) -> Path:
        return self.directory / filename

    def append(self, filename: str, records: Sequence[Any]) -> Path:
        """
        Append one batch of records to a report file.

        The batch is rendered in full first and written with a single call
        so a failure while rendering leaves the file untouched. The file is
        created on the first run even if that run has no rows.

        Args:
            filename: Report file name inside the store directory
            records: Records to append, in report order

        Returns:
            Path of the report file

        Raises:
            ReportWriteError: If the file cannot be created or appended to
        """
        path = self.path(filename)
        content = render_rows(records)

        # the file is created even when the batch is empty
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding="utf-8", newline="") as f:
                if content:
                    f.write(content)
        except OSError as e:
            raise ReportWriteError(f"Failed writing report {path}: {e}") from e

        logger.info(f"Appended {len(records)} rows to {path}")
        return path


def load_report(
    path: Union[str, Path], columns: Iterable[str], parse_timestamps: bool = True
) -> pd.DataFrame:
    """
    Read an accumulated report back into a DataFrame.

    Args:
        path: Report file
        columns: Column names, in file order (e.g. ``RatioRecord.COLUMNS``)
        parse_timestamps: Convert the timestamp column to datetimes

    Returns:
        DataFrame with one row per report line; empty if the file is missing
    """
    names: List[str] = list(columns)
    path = Path(path)
    if not path.exists() or path.stat().st_size == 0:
        return pd.DataFrame(columns=names)

    frame = pd.read_csv(
        path,
        header=None,
        names=names,
        dtype={"station": str, "blacklist": str, "channel": str},
        keep_default_na=False,
        na_values=[""],
    )
    if parse_timestamps and "timestamp" in frame.columns:
        frame["timestamp"] = pd.to_datetime(frame["timestamp"], utc=True, format="ISO8601")
    return frame


def report_batches(frame: pd.DataFrame) -> List[pd.DataFrame]:
    """Split a loaded report into its per-run batches, oldest first."""
    if frame.empty:
        return []
    return [batch for _, batch in frame.groupby("timestamp", sort=True)]


def latest_batch(frame: pd.DataFrame) -> Optional[pd.DataFrame]:
    """Rows appended by the most recent run, or None for an empty report."""
    batches = report_batches(frame)
    return batches[-1] if batches else None
