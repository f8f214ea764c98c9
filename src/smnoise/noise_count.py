"""
Constant reporting count noise check.

A healthy station channel contributes a bounded number of summary rows to an
hourly window. Channels that report far more often than that are usually
triggering on noise, so the channels with the most rows above the threshold
are listed first.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Select, case, func, select, union
from sqlalchemy.sql.expression import CompoundSelect

from .database import HazardDatabase
from .exceptions import QueryError
from .models import NoiseCountRecord
from .schema import MEASUREMENTS, source

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 16
DEFAULT_LIMIT = 10


def _channel_counts(measurement: str, threshold: int) -> Select:
    """Summary row counts per station channel for one measurement type."""
    table = MEASUREMENTS[measurement]
    channel = case(
        (table.c.vertical.is_(True), f"{measurement}-true"),
        (table.c.vertical.is_(False), f"{measurement}-false"),
    )
    row_count = func.count(table.c.sourcepk)

    # every station is listed; stations without rows count 0 and drop out
    return (
        select(
            source.c.station,
            source.c.blacklist,
            channel.label("channel"),
            row_count.label("noise_count"),
        )
        .select_from(source.outerjoin(table, source.c.sourcepk == table.c.sourcepk))
        .group_by(source.c.station, source.c.blacklist, table.c.vertical)
        .having(row_count > threshold)
    )


def build_noise_count_query(
    threshold: int = DEFAULT_THRESHOLD, limit: int = DEFAULT_LIMIT
) -> Select:
    """
    Build the ranked noise count query across all measurement types.

    Args:
        threshold: Counts must be strictly greater than this to be reported
        limit: Maximum number of rows returned

    Returns:
        Statement selecting station, blacklist, channel and noise_count
    """
    combined: CompoundSelect = union(
        *(_channel_counts(measurement, threshold) for measurement in MEASUREMENTS)
    )
    counts = combined.subquery("counts")

    return (
        select(counts)
        .order_by(
            counts.c.noise_count.desc(),
            counts.c.station,
            counts.c.channel,
        )
        .limit(limit)
    )


def noise_count(
    db: HazardDatabase,
    ran_at: Optional[datetime] = None,
    threshold: int = DEFAULT_THRESHOLD,
    limit: int = DEFAULT_LIMIT,
) -> List[NoiseCountRecord]:
    """
    Get the top noise counts for strong motion channels.

    Args:
        db: Open database connection
        ran_at: Timestamp stamped on every record (defaults to now, UTC)
        threshold: Counts must be strictly greater than this to be reported
        limit: Maximum number of records returned

    Returns:
        Records ordered by count, highest first
    """
    if ran_at is None:
        ran_at = datetime.now(timezone.utc)

    rows = db.execute(build_noise_count_query(threshold=threshold, limit=limit))

    try:
        records = [
            NoiseCountRecord(
                timestamp=ran_at,
                station=row["station"],
                blacklist=bool(row["blacklist"]),
                channel=row["channel"],
                count=int(row["noise_count"]),
            )
            for row in rows
        ]
    except (KeyError, TypeError, ValueError) as e:
        raise QueryError(f"Error scanning noise count rows: {e}") from e

    logger.debug(f"Noise count check returned {len(records)} rows")
    return records
