"""
PGA vertical versus horizontal ratio noise check.

Vertical and horizontal components of a working strong motion sensor see
peaks of a similar order. A station whose largest vertical reading is many
times its largest horizontal reading (or the other way round) is suspect.
"""

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from sqlalchemy import Numeric, Select, case, func, select
from sqlalchemy.sql import Subquery

from .database import HazardDatabase
from .exceptions import QueryError
from .models import RatioRecord
from .schema import measurement_table, source

logger = logging.getLogger(__name__)

DEFAULT_MEASUREMENT = "pga"
DEFAULT_LIMIT = 10
PRECISION = 8
READING = Numeric(asdecimal=False)


def _axis_maximum(measurement: str, vertical: bool, name: str) -> Subquery:
    """Largest reading per source for one axis, rounded to PRECISION places."""
    table = measurement_table(measurement)
    value = table.c[measurement]
    return (
        select(
            table.c.sourcepk,
            func.round(func.max(value), PRECISION, type_=READING).label("max_value"),
        )
        .where(table.c.vertical.is_(vertical))
        .group_by(table.c.sourcepk)
        .subquery(name)
    )


def build_ratio_query(
    measurement: str = DEFAULT_MEASUREMENT, limit: int = DEFAULT_LIMIT
) -> Select:
    """
    Build the vertical/horizontal ratio query for one measurement type.

    Only sources with both vertical and horizontal readings get a ratio. The
    station directory is joined last so the remaining stations still show
    up, with null values, after every station that has one.

    Args:
        measurement: Summary table to inspect ('pga' or 'pgv')
        limit: Maximum number of rows returned

    Returns:
        Statement selecting station, blacklist, ratio, max_vertical and
        max_horizontal
    """
    max_vert = _axis_maximum(measurement, True, "max_vert")
    max_hori = _axis_maximum(measurement, False, "max_hori")

    vert = max_vert.c.max_value
    hori = max_hori.c.max_value
    # a zero maximum leaves the ratio undefined (null)
    ratio = case(
        (vert > hori, vert / func.nullif(hori, 0)),
        else_=hori / func.nullif(vert, 0),
    )

    paired = (
        select(
            max_vert.c.sourcepk,
            func.round(ratio, PRECISION, type_=READING).label("ratio"),
            vert.label("max_vertical"),
            hori.label("max_horizontal"),
        )
        .select_from(max_vert.join(max_hori, max_vert.c.sourcepk == max_hori.c.sourcepk))
        .subquery("paired")
    )

    return (
        select(
            source.c.station,
            source.c.blacklist,
            paired.c.ratio,
            paired.c.max_vertical,
            paired.c.max_horizontal,
        )
        .select_from(source.outerjoin(paired, source.c.sourcepk == paired.c.sourcepk))
        .order_by(paired.c.ratio.desc().nulls_last(), source.c.station)
        .limit(limit)
    )


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def ratio_diff(
    db: HazardDatabase,
    ran_at: Optional[datetime] = None,
    measurement: str = DEFAULT_MEASUREMENT,
    limit: int = DEFAULT_LIMIT,
) -> List[RatioRecord]:
    """
    Get the stations with the most extreme vertical/horizontal ratio.

    Args:
        db: Open database connection
        ran_at: Timestamp stamped on every record (defaults to now, UTC)
        measurement: Summary table to inspect ('pga' or 'pgv')
        limit: Maximum number of records returned

    Returns:
        Records ordered by ratio, highest first, stations without a ratio last
    """
    if ran_at is None:
        ran_at = datetime.now(timezone.utc)

    rows = db.execute(build_ratio_query(measurement=measurement, limit=limit))

    try:
        records = [
            RatioRecord(
                timestamp=ran_at,
                station=row["station"],
                blacklist=bool(row["blacklist"]),
                ratio=_optional_float(row["ratio"]),
                max_vertical=_optional_float(row["max_vertical"]),
                max_horizontal=_optional_float(row["max_horizontal"]),
            )
            for row in rows
        ]
    except (KeyError, TypeError, ValueError) as e:
        raise QueryError(f"Error scanning ratio rows: {e}") from e

    logger.debug(f"Ratio check on {measurement} returned {len(records)} rows")
    return records
