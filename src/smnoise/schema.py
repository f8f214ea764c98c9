"""
Relations read from the hazard database.

The hazard database summarises strong motion samples into hourly pga/pgv
rows per source. Values are numeric, which round(value, places) requires.
Only the columns the checks read are declared here.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, MetaData, Numeric, String, Table

SCHEMA = "impact"

metadata = MetaData(schema=SCHEMA)

source = Table(
    "source",
    metadata,
    Column("sourcepk", Integer, primary_key=True),
    Column("station", String, nullable=False),
    Column("blacklist", Boolean, nullable=False, default=False),
)

pga = Table(
    "pga",
    metadata,
    Column("sourcepk", Integer, ForeignKey(source.c.sourcepk), nullable=False),
    Column("pga", Numeric(asdecimal=False), nullable=False),
    Column("vertical", Boolean, nullable=False),
)

pgv = Table(
    "pgv",
    metadata,
    Column("sourcepk", Integer, ForeignKey(source.c.sourcepk), nullable=False),
    Column("pgv", Numeric(asdecimal=False), nullable=False),
    Column("vertical", Boolean, nullable=False),
)

# measurement type -> summary table; the value column shares the table name
MEASUREMENTS = {
    "pga": pga,
    "pgv": pgv,
}


def measurement_table(measurement: str) -> Table:
    """Look up the summary table for a measurement type ('pga' or 'pgv')."""
    try:
        return MEASUREMENTS[measurement]
    except KeyError:
        raise ValueError(
            f"Unknown measurement type {measurement!r}, expected one of {sorted(MEASUREMENTS)}"
        ) from None
