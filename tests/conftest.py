"""
Shared fixtures: an in-memory SQLite copy of the hazard relations.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from smnoise.database import HazardDatabase
from smnoise.reports import ReportStore
from smnoise.schema import SCHEMA, metadata, pga, pgv, source

RAN_AT = datetime(2026, 10, 18, 7, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    """SQLite engine with the impact schema mapped onto the default schema."""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        execution_options={"schema_translate_map": {SCHEMA: None}},
    )
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def hazard(engine):
    """Helper for loading stations and summary rows."""
    return HazardData(engine)


@pytest.fixture
def db(engine):
    """Open HazardDatabase backed by the SQLite engine."""
    with HazardDatabase(engine=engine) as database:
        yield database


@pytest.fixture
def store(tmp_path):
    return ReportStore(tmp_path / "reports")


@pytest.fixture
def restore_root_logging():
    """Remove handlers added to the root logger during a test."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)


class HazardData:
    """Inserts hazard rows; station keys are assigned in insertion order."""

    def __init__(self, engine):
        self.engine = engine
        self._keys = {}

    def station(self, name: str, blacklist: bool = False) -> int:
        sourcepk = len(self._keys) + 1
        with self.engine.begin() as conn:
            conn.execute(
                source.insert(),
                {"sourcepk": sourcepk, "station": name, "blacklist": blacklist},
            )
        self._keys[name] = sourcepk
        return sourcepk

    def readings(
        self, station: str, values: Iterable[float], vertical: bool, measurement: str = "pga"
    ) -> None:
        table = {"pga": pga, "pgv": pgv}[measurement]
        rows = [
            {"sourcepk": self._keys[station], measurement: value, "vertical": vertical}
            for value in values
        ]
        if rows:
            with self.engine.begin() as conn:
                conn.execute(table.insert(), rows)

    def count_rows(
        self, station: str, count: int, vertical: bool, measurement: str = "pga"
    ) -> None:
        self.readings(station, [0.001] * count, vertical, measurement)
