"""
Connection handling for the hazard database.
"""

import logging
from typing import Any, List, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine, RowMapping
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from .config import Settings
from .exceptions import DatabaseConnectionError, QueryError

logger = logging.getLogger(__name__)


class HazardDatabase:
    """
    A single read-only connection to the hazard database.

    The connection is checked with a round trip as soon as it is opened, so
    an unreachable or misconfigured database fails the run before any check
    is attempted. Nothing is retried.

    Example:
        >>> with HazardDatabase(settings) as db:
        ...     rows = db.execute(statement)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        engine: Optional[Engine] = None,
    ):
        if settings is None and engine is None:
            raise ValueError("Either settings or engine is required")
        self.settings = settings
        self._engine = engine
        self._owns_engine = engine is None
        self._connection: Optional[Connection] = None

    @property
    def description(self) -> str:
        """Host/database description safe for logging (no password)."""
        if self.settings is not None:
            return f"{self.settings.db_host}/{self.settings.db_name}"
        assert self._engine is not None
        return self._engine.url.render_as_string(hide_password=True)

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    def _create_engine(self) -> Engine:
        assert self.settings is not None
        try:
            return create_engine(
                self.settings.database_url(),
                poolclass=NullPool,
                connect_args={"connect_timeout": self.settings.connect_timeout},
            )
        except (SQLAlchemyError, ImportError) as e:
            raise DatabaseConnectionError(f"Problem with DB config: {e}") from e

    def connect(self) -> "HazardDatabase":
        """Open the connection and verify the database answers."""
        if self._connection is not None:
            return self

        if self._engine is None:
            self._engine = self._create_engine()

        logger.debug(f"Connecting to {self.description}")
        try:
            self._connection = self._engine.connect()
            self._connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            self.close()
            raise DatabaseConnectionError(
                f"Can't contact DB {self.description}: {e}"
            ) from e

        logger.info(f"Connected to {self.description}")
        return self

    def execute(self, statement: Any) -> List[RowMapping]:
        """Run a read-only statement and return its rows as mappings."""
        if self._connection is None:
            raise DatabaseConnectionError("Database connection is not open")

        try:
            return list(self._connection.execute(statement).mappings().all())
        except SQLAlchemyError as e:
            # an aborted transaction would fail every later statement too
            try:
                self._connection.rollback()
            except SQLAlchemyError as rollback_error:
                logger.warning(f"Rollback after failed query also failed: {rollback_error}")
            raise QueryError(f"Query failed: {e}") from e

    def close(self) -> None:
        """Release the connection (and the engine when this object built it)."""
        if self._connection is not None:
            try:
                self._connection.close()
            except SQLAlchemyError as e:
                logger.warning(f"Error closing connection to {self.description}: {e}")
            self._connection = None

        if self._owns_engine and self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def __enter__(self) -> "HazardDatabase":
        return self.connect()

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
