"""
Run settings for the strong motion noise checks.

Values are read from the environment (prefix ``HAZARD_``) and, optionally,
from a ``.env`` file. Only the password is required::

    HAZARD_PASSWD=...            # hazard_r password
    HAZARD_DB_HOST=...           # override the read replica host
    HAZARD_OUTPUT_DIR=/var/lib/smnoise
"""

import tempfile
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from .exceptions import ConfigurationError

DEFAULT_DB_HOST = "geonet-api-ng-read.ccuclj9uvil4.ap-southeast-2.rds.amazonaws.com"
PASSWORD_ENV = "HAZARD_PASSWD"


class Settings(BaseSettings):
    """Connection parameters and report locations for one run."""

    model_config = SettingsConfigDict(env_prefix="HAZARD_", extra="ignore")

    passwd: SecretStr

    db_host: str = DEFAULT_DB_HOST
    db_port: int = 5432
    db_name: str = "hazard"
    db_user: str = "hazard_r"
    db_sslmode: str = "disable"
    connect_timeout: int = 30

    output_dir: Path = Path(tempfile.gettempdir())

    noise_threshold: int = 16
    report_limit: int = 10

    def database_url(self) -> URL:
        """Build the SQLAlchemy URL from the individual connection fields."""
        return URL.create(
            "postgresql+psycopg2",
            username=self.db_user,
            password=self.passwd.get_secret_value(),
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
            query={"sslmode": self.db_sslmode},
        )


def load_settings(
    env_file: Optional[Union[str, Path]] = None, **overrides: Any
) -> Settings:
    """
    Load settings from the environment.

    Args:
        env_file: Optional ``.env`` file read in addition to the environment
        **overrides: Explicit values that take precedence over both

    Raises:
        ConfigurationError: If the password is missing or a value is invalid
    """
    try:
        return Settings(_env_file=env_file, **overrides)
    except ValidationError as e:
        missing = [
            err["loc"][0] for err in e.errors() if err["type"] == "missing"
        ]
        if "passwd" in missing:
            raise ConfigurationError(f"{PASSWORD_ENV} not set for environment.") from e
        raise ConfigurationError(f"Invalid settings: {e}") from e
