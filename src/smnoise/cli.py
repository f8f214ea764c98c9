#!/usr/bin/env python3
"""
Command line entry point for the strong motion noise checks.

Meant to be run once an hour by cron (the hazard database only keeps an
hour of summarised pga/pgv values). Needs the hazard_r password in
HAZARD_PASSWD and network access to the hazard database.
"""

import argparse
import logging
import sys
import tempfile
from pathlib import Path
from typing import List, Optional

from .config import load_settings
from .exceptions import ConfigurationError, DatabaseConnectionError
from .runner import run

LOG_FORMAT = "%(asctime)s %(filename)s:%(lineno)d: %(message)s"
DEFAULT_LOG_FILE = Path(tempfile.gettempdir()) / "strong_motion_noise_check.log"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2

logger = logging.getLogger(__name__)


def setup_logging(log_file: Path, debug: bool = False) -> None:
    """Send all log records to the run log file."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smnoise",
        description="Rank strong motion stations likely to have data quality problems",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--output-dir",
        "-o",
        type=Path,
        help="Directory for noiseCount.csv and ratioDiff.csv (default: system temp dir)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=DEFAULT_LOG_FILE,
        help=f"Run log file (default: {DEFAULT_LOG_FILE})",
    )
    parser.add_argument("--env-file", type=Path, help="Optional .env file with HAZARD_* settings")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable DEBUG logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the noise checks once; returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        setup_logging(args.log_file, debug=args.debug)
    except OSError as e:
        print(f"Failed initializing logfile: {e}", file=sys.stderr)
        return EXIT_FAILURE

    overrides = {}
    if args.output_dir is not None:
        overrides["output_dir"] = args.output_dir

    try:
        settings = load_settings(env_file=args.env_file, **overrides)
    except ConfigurationError as e:
        logger.error(f"ERROR: {e}")
        return EXIT_CONFIG

    try:
        result = run(settings)
    except DatabaseConnectionError as e:
        logger.error(f"ERROR: {e}")
        return EXIT_FAILURE
    except Exception as e:
        logger.exception(f"ERROR: noise check run failed: {e}")
        return EXIT_FAILURE

    return EXIT_OK if result.ok else EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
