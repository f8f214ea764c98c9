"""
Run orchestration for the strong motion noise checks.

One run opens the hazard database, runs each check in turn and appends its
results to the check's report file. The checks are independent: a query or
report failure in one is logged and recorded, and the next check still runs.
Failing to reach the database aborts the whole run before any report is
touched.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from .config import Settings
from .database import HazardDatabase
from .exceptions import NoiseCheckError
from .noise_count import noise_count
from .ratio_diff import ratio_diff
from .reports import NOISE_COUNT_REPORT, RATIO_DIFF_REPORT, ReportStore

logger = logging.getLogger(__name__)


@dataclass
class RunContext:
    """Everything a check needs for one run."""

    db: HazardDatabase
    reports: ReportStore
    ran_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    noise_threshold: int = 16
    report_limit: int = 10

    @classmethod
    def from_settings(
        cls, db: HazardDatabase, settings: Settings, ran_at: Optional[datetime] = None
    ) -> "RunContext":
        return cls(
            db=db,
            reports=ReportStore(settings.output_dir),
            ran_at=ran_at or datetime.now(timezone.utc),
            noise_threshold=settings.noise_threshold,
            report_limit=settings.report_limit,
        )


@dataclass
class Check:
    """A named query whose results go to one report file."""

    name: str
    description: str
    report: str
    collect: Callable[[RunContext], Sequence]


@dataclass
class CheckOutcome:
    """What happened to one check during a run."""

    check: str
    rows: int = 0
    report: Optional[str] = None
    error: Optional[NoiseCheckError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RunResult:
    ran_at: datetime
    outcomes: List[CheckOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(outcome.ok for outcome in self.outcomes)

    @property
    def failed(self) -> List[CheckOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]


CHECKS: List[Check] = [
    Check(
        name="noise_count",
        description="Getting top noise counts for Strong Motion",
        report=NOISE_COUNT_REPORT,
        collect=lambda ctx: noise_count(
            ctx.db,
            ran_at=ctx.ran_at,
            threshold=ctx.noise_threshold,
            limit=ctx.report_limit,
        ),
    ),
    Check(
        name="ratio_diff",
        description="Getting PGA vertical/horizontal ratio difference for Strong Motion",
        report=RATIO_DIFF_REPORT,
        collect=lambda ctx: ratio_diff(
            ctx.db,
            ran_at=ctx.ran_at,
            limit=ctx.report_limit,
        ),
    ),
]


def run_check(check: Check, context: RunContext) -> CheckOutcome:
    """Run one check and append its rows; errors are captured, not raised."""
    outcome = CheckOutcome(check=check.name)
    logger.info(check.description)
    try:
        records = check.collect(context)
        path = context.reports.append(check.report, records)
    except NoiseCheckError as e:
        logger.error(f"ERROR: {check.name} check failed: {e}")
        outcome.error = e
        return outcome

    outcome.rows = len(records)
    outcome.report = str(path)
    return outcome


def run_checks(context: RunContext, checks: Optional[Sequence[Check]] = None) -> RunResult:
    """Run the checks in order against an already open database."""
    if checks is None:
        checks = CHECKS

    result = RunResult(ran_at=context.ran_at)
    for check in checks:
        result.outcomes.append(run_check(check, context))
    return result


def run(settings: Settings, ran_at: Optional[datetime] = None) -> RunResult:
    """
    Perform one complete run: connect, run every check, disconnect.

    Raises:
        DatabaseConnectionError: If the database cannot be opened or pinged
    """
    with HazardDatabase(settings) as db:
        context = RunContext.from_settings(db, settings, ran_at=ran_at)
        result = run_checks(context)

    if result.ok:
        logger.info(f"Noise checks completed at {result.ran_at.isoformat()}")
    else:
        failed = ", ".join(outcome.check for outcome in result.failed)
        logger.error(f"Noise checks finished with failures: {failed}")
    return result
