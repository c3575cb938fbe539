"""
Batch reconciliation pass.
Loads both sources, runs the engine and writes the reports.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional
import logging

from .config import ReconConfig
from .loaders import CompanionCSVLoader, PrimaryXMLLoader
from .models.transaction import (
    CompanionRecord,
    FailureRecord,
    ReconciliationSummary,
    TransactionRecord,
)
from .reconciliation import ReconciliationEngine
from .reports import ReportPaths, ReportWriter

logger = logging.getLogger(__name__)

ALL_VERIFIED_MESSAGE = "All transactions have been verified."
FAILURES_MESSAGE = "Failed transactions detected. See the report: {path}"


@dataclass
class RunResult:
    """Outcome of one batch pass."""

    failures: list[FailureRecord]
    summary: ReconciliationSummary
    report_paths: Optional[ReportPaths] = None

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)


def load_sources(
    config: ReconConfig, primary_path: Path, companion_path: Path
) -> tuple[list[TransactionRecord], list[CompanionRecord]]:
    """
    Load both sources concurrently and wait for both to finish.

    Loader errors propagate to the caller.
    """
    primary_loader = PrimaryXMLLoader(config)
    companion_loader = CompanionCSVLoader(config)

    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="loader") as pool:
        primary_future = pool.submit(primary_loader.load, primary_path)
        companion_future = pool.submit(companion_loader.load, companion_path)
        return primary_future.result(), companion_future.result()


def verdict_message(result: RunResult, config: ReconConfig) -> str:
    """One-line human-readable outcome of a pass."""
    if not result.has_failures:
        return ALL_VERIFIED_MESSAGE
    path = (
        result.report_paths.csv_path
        if result.report_paths
        else config.output.csv_path
    )
    return FAILURES_MESSAGE.format(path=path)


def run_reconciliation(
    config: ReconConfig,
    primary_path: Path,
    companion_path: Path,
    dry_run: bool = False,
) -> RunResult:
    """
    Run a full reconciliation pass.

    Args:
        config: Application configuration
        primary_path: Primary XML transaction file
        companion_path: Companion CSV file
        dry_run: Skip writing the reports

    Returns:
        RunResult with failures, summary and written report paths

    Raises:
        ReconciliationError: Loader or report errors abort the pass
    """
    primary, companion = load_sources(config, primary_path, companion_path)

    start_time = datetime.now()
    engine = ReconciliationEngine(config)
    failures = engine.reconcile(primary, companion)
    processing_time = (datetime.now() - start_time).total_seconds()

    summary = engine.generate_summary(
        primary=primary,
        companion=companion,
        failures=failures,
        primary_filename=primary_path.name,
        companion_filename=companion_path.name,
        processing_time=processing_time,
    )

    result = RunResult(failures=failures, summary=summary)

    if not dry_run:
        result.report_paths = ReportWriter(config).write(failures, summary)

    logger.info(verdict_message(result, config))
    return result
