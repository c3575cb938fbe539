"""
Failure report writer.
Serializes the failure sequence to the JSON audit dump and the quoted CSV report.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import csv
import json
import logging

import pandas as pd

from ..config import ReconConfig
from ..models.transaction import REPORT_COLUMNS, FailureRecord, ReconciliationSummary
from ..utils.exceptions import ReportGenerationError
from ..utils.files import atomic_write
from .excel_generator import ExcelReportGenerator

logger = logging.getLogger(__name__)


@dataclass
class ReportPaths:
    """Locations of the files written for one run."""

    json_path: Path
    csv_path: Path
    excel_path: Optional[Path] = None


class ReportWriter:
    """Writes every configured report representation for a failure list."""

    def __init__(self, config: ReconConfig):
        self.config = config
        self.output_config = config.output

    def write(
        self,
        failures: list[FailureRecord],
        summary: Optional[ReconciliationSummary] = None,
    ) -> ReportPaths:
        """
        Write the JSON dump, the CSV report and, if enabled, the workbook.

        Args:
            failures: Failure records in engine order
            summary: Run summary, required for the Excel workbook

        Returns:
            Paths of the written files

        Raises:
            ReportGenerationError: If any file cannot be written
        """
        paths = ReportPaths(
            json_path=self.write_json(failures, self.output_config.json_path),
            csv_path=self.write_csv(failures, self.output_config.csv_path),
        )

        if self.output_config.excel.enabled and summary is not None:
            generator = ExcelReportGenerator(self.config)
            paths.excel_path = generator.generate_report(
                summary, failures, self.output_config.excel_path
            )

        return paths

    def write_json(self, failures: list[FailureRecord], output_path: Path) -> Path:
        """Write the full audit dump, one object per failure."""
        logger.info(f"Writing JSON audit dump: {output_path}")
        payload = [f.to_dump_dict() for f in failures]

        try:
            return atomic_write(
                output_path,
                lambda fh: json.dump(payload, fh, indent=4, ensure_ascii=False),
            )
        except OSError as e:
            raise ReportGenerationError(f"Failed to write {output_path}: {e}") from e

    def write_csv(self, failures: list[FailureRecord], output_path: Path) -> Path:
        """Write the tabular report with every field quoted."""
        logger.info(f"Writing CSV report: {output_path}")
        df = pd.DataFrame(
            [f.to_report_row() for f in failures], columns=REPORT_COLUMNS, dtype=str
        )

        try:
            return atomic_write(
                output_path,
                lambda fh: df.to_csv(fh, index=False, quoting=csv.QUOTE_ALL),
            )
        except OSError as e:
            raise ReportGenerationError(f"Failed to write {output_path}: {e}") from e
