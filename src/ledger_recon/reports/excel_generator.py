"""
Excel report generator for reconciliation results.
Creates a workbook with a summary sheet and the failed transactions.
"""

from datetime import datetime
from pathlib import Path
import logging

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Border, Side
from openpyxl.worksheet.worksheet import Worksheet

from ..config import ReconConfig
from ..models.transaction import (
    REPORT_COLUMNS,
    FailureReason,
    FailureRecord,
    ReconciliationSummary,
)
from ..utils.exceptions import ReportGenerationError
from ..utils.files import atomic_write

logger = logging.getLogger(__name__)

# Style definitions
HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True)
PASS_FILL = PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid")
MISMATCH_FILL = PatternFill(start_color="FFEB9C", end_color="FFEB9C", fill_type="solid")
FAIL_FILL = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)

REASON_FILLS = {
    FailureReason.BALANCE_MISMATCH: MISMATCH_FILL,
    FailureReason.MALFORMED_RECORD: MISMATCH_FILL,
    FailureReason.DUPLICATE_REFERENCE: FAIL_FILL,
    FailureReason.MISSING_IN_COMPANION: FAIL_FILL,
}


class ExcelReportGenerator:
    """Generates the Excel reconciliation workbook."""

    def __init__(self, config: ReconConfig):
        """
        Initialize the report generator.

        Args:
            config: Application configuration
        """
        self.config = config
        self.excel_config = config.output.excel

    def generate_report(
        self,
        summary: ReconciliationSummary,
        failures: list[FailureRecord],
        output_path: Path,
    ) -> Path:
        """
        Generate the reconciliation workbook.

        Args:
            summary: Reconciliation summary
            failures: Failure records in engine order
            output_path: Path for output file

        Returns:
            Path to generated report
        """
        logger.info(f"Generating Excel report: {output_path}")

        wb = Workbook()

        # Remove default sheet
        if wb.active:
            wb.remove(wb.active)

        self._create_summary_sheet(wb, summary)
        self._create_failures_sheet(wb, failures)

        try:
            atomic_write(output_path, wb.save, mode="wb")
        except OSError as e:
            raise ReportGenerationError(f"Failed to write {output_path}: {e}") from e

        logger.info(f"Report saved: {output_path}")
        return output_path

    def _create_summary_sheet(
        self, wb: Workbook, summary: ReconciliationSummary
    ) -> None:
        """Create the summary sheet with key metrics."""
        ws = wb.create_sheet(self.excel_config.summary_sheet)

        ws["A1"] = "Transaction Reconciliation Summary"
        ws["A1"].font = Font(size=16, bold=True)
        ws.merge_cells("A1:D1")

        ws["A3"] = "File Information"
        ws["A3"].font = Font(bold=True)

        file_info = [
            ("Primary File:", summary.primary_filename),
            ("Companion File:", summary.companion_filename),
            (
                "Reconciliation Date:",
                summary.reconciliation_date.strftime("%Y-%m-%d %H:%M:%S"),
            ),
            ("Config File:", summary.config_file_used or "Default"),
        ]

        for i, (label, value) in enumerate(file_info, start=4):
            ws[f"A{i}"] = label
            ws[f"B{i}"] = str(value)

        ws["A9"] = "Record Counts"
        ws["A9"].font = Font(bold=True)

        count_data = [
            ("Primary Records:", summary.total_primary_records),
            ("Companion Records:", summary.total_companion_records),
            ("Distinct References:", summary.total_distinct_references),
            ("Failure Entries:", summary.failure_count),
            ("Failed References:", summary.failed_reference_count),
        ]

        for i, (label, value) in enumerate(count_data, start=10):
            ws[f"A{i}"] = label
            ws[f"B{i}"] = value

        ws["A16"] = "Pass Rate:"
        ws["B16"] = f"{summary.pass_rate:.1f}%"
        ws["B16"].fill = PASS_FILL if summary.is_clean else FAIL_FILL

        ws["A18"] = "Failures by Reason"
        ws["A18"].font = Font(bold=True)

        row = 19
        for reason in FailureReason:
            ws[f"A{row}"] = reason.value
            ws[f"B{row}"] = summary.failures_by_reason.get(reason.value, 0)
            row += 1

        ws[f"A{row + 1}"] = "Generated At:"
        ws[f"B{row + 1}"] = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        ws[f"A{row + 2}"] = "Processing Time:"
        ws[f"B{row + 2}"] = f"{summary.processing_time_seconds:.2f} seconds"

        ws.column_dimensions["A"].width = 30
        ws.column_dimensions["B"].width = 40

    def _create_failures_sheet(
        self, wb: Workbook, failures: list[FailureRecord]
    ) -> None:
        """Create the failed transactions sheet."""
        ws = wb.create_sheet(self.excel_config.failures_sheet)

        headers = REPORT_COLUMNS + ["Reason"]
        for col, header in enumerate(headers, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.fill = HEADER_FILL
            cell.font = HEADER_FONT
            cell.border = THIN_BORDER

        for row_num, failure in enumerate(failures, start=2):
            row_data = list(failure.to_report_row().values()) + [failure.reason.value]
            for col, value in enumerate(row_data, start=1):
                cell = ws.cell(row=row_num, column=col, value=value)
                cell.border = THIN_BORDER
            ws.cell(row=row_num, column=len(headers)).fill = REASON_FILLS[failure.reason]

        ws.freeze_panes = "A2"
        self._auto_fit_columns(ws)

    def _auto_fit_columns(self, ws: Worksheet) -> None:
        """Auto-fit column widths based on content."""
        for column_cells in ws.columns:
            max_length = 0
            column = column_cells[0].column_letter

            for cell in column_cells:
                if cell.value is not None:
                    max_length = max(max_length, len(str(cell.value)))

            ws.column_dimensions[column].width = min(max_length + 2, 50)
