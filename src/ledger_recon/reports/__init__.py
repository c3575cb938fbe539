"""Report generation for failed transactions."""

from .excel_generator import ExcelReportGenerator
from .writer import ReportPaths, ReportWriter

__all__ = ["ExcelReportGenerator", "ReportPaths", "ReportWriter"]
