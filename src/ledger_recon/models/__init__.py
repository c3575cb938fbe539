"""Data models for reconciliation."""

from .transaction import (
    REPORT_COLUMNS,
    FailureReason,
    TransactionRecord,
    CompanionRecord,
    FailureRecord,
    ReconciliationSummary,
)

__all__ = [
    "REPORT_COLUMNS",
    "FailureReason",
    "TransactionRecord",
    "CompanionRecord",
    "FailureRecord",
    "ReconciliationSummary",
]
