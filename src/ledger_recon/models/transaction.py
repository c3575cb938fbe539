"""Data models for reconciliation transactions and results."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

# Column order of the tabular failure report
REPORT_COLUMNS = [
    "Reference",
    "Account Number",
    "Description",
    "Start Balance",
    "Mutation",
    "End Balance",
]


class FailureReason(Enum):
    """Rule that rejected a transaction."""

    DUPLICATE_REFERENCE = "duplicate_reference"
    BALANCE_MISMATCH = "balance_mismatch"
    MALFORMED_RECORD = "malformed_record"
    MISSING_IN_COMPANION = "missing_in_companion"


@dataclass
class TransactionRecord:
    """
    A transaction from the primary (XML) source.

    Balance fields keep the exact text found in the source. The engine parses
    them into decimals itself so that the report can echo the original text.
    """

    reference: str
    account_number: str = ""
    description: str = ""
    start_balance: str = ""
    mutation: str = ""
    end_balance: str = ""


@dataclass
class CompanionRecord:
    """A record from the companion (CSV) source, keyed by reference."""

    reference: str

    # Remaining columns, carried verbatim and never validated
    fields: dict[str, str] = field(default_factory=dict)


@dataclass
class FailureRecord:
    """One rule violation tied to one primary transaction."""

    reference: str
    account_number: str
    description: str
    start_balance: str
    mutation: str
    end_balance: str
    reason: FailureReason

    @classmethod
    def from_transaction(
        cls, txn: TransactionRecord, reason: FailureReason
    ) -> "FailureRecord":
        """Build a failure entry copying the transaction's display text."""
        return cls(
            reference=txn.reference,
            account_number=txn.account_number,
            description=txn.description,
            start_balance=txn.start_balance,
            mutation=txn.mutation,
            end_balance=txn.end_balance,
            reason=reason,
        )

    def to_report_row(self) -> dict[str, str]:
        """Return the six report columns keyed by their header names."""
        return {
            "Reference": self.reference,
            "Account Number": self.account_number,
            "Description": self.description,
            "Start Balance": self.start_balance,
            "Mutation": self.mutation,
            "End Balance": self.end_balance,
        }

    def to_dump_dict(self) -> dict[str, str]:
        """Report row plus the failure reason, for the JSON audit dump."""
        row = self.to_report_row()
        row["Reason"] = self.reason.value
        return row


@dataclass
class ReconciliationSummary:
    """Summary of one reconciliation pass."""

    # File information
    primary_filename: str
    companion_filename: str
    reconciliation_date: datetime

    # Record counts
    total_primary_records: int
    total_companion_records: int
    total_distinct_references: int

    # Failure results
    failure_count: int
    failed_reference_count: int
    failures_by_reason: dict[str, int] = field(default_factory=dict)

    # Processing metadata
    processing_time_seconds: float = 0.0
    config_file_used: Optional[str] = None

    @property
    def is_clean(self) -> bool:
        """True when no transaction failed reconciliation."""
        return self.failure_count == 0

    @property
    def pass_rate(self) -> float:
        """Percentage of distinct primary references with no failure."""
        if self.total_distinct_references == 0:
            return 100.0
        passed = self.total_distinct_references - self.failed_reference_count
        return (passed / self.total_distinct_references) * 100
