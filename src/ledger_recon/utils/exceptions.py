"""Custom exceptions for the reconciliation application."""

from typing import Optional


class ReconciliationError(Exception):
    """Base exception for reconciliation errors."""

    pass


class SourceReadError(ReconciliationError, OSError):
    """A source file could not be read."""

    pass


class FormatError(ReconciliationError):
    """Source content does not match the expected shape."""

    pass


class PrimaryFormatError(FormatError):
    """Error parsing the primary XML transaction file."""

    pass


class CompanionFormatError(FormatError):
    """Error parsing the companion CSV file."""

    pass


class MalformedRecordError(ReconciliationError):
    """A transaction carries a balance field that is not a finite decimal."""

    def __init__(self, reference: str, field: str, value: Optional[str]):
        self.reference = reference
        self.field = field
        self.value = value
        super().__init__(
            f"Transaction {reference!r}: field {field!r} is not a valid amount ({value!r})"
        )


class ConfigurationError(ReconciliationError):
    """Error in configuration."""

    pass


class ReportGenerationError(ReconciliationError):
    """Error writing a report file."""

    pass
