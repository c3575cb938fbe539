"""Utility modules."""

from .exceptions import (
    ReconciliationError,
    SourceReadError,
    FormatError,
    PrimaryFormatError,
    CompanionFormatError,
    MalformedRecordError,
    ConfigurationError,
    ReportGenerationError,
)
from .files import atomic_write
from .logging_config import setup_logging

__all__ = [
    "ReconciliationError",
    "SourceReadError",
    "FormatError",
    "PrimaryFormatError",
    "CompanionFormatError",
    "MalformedRecordError",
    "ConfigurationError",
    "ReportGenerationError",
    "atomic_write",
    "setup_logging",
]
