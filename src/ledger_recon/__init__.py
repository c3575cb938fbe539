"""
Ledger transaction reconciliation.

Reconciles a primary XML transaction log against a companion CSV record set
and reports every transaction that fails reconciliation.
"""

from .models import FailureReason, FailureRecord, TransactionRecord, CompanionRecord
from .reconciliation import ReconciliationEngine, reconcile

__version__ = "0.1.0"

__all__ = [
    "FailureReason",
    "FailureRecord",
    "TransactionRecord",
    "CompanionRecord",
    "ReconciliationEngine",
    "reconcile",
]
