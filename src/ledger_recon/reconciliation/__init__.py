"""Reconciliation engine and rules."""

from .engine import ReconciliationEngine, reconcile
from .rules import (
    ReconciliationRule,
    DuplicateReferenceRule,
    BalanceConsistencyRule,
    CompanionPresenceRule,
    RunContext,
    exact_add,
    parse_amount,
)

__all__ = [
    "ReconciliationEngine",
    "reconcile",
    "ReconciliationRule",
    "DuplicateReferenceRule",
    "BalanceConsistencyRule",
    "CompanionPresenceRule",
    "RunContext",
    "exact_add",
    "parse_amount",
]
