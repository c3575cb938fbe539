"""
Reconciliation rules.
Each rule inspects one primary transaction and reports the reason it fails, if any.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import MAX_EMAX, MIN_EMIN, Context, Decimal, Inexact, InvalidOperation, Overflow
from typing import Optional

from ..models.transaction import CompanionRecord, FailureReason, TransactionRecord
from ..utils.exceptions import MalformedRecordError

BALANCE_FIELDS = ("start_balance", "mutation", "end_balance")

# Amounts must lie within 10**MAX_AMOUNT_EXPONENT and be no finer than
# 10**-MAX_AMOUNT_EXPONENT, so an exact sum never needs more than
# ADDITION_PRECISION digits.
MAX_AMOUNT_EXPONENT = 1000
ADDITION_PRECISION = 2 * MAX_AMOUNT_EXPONENT + 4


@dataclass
class RunContext:
    """State accumulated during a single reconciliation pass."""

    companion_index: dict[str, CompanionRecord]
    seen_references: set[str] = field(default_factory=set)

    @classmethod
    def build(cls, companion: list[CompanionRecord]) -> "RunContext":
        """Index companion records by reference; the first occurrence wins."""
        index: dict[str, CompanionRecord] = {}
        for record in companion:
            index.setdefault(record.reference, record)
        return cls(companion_index=index)


def parse_amount(value: Optional[str]) -> Optional[Decimal]:
    """
    Parse an amount exactly as written.

    Args:
        value: Amount text from the source

    Returns:
        Finite Decimal, or None if the text is empty, non-numeric, not finite
        or outside the supported magnitude range
    """
    if value is None:
        return None

    text = value.strip()
    if not text:
        return None

    try:
        amount = Decimal(text)
    except (InvalidOperation, ValueError):
        return None

    if not amount.is_finite():
        return None
    if (
        amount.adjusted() > MAX_AMOUNT_EXPONENT
        or amount.as_tuple().exponent < -MAX_AMOUNT_EXPONENT
    ):
        return None
    return amount


def exact_add(a: Decimal, b: Decimal) -> Decimal:
    """
    Add two amounts from parse_amount without rounding.

    The default decimal context keeps 28 significant digits; this one is
    wide enough for any pair of accepted amounts and traps inexact results.
    """
    context = Context(
        prec=ADDITION_PRECISION,
        Emax=MAX_EMAX,
        Emin=MIN_EMIN,
        traps=[Inexact, Overflow, InvalidOperation],
    )
    return context.add(a, b)


class ReconciliationRule(ABC):
    """Abstract base class for reconciliation rules."""

    name: str = ""

    @abstractmethod
    def check(
        self, txn: TransactionRecord, context: RunContext
    ) -> Optional[FailureReason]:
        """
        Evaluate the rule for one primary transaction.

        Args:
            txn: Primary transaction
            context: Per-pass state shared by the rules

        Returns:
            The failure reason, or None if the transaction passes
        """
        pass


class DuplicateReferenceRule(ReconciliationRule):
    """
    Flags every repeat of a reference already seen in this pass.
    The first occurrence always passes.
    """

    name = "duplicate_reference"

    def check(
        self, txn: TransactionRecord, context: RunContext
    ) -> Optional[FailureReason]:
        if txn.reference in context.seen_references:
            return FailureReason.DUPLICATE_REFERENCE
        context.seen_references.add(txn.reference)
        return None


class BalanceConsistencyRule(ReconciliationRule):
    """
    Checks ``end_balance == start_balance + mutation`` with exact decimals.

    A field that does not parse is reported as a malformed record rather
    than a balance mismatch.
    """

    name = "balance_consistency"

    def __init__(self, strict: bool = False):
        """
        Args:
            strict: Raise MalformedRecordError instead of reporting
                MALFORMED_RECORD
        """
        self.strict = strict

    def check(
        self, txn: TransactionRecord, context: RunContext
    ) -> Optional[FailureReason]:
        amounts: dict[str, Decimal] = {}

        for field_name in BALANCE_FIELDS:
            raw = getattr(txn, field_name)
            amount = parse_amount(raw)
            if amount is None:
                if self.strict:
                    raise MalformedRecordError(txn.reference, field_name, raw)
                return FailureReason.MALFORMED_RECORD
            amounts[field_name] = amount

        expected_end = exact_add(amounts["start_balance"], amounts["mutation"])
        if amounts["end_balance"] != expected_end:
            return FailureReason.BALANCE_MISMATCH
        return None


class CompanionPresenceRule(ReconciliationRule):
    """Flags a transaction whose reference has no companion record."""

    name = "companion_presence"

    def check(
        self, txn: TransactionRecord, context: RunContext
    ) -> Optional[FailureReason]:
        if txn.reference not in context.companion_index:
            return FailureReason.MISSING_IN_COMPANION
        return None
