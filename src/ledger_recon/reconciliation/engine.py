"""
Reconciliation engine.
Runs the rules over the primary transactions in input order and collects failures.
"""

from collections import Counter
from datetime import datetime
from typing import Optional
import logging

from ..models.transaction import (
    CompanionRecord,
    FailureRecord,
    ReconciliationSummary,
    TransactionRecord,
)
from ..config import ReconConfig
from .rules import (
    BalanceConsistencyRule,
    CompanionPresenceRule,
    DuplicateReferenceRule,
    ReconciliationRule,
    RunContext,
)

logger = logging.getLogger(__name__)


class ReconciliationEngine:
    """
    Main reconciliation engine.

    For every primary transaction the enabled rules run in fixed order:
    duplicate reference, balance consistency, companion presence. Each rule
    that fires appends one FailureRecord, so a transaction may appear more
    than once. Output order follows the primary input order.

    The engine keeps no state between calls.
    """

    def __init__(self, config: Optional[ReconConfig] = None):
        """
        Initialize the reconciliation engine.

        Args:
            config: Application configuration (defaults when omitted)
        """
        self.config = config or ReconConfig()
        self.rules = self._build_rules()

    def _build_rules(self) -> list[ReconciliationRule]:
        """
        Build the enabled rules from configuration.

        Returns:
            Rules in evaluation order
        """
        recon_config = self.config.reconciliation
        rules_config = recon_config.rules

        candidates: list[tuple[bool, ReconciliationRule]] = [
            (rules_config.duplicate_reference.enabled, DuplicateReferenceRule()),
            (
                rules_config.balance_consistency.enabled,
                BalanceConsistencyRule(strict=recon_config.strict_malformed),
            ),
            (rules_config.companion_presence.enabled, CompanionPresenceRule()),
        ]

        rules = [rule for enabled, rule in candidates if enabled]
        for rule in rules:
            logger.debug(f"Loaded reconciliation rule: {rule.name}")
        return rules

    def reconcile(
        self,
        primary: list[TransactionRecord],
        companion: list[CompanionRecord],
    ) -> list[FailureRecord]:
        """
        Reconcile primary transactions against the companion records.

        Args:
            primary: Transactions from the primary source, in source order
            companion: Records from the companion source

        Returns:
            Failure records in primary input order

        Raises:
            MalformedRecordError: In strict mode, on the first balance field
                that is not a finite decimal
        """
        logger.info(
            f"Starting reconciliation: {len(primary)} primary, "
            f"{len(companion)} companion records"
        )

        context = RunContext.build(companion)
        failures: list[FailureRecord] = []

        for txn in primary:
            for rule in self.rules:
                reason = rule.check(txn, context)
                if reason is None:
                    continue
                logger.debug(f"Transaction {txn.reference}: {reason.value}")
                failures.append(FailureRecord.from_transaction(txn, reason))

        logger.info(f"Reconciliation complete: {len(failures)} failures")
        return failures

    def generate_summary(
        self,
        primary: list[TransactionRecord],
        companion: list[CompanionRecord],
        failures: list[FailureRecord],
        primary_filename: str,
        companion_filename: str,
        processing_time: float,
    ) -> ReconciliationSummary:
        """
        Generate a summary of the reconciliation results.

        Args:
            primary: All primary transactions
            companion: All companion records
            failures: Failure records returned by reconcile()
            primary_filename: Name of the primary file
            companion_filename: Name of the companion file
            processing_time: Time taken in seconds

        Returns:
            Reconciliation summary object
        """
        by_reason = Counter(f.reason.value for f in failures)

        return ReconciliationSummary(
            primary_filename=primary_filename,
            companion_filename=companion_filename,
            reconciliation_date=datetime.now(),
            total_primary_records=len(primary),
            total_companion_records=len(companion),
            total_distinct_references=len({t.reference for t in primary}),
            failure_count=len(failures),
            failed_reference_count=len({f.reference for f in failures}),
            failures_by_reason=dict(by_reason),
            processing_time_seconds=processing_time,
            config_file_used=self.config.config_file_path,
        )


def reconcile(
    primary: list[TransactionRecord],
    companion: list[CompanionRecord],
) -> list[FailureRecord]:
    """Reconcile with the default rule set."""
    return ReconciliationEngine().reconcile(primary, companion)
