"""Shared test fixtures and configuration."""

from pathlib import Path
from typing import Callable
import logging

import pytest

from ledger_recon.config import ReconConfig
from ledger_recon.models import CompanionRecord, TransactionRecord

SAMPLE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<records>
  <record reference="130498">
    <accountNumber>NL69ABNA0433647324</accountNumber>
    <description>Book Jan Theuß</description>
    <startBalance>26.9</startBalance>
    <mutation>-18.78</mutation>
    <endBalance>8.12</endBalance>
  </record>
  <record reference="167875">
    <accountNumber>NL93ABNA0585619023</accountNumber>
    <description>Toy Greg Alysha</description>
    <startBalance>5429</startBalance>
    <mutation>-939</mutation>
    <endBalance>6368</endBalance>
  </record>
  <record reference="147674">
    <accountNumber>NL93ABNA0585619023</accountNumber>
    <description>Subscription Peter Dekker</description>
    <startBalance>74.69</startBalance>
    <mutation>-44.91</mutation>
    <endBalance>29.78</endBalance>
  </record>
  <record reference="130498">
    <accountNumber>NL43AEGO0773393871</accountNumber>
    <description>Clothes Richard Bakker</description>
    <startBalance>10.1</startBalance>
    <mutation>+5</mutation>
    <endBalance>15.1</endBalance>
  </record>
</records>
"""

SAMPLE_CSV = (
    "Reference,Account Number,Description,Start Balance,Mutation,End Balance\n"
    "130498,NL69ABNA0433647324,Book Jan Theuß,26.9,-18.78,8.12\n"
    "167875,NL93ABNA0585619023,Toy Greg Alysha,5429,-939,6368\n"
)


@pytest.fixture(autouse=True)
def reset_app_logger():
    """Drop handlers installed by CLI runs so they do not outlive their streams."""
    yield
    logging.getLogger("ledger_recon").handlers = []


@pytest.fixture
def config(tmp_path: Path) -> ReconConfig:
    """Default configuration writing reports under tmp_path."""
    cfg = ReconConfig()
    cfg.output.directory = str(tmp_path / "out")
    return cfg


@pytest.fixture
def make_txn() -> Callable[..., TransactionRecord]:
    """Factory for primary transactions with valid balances by default."""

    def _make(
        reference: str = "T1",
        start: str = "100",
        mutation: str = "-20",
        end: str = "80",
        account: str = "NL00BANK0000000001",
        description: str = "Test transaction",
    ) -> TransactionRecord:
        return TransactionRecord(
            reference=reference,
            account_number=account,
            description=description,
            start_balance=start,
            mutation=mutation,
            end_balance=end,
        )

    return _make


@pytest.fixture
def companion_for() -> Callable[..., list[CompanionRecord]]:
    """Build companion records for the given references."""

    def _make(*references: str) -> list[CompanionRecord]:
        return [CompanionRecord(reference=ref) for ref in references]

    return _make


@pytest.fixture
def sample_xml(tmp_path: Path) -> Path:
    path = tmp_path / "records.xml"
    path.write_text(SAMPLE_XML, encoding="utf-8")
    return path


@pytest.fixture
def sample_csv(tmp_path: Path) -> Path:
    path = tmp_path / "records.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path
