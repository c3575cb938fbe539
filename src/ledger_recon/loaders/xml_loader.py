"""
Primary transaction log loader.
Parses the XML record file into TransactionRecord objects.
"""

from collections import Counter
from pathlib import Path
from typing import Optional
import logging

from lxml import etree

from ..config import ReconConfig
from ..models.transaction import TransactionRecord
from ..utils.exceptions import PrimaryFormatError, SourceReadError

logger = logging.getLogger(__name__)

# Child element (or attribute) name -> TransactionRecord attribute
FIELD_TAGS = {
    "accountNumber": "account_number",
    "description": "description",
    "startBalance": "start_balance",
    "mutation": "mutation",
    "endBalance": "end_balance",
}


class PrimaryXMLLoader:
    """
    Loader for the primary XML transaction file.

    Expected shape::

        <records>
          <record reference="130498">
            <accountNumber>NL69ABNA0433647324</accountNumber>
            <description>Book Jan Theuß</description>
            <startBalance>26.9</startBalance>
            <mutation>-18.78</mutation>
            <endBalance>8.12</endBalance>
          </record>
        </records>

    Fields are read from child elements first and from attributes of the
    same name second, verbatim. Only the reference is stripped. The document
    declares its own encoding unless input.primary.encoding overrides it.
    """

    def __init__(self, config: ReconConfig):
        self.config = config
        primary_config = config.input.primary
        self.encoding = primary_config.encoding
        self.root_tag = primary_config.root_tag
        self.record_tag = primary_config.record_tag

    def load(self, file_path: Path) -> list[TransactionRecord]:
        """
        Parse the XML file and return its records in document order.

        Args:
            file_path: Path to the XML file

        Returns:
            List of transaction records

        Raises:
            SourceReadError: If the file cannot be read
            PrimaryFormatError: If the content is not the expected XML shape
        """
        logger.info(f"Loading primary XML file: {file_path}")

        root = self._parse_root(file_path)
        records: list[TransactionRecord] = []

        for idx, element in enumerate(root.iterchildren(self.record_tag), start=1):
            records.append(self._to_record(element, idx))

        logger.info(f"Extracted {len(records)} transactions from {file_path}")
        return records

    def _parse_root(self, file_path: Path) -> etree._Element:
        try:
            with open(file_path, "rb") as f:
                content = f.read()
        except OSError as e:
            logger.error(f"Failed to read XML file: {e}")
            raise SourceReadError(f"Failed to read XML file {file_path}: {e}") from e

        parser = etree.XMLParser(
            encoding=self.encoding,
            resolve_entities=False,
            no_network=True,
        )
        try:
            root = etree.fromstring(content, parser)
        except etree.XMLSyntaxError as e:
            logger.error(f"Failed to parse XML file: {e}")
            raise PrimaryFormatError(f"Failed to parse XML file {file_path}: {e}") from e

        if root is None:
            raise PrimaryFormatError(f"XML file {file_path} has no root element")

        if root.tag != self.root_tag:
            raise PrimaryFormatError(
                f"Unexpected root element <{root.tag}> in {file_path}, "
                f"expected <{self.root_tag}>"
            )

        return root

    def _to_record(self, element: etree._Element, idx: int) -> TransactionRecord:
        """
        Convert a ``<record>`` element to a TransactionRecord.

        Args:
            element: The record element
            idx: 1-based position, used in error messages

        Returns:
            Transaction record
        """
        reference = element.get("reference")
        if reference is None:
            reference = self._child_text(element, "reference")
        reference = (reference or "").strip()

        if not reference:
            raise PrimaryFormatError(f"Record {idx} has no reference")

        values = {
            attr: self._field_text(element, tag) for tag, attr in FIELD_TAGS.items()
        }

        return TransactionRecord(reference=reference, **values)

    def _field_text(self, element: etree._Element, tag: str) -> str:
        text = self._child_text(element, tag)
        if text is None:
            text = element.get(tag, "")
        return text

    @staticmethod
    def _child_text(element: etree._Element, tag: str) -> Optional[str]:
        child = element.find(tag)
        if child is None:
            return None
        return child.text or ""

    def get_file_summary(self, file_path: Path) -> dict:
        """
        Get summary information from a primary XML file.

        Args:
            file_path: Path to the XML file

        Returns:
            Dictionary with file summary information
        """
        records = self.load(file_path)
        counts = Counter(r.reference for r in records)

        return {
            "record_count": len(records),
            "distinct_references": len(counts),
            "duplicate_references": sorted(ref for ref, n in counts.items() if n > 1),
            "accounts": sorted({r.account_number for r in records if r.account_number}),
        }
