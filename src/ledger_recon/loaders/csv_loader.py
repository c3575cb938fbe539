"""
Companion CSV loader.
Parses the delimited record set into CompanionRecord objects keyed by reference.
"""

from pathlib import Path
import logging

import pandas as pd

from ..config import ReconConfig
from ..models.transaction import CompanionRecord
from ..utils.exceptions import CompanionFormatError, SourceReadError

logger = logging.getLogger(__name__)


class CompanionCSVLoader:
    """
    Loader for the companion CSV file.

    Every column is read as text. Only the reference column is interpreted;
    its header must match the configured name exactly.
    """

    def __init__(self, config: ReconConfig):
        """
        Initialize the loader with configuration.

        Args:
            config: Application configuration object
        """
        self.config = config
        companion_config = config.input.companion
        self.encoding = companion_config.encoding
        self.delimiter = companion_config.delimiter
        self.reference_column = companion_config.reference_column

    def load(self, file_path: Path) -> list[CompanionRecord]:
        """
        Parse the CSV file and return companion records in file order.

        Args:
            file_path: Path to the CSV file

        Returns:
            List of companion records

        Raises:
            SourceReadError: If the file cannot be read
            CompanionFormatError: If the content cannot be parsed or lacks
                the reference column
        """
        logger.info(f"Loading companion CSV file: {file_path}")

        df = self._read_dataframe(file_path)
        records = self._process_dataframe(df)
        logger.info(f"Extracted {len(records)} records from {file_path}")

        return records

    def _read_dataframe(self, file_path: Path) -> pd.DataFrame:
        try:
            df = pd.read_csv(
                file_path,
                encoding=self.encoding,
                delimiter=self.delimiter,
                dtype=str,
                keep_default_na=False,
            )
        except OSError as e:
            logger.error(f"Failed to read CSV file: {e}")
            raise SourceReadError(f"Failed to read CSV file {file_path}: {e}") from e
        except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as e:
            logger.error(f"Failed to parse CSV file: {e}")
            raise CompanionFormatError(f"Failed to parse CSV file {file_path}: {e}") from e

        if self.reference_column not in df.columns:
            raise CompanionFormatError(
                f"CSV file {file_path} has no {self.reference_column!r} column "
                f"(found: {', '.join(map(str, df.columns))})"
            )

        return df

    def _process_dataframe(self, df: pd.DataFrame) -> list[CompanionRecord]:
        """
        Convert DataFrame rows to companion records.

        Args:
            df: Pandas DataFrame containing CSV data

        Returns:
            List of companion records
        """
        records: list[CompanionRecord] = []
        other_columns = [c for c in df.columns if c != self.reference_column]

        for idx, row in df.iterrows():
            reference = str(row[self.reference_column]).strip()
            if not reference:
                logger.warning(f"Row {idx}: empty reference, skipping")
                continue

            records.append(
                CompanionRecord(
                    reference=reference,
                    fields={str(c): str(row[c]) for c in other_columns},
                )
            )

        return records

    def get_file_summary(self, file_path: Path) -> dict:
        """
        Get summary information from a companion CSV file.

        Args:
            file_path: Path to the CSV file

        Returns:
            Dictionary with file summary information
        """
        df = self._read_dataframe(file_path)
        references = df[self.reference_column].str.strip()
        references = references[references != ""]

        return {
            "row_count": len(df),
            "columns": [str(c) for c in df.columns],
            "distinct_references": int(references.nunique()),
            "duplicate_references": sorted(
                references[references.duplicated()].unique().tolist()
            ),
        }
