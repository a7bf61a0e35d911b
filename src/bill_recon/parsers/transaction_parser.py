"""
Bank transaction parser.
Reads already-normalized transaction exports (JSON records or a CSV with
fixed column names) into Transaction models.
"""

from pathlib import Path
from typing import Optional
import logging

import pandas as pd
import yaml

from ..models.transaction import Transaction, TransactionType
from ..utils.exceptions import InputParseError
from .fields import get_field, get_text, parse_amount, parse_optional_date

logger = logging.getLogger(__name__)

REQUIRED_CSV_COLUMNS = ("date", "description", "amount")


class TransactionParser:
    """
    Parser for transaction exports.

    CSV files need at least the columns in ``REQUIRED_CSV_COLUMNS``;
    optional columns are id, category, recipientName and type; anything else
    is read as a JSON (or YAML) list of records.
    """

    def parse_file(self, file_path: Path) -> list[Transaction]:
        """
        Parse a transaction file.

        Args:
            file_path: Path to the CSV or JSON file

        Returns:
            List of transactions; invalid rows are logged and skipped

        Raises:
            InputParseError: If the file cannot be read
        """
        logger.info(f"Parsing transaction file: {file_path}")

        try:
            if file_path.suffix.lower() == ".csv":
                df = pd.read_csv(file_path, dtype=str, encoding="utf-8")
                missing = [c for c in REQUIRED_CSV_COLUMNS if c not in df.columns]
                if missing:
                    raise InputParseError(f"Missing CSV columns: {', '.join(missing)}")
            else:
                df = self._read_records(file_path)
        except (OSError, ValueError, yaml.YAMLError, pd.errors.ParserError) as e:
            logger.error(f"Failed to read transaction file: {e}")
            raise InputParseError(f"Failed to read transaction file: {e}") from e

        transactions = self._process_dataframe(df)
        logger.info(f"Extracted {len(transactions)} transactions")

        return transactions

    def _read_records(self, file_path: Path) -> pd.DataFrame:
        with open(file_path, "r", encoding="utf-8") as f:
            document = yaml.safe_load(f) or []
        if isinstance(document, dict):
            document = document.get("transactions", [])
        if not isinstance(document, list):
            raise ValueError("Expected a list of transactions")
        # object dtype keeps ids as written when only some records carry one
        return pd.DataFrame([r for r in document if isinstance(r, dict)], dtype=object)

    def _process_dataframe(self, df: pd.DataFrame) -> list[Transaction]:
        """
        Convert DataFrame rows to transactions.

        Args:
            df: One row per transaction

        Returns:
            List of transactions
        """
        transactions: list[Transaction] = []

        for idx, row in df.iterrows():
            try:
                txn = self._normalize_row(row.to_dict(), int(idx))
            except ValueError as e:
                logger.warning(f"Row {idx}: {e}, skipping")
                continue
            if txn:
                transactions.append(txn)

        return transactions

    def _normalize_row(self, row: dict, idx: int) -> Optional[Transaction]:
        """
        Convert one record to a Transaction.

        Returns:
            Transaction, or None if it has no usable date or amount
        """
        txn_date = parse_optional_date(get_field(row, "date"), f"Row {idx}")
        if txn_date is None:
            logger.warning(f"Row {idx}: missing date, skipping")
            return None

        amount = parse_amount(get_field(row, "amount"))
        if amount is None:
            logger.warning(f"Row {idx}: no valid amount found, skipping")
            return None

        txn_type = get_text(row, "type")

        return Transaction(
            id=get_text(row, "id"),
            description=get_text(row, "description") or "",
            amount=amount,
            date=txn_date,
            category=get_text(row, "category"),
            recipient_name=get_text(row, "recipient_name"),
            type=TransactionType(txn_type.strip().lower()) if txn_type else None,
        )
