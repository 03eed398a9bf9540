"""
CSV test data loader.
Reads the data files that parameterize end-to-end test cases and turns
balance check rows into BalanceCheckCase records.
"""

import codecs
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional, Union
import logging

import pandas as pd

from ..config import VerificationConfig
from ..models.verification import (
    BalanceCheckCase,
    ExchangeDirection,
    TransactionDirection,
)
from ..parsers.amount_parser import UNKNOWN_CURRENCY, extract_currency_code, parse_amount
from ..utils.exceptions import DataFileError, VerificationError

logger = logging.getLogger(__name__)

BALANCE_CHECK_REQUIRED_COLUMNS = ("before", "after", "amount")


class CsvDataLoader:
    """
    Loader for semicolon- or comma-delimited CSV test data.

    All cells are read as trimmed strings; empty cells become "".
    """

    def __init__(self, config: Optional[VerificationConfig] = None):
        """
        Initialize the loader with configuration.

        Args:
            config: Application configuration object
        """
        self.config = config or VerificationConfig()
        self.data_dir = Path(self.config.data.data_dir)
        self.encoding = self.config.data.encoding
        self.currency_symbols = self.config.parsing.currency_symbols

    def resolve(self, filename: Union[str, Path]) -> Path:
        """Resolve a data file name against the configured data directory."""
        path = Path(filename)
        if path.is_absolute() or path.exists():
            return path
        return self.data_dir / path

    def _detect_delimiter(self, path: Path) -> str:
        with open(path, "r", encoding=self.encoding) as f:
            first_line = f.readline()
        return ";" if ";" in first_line else ","

    def _write_encoding(self, path: Path) -> str:
        # utf-8-sig reads both forms; only write a BOM back if the file had one
        if codecs.lookup(self.encoding).name != "utf-8-sig":
            return self.encoding
        with open(path, "rb") as f:
            has_bom = f.read(len(codecs.BOM_UTF8)) == codecs.BOM_UTF8
        return "utf-8-sig" if has_bom else "utf-8"

    def _read_frame(self, path: Path) -> tuple[pd.DataFrame, str]:
        if not path.exists():
            raise DataFileError(f"CSV file not found at path: {path}")

        delimiter = self._detect_delimiter(path)
        try:
            df = pd.read_csv(
                path,
                sep=delimiter,
                encoding=self.encoding,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
            )
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read CSV file {path}: {e}")
            raise DataFileError(f"Failed to read CSV file {path}: {e}") from e

        df.columns = [str(c).strip().lstrip("\ufeff") for c in df.columns]
        df = df.fillna("").apply(lambda col: col.str.strip())
        df = df[~(df == "").all(axis=1)].reset_index(drop=True)
        return df, delimiter

    def load(self, filename: Union[str, Path]) -> list[dict[str, str]]:
        """
        Load a CSV data file.

        Args:
            filename: File name relative to the data directory, or a path

        Returns:
            One dict per non-empty row, keyed by trimmed header

        Raises:
            DataFileError: If the file is missing or unreadable
        """
        path = self.resolve(filename)
        logger.info(f"Loading test data: {path}")

        df, _ = self._read_frame(path)
        records = df.to_dict(orient="records")

        logger.info(f"Loaded {len(records)} rows from {path.name}")
        return records

    def update_cell(
        self, filename: Union[str, Path], row_index: int, column: str, value: str
    ) -> None:
        """
        Overwrite one cell of a data file, keeping its delimiter and encoding.

        The file is written back in normalized form: cells are trimmed and
        empty rows are dropped.

        Args:
            filename: File name relative to the data directory, or a path
            row_index: 0-based data row index (header excluded)
            column: Column header
            value: New cell value

        Raises:
            DataFileError: If the file, row or column does not exist
        """
        path = self.resolve(filename)
        df, delimiter = self._read_frame(path)
        encoding = self._write_encoding(path)

        if column not in df.columns:
            raise DataFileError(f"Column {column!r} not found in {path.name}")
        if row_index < 0 or row_index >= len(df):
            raise DataFileError(
                f"Row {row_index} out of range for {path.name} ({len(df)} rows)"
            )

        df.at[row_index, column] = value
        df.to_csv(path, sep=delimiter, index=False, encoding=encoding)
        logger.debug(f"Updated {path.name}[{row_index}][{column}] = {value!r}")

    def load_balance_checks(self, filename: Union[str, Path]) -> list[BalanceCheckCase]:
        """
        Load balance check cases from a CSV file.

        Required columns are ``before``, ``after`` and ``amount``; optional
        columns are ``name``, ``direction``, ``exchange_rate``,
        ``exchange_rate_type`` and ``tolerance``. Header matching is
        case-insensitive.

        Raises:
            DataFileError: If a required column is missing or a row is invalid
        """
        path = self.resolve(filename)
        records = self.load(path)

        cases: list[BalanceCheckCase] = []
        for idx, record in enumerate(records):
            row = {k.strip().lower(): v for k, v in record.items()}

            missing = [c for c in BALANCE_CHECK_REQUIRED_COLUMNS if c not in row]
            if missing:
                raise DataFileError(f"{path.name}: missing columns {missing}")

            try:
                cases.append(self._build_case(row, idx))
            except VerificationError as e:
                logger.error(f"{path.name} row {idx}: {e}")
                raise DataFileError(f"{path.name} row {idx}: {e}") from e

        return cases

    def _build_case(self, row: dict[str, str], idx: int) -> BalanceCheckCase:
        rate_text = row.get("exchange_rate", "")
        rate_type_text = row.get("exchange_rate_type", "")
        tolerance_text = row.get("tolerance", "")

        exchange_rate = _decimal_or_none(rate_text)
        exchange_direction = None
        if rate_type_text:
            exchange_direction = ExchangeDirection.parse(rate_type_text)
        if (exchange_rate is None) != (exchange_direction is None):
            raise DataFileError(
                "exchange_rate and exchange_rate_type must be given together"
            )

        currency = extract_currency_code(row["before"], self.currency_symbols)

        return BalanceCheckCase(
            name=row.get("name") or f"case-{idx + 1:03d}",
            before=parse_amount(row["before"]),
            after=parse_amount(row["after"]),
            amount=parse_amount(row["amount"]),
            direction=TransactionDirection.parse(row.get("direction") or "debit"),
            exchange_rate=exchange_rate,
            exchange_direction=exchange_direction,
            tolerance=_decimal_or_none(tolerance_text),
            currency_code=None if currency == UNKNOWN_CURRENCY else currency,
        )


def _decimal_or_none(value: str) -> Optional[Decimal]:
    if not value:
        return None
    try:
        return Decimal(value.replace(",", ""))
    except InvalidOperation as e:
        raise DataFileError(f"Not a number: {value!r}") from e
