"""Coinbase CSV export reader producing normalized trade records.

The export starts with a few metadata rows, then one row per account event.
Older rows leave the currency total column empty and carry the amount only
inside the free-text notes (`Bought 1.0 BTC for $101.16.`); for those the fee
is rebuilt from the venue fee schedule unless a fee column is populated.
"""

from __future__ import annotations

import csv
import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from coinledger.domain import MalformedInputError, Trade
from coinledger.domain.money import ZERO, money_divide_currency, money_parse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoinbaseCsvLayout:
    """Column layout contract for one export format version.

    Attributes:
        header_rows: Leading rows to skip before trade rows start.
        timestamp_column: Index of the timestamp column.
        amount_column: Index of the signed asset amount column.
        description_column: Index of the free-text notes column.
        total_column: Index of the currency total column.
        fee_column: Index of the fee column, or None when the export has none.
        timestamp_format: `strptime` format of the timestamp column.
    """

    header_rows: int = 3
    timestamp_column: int = 0
    amount_column: int = 2
    description_column: int = 4
    total_column: int = 5
    fee_column: int | None = 6
    timestamp_format: str = "%Y-%m-%d %H:%M:%S %z"


@dataclass(frozen=True)
class FeeSchedule:
    """Venue fee schedule used for rows that carry no explicit fee.

    The venue charged `flat_amount + percentage_rate * subtotal` on top of the
    subtotal, so a notes total is `subtotal + fee`.

    Attributes:
        flat_amount: Flat fee per trade.
        percentage_rate: Fractional fee rate applied to the subtotal.
        description_pattern: Compiled notes pattern with a `total` group.
    """

    flat_amount: Decimal
    percentage_rate: Decimal
    description_pattern: re.Pattern[str]

    def fee_schedule_reconstruct_fee(self, gross_total: Decimal) -> Decimal:
        """Rebuild the fee contained in one fee-inclusive total.

        Args:
            gross_total: Total currency amount including the fee.

        Returns:
            Decimal: Non-negative fee at currency scale.

        Raises:
            InvalidTradeError: Raised when the fee rate makes the divisor zero.
        """

        subtotal = money_divide_currency(gross_total - self.flat_amount, Decimal("1") + self.percentage_rate)
        if subtotal < ZERO:
            subtotal = ZERO
        return gross_total - subtotal

    def fee_schedule_match_total(self, description: str) -> Decimal | None:
        """Extract the currency total from one notes value.

        Args:
            description: Free-text notes column value.

        Returns:
            Decimal | None: Parsed total, or None when the pattern does not match.

        Raises:
            MalformedInputError: Raised when the matched total is not numeric.
        """

        match = self.description_pattern.search(description)
        if match is None:
            return None
        return money_parse(match.group("total"))


class CoinbaseCsvTradeReader:
    """Stream normalized trades from Coinbase CSV export lines.

    Attributes:
        reader_skipped_rows: Rows skipped because no currency total was recoverable.
    """

    def __init__(
        self,
        layout: CoinbaseCsvLayout,
        fee_schedule: FeeSchedule,
        skip_unmatched_rows: bool = True,
    ):
        if layout is None:
            raise ValueError("layout must not be None")
        if fee_schedule is None:
            raise ValueError("fee_schedule must not be None")

        self._layout = layout
        self._fee_schedule = fee_schedule
        self._skip_unmatched_rows = skip_unmatched_rows
        self.reader_skipped_rows = 0

    def reader_iter_trades(self, lines: Iterable[str]) -> Iterator[Trade]:
        """Yield trades lazily from export lines in source order.

        Args:
            lines: Raw CSV lines (file object or list of strings).

        Returns:
            Iterator[Trade]: Single-pass trade stream.

        Raises:
            MalformedInputError: Raised when the input is not decodable CSV text, or a
                row has a bad timestamp, a blank or non-numeric amount, too few
                columns, or an unmatched notes value in strict mode.
        """

        csv_reader = csv.reader(lines)
        for row_index, row in enumerate(_reader_rows(csv_reader)):
            if row_index < self._layout.header_rows:
                continue
            if not any(cell.strip() for cell in row):
                continue

            trade = self._reader_parse_row(row=row, source_row_ref=f"line {csv_reader.line_num}")
            if trade is not None:
                yield trade

    def _reader_parse_row(self, row: list[str], source_row_ref: str) -> Trade | None:
        """Parse one data row into a trade, or None when the row is skipped.

        Args:
            row: CSV cells.
            source_row_ref: Row locator for diagnostics.

        Returns:
            Trade | None: Parsed trade or None for skipped rows.

        Raises:
            MalformedInputError: Raised when required fields are missing or invalid.
        """

        required_width = max(self._layout.timestamp_column, self._layout.amount_column) + 1
        if len(row) < required_width:
            raise MalformedInputError(
                f"row has {len(row)} columns, expected at least {required_width}",
                source_row_ref=source_row_ref,
            )

        timestamp = self._reader_parse_timestamp(row[self._layout.timestamp_column], source_row_ref)
        asset_amount = money_parse(row[self._layout.amount_column], source_row_ref=source_row_ref)
        fee_text = _reader_cell(row, self._layout.fee_column)

        total_text = _reader_cell(row, self._layout.total_column)
        if total_text:
            gross_proceeds = abs(money_parse(total_text, source_row_ref=source_row_ref))
            fee = abs(money_parse(fee_text, source_row_ref=source_row_ref)) if fee_text else ZERO
        else:
            description = _reader_cell(row, self._layout.description_column)
            try:
                matched_total = self._fee_schedule.fee_schedule_match_total(description)
            except MalformedInputError as error:
                raise MalformedInputError(str(error), source_row_ref=source_row_ref) from error

            if matched_total is None:
                if not self._skip_unmatched_rows:
                    raise MalformedInputError(
                        f"no currency total and unrecognized description {description!r}",
                        source_row_ref=source_row_ref,
                    )
                self.reader_skipped_rows += 1
                logger.warning("Skipping %s: no currency total and unrecognized description %r", source_row_ref, description)
                return None

            gross_proceeds = abs(matched_total)
            if fee_text:
                fee = abs(money_parse(fee_text, source_row_ref=source_row_ref))
            else:
                fee = self._fee_schedule.fee_schedule_reconstruct_fee(gross_proceeds)

        logger.debug("Parsed %s amount=%s gross=%s fee=%s", source_row_ref, asset_amount, gross_proceeds, fee)
        return Trade(
            timestamp=timestamp,
            asset_amount=asset_amount,
            gross_proceeds=gross_proceeds,
            fee=fee,
            source_row_ref=source_row_ref,
        )

    def _reader_parse_timestamp(self, value: str, source_row_ref: str) -> datetime:
        """Parse one timestamp cell into an offset-aware datetime.

        Naive values are interpreted as UTC.

        Args:
            value: Timestamp cell text.
            source_row_ref: Row locator for diagnostics.

        Returns:
            datetime: Offset-aware timestamp.

        Raises:
            MalformedInputError: Raised when the value matches no supported format.
        """

        normalized_value = value.strip()
        try:
            parsed_value = datetime.strptime(normalized_value, self._layout.timestamp_format)
        except ValueError:
            try:
                parsed_value = datetime.fromisoformat(normalized_value)
            except ValueError as error:
                raise MalformedInputError(f"invalid timestamp {value!r}", source_row_ref=source_row_ref) from error

        if parsed_value.tzinfo is None:
            return parsed_value.replace(tzinfo=timezone.utc)
        return parsed_value


def _reader_cell(row: list[str], column: int | None) -> str:
    """Return one stripped cell, or an empty string when the column is absent."""

    if column is None or column >= len(row):
        return ""
    return row[column].strip()


def _reader_rows(csv_reader) -> Iterator[list[str]]:
    """Yield CSV rows, reporting undecodable or unparseable text as malformed input."""

    try:
        yield from csv_reader
    except (csv.Error, UnicodeDecodeError) as error:
        raise MalformedInputError(
            f"export is not readable CSV text after line {csv_reader.line_num}: {error}"
        ) from error


__all__ = ["CoinbaseCsvLayout", "CoinbaseCsvTradeReader", "FeeSchedule"]
