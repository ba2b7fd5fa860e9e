"""Regression tests for Coinbase CSV export parsing."""

from __future__ import annotations

import io
import logging
import re
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from coinledger.config import DEFAULT_FEE_DESCRIPTION_PATTERN
from coinledger.domain import MalformedInputError
from coinledger.parsing import CoinbaseCsvLayout, CoinbaseCsvTradeReader, FeeSchedule

_HEADER = "User,Jane Doe,5f1e\nBTC Wallet,1AbCdEf\nTimestamp,Balance,BTC Amount,To,Notes,Transfer Total,Transfer Fee\n"


def _build_reader(skip_unmatched_rows: bool = True, layout: CoinbaseCsvLayout | None = None) -> CoinbaseCsvTradeReader:
    return CoinbaseCsvTradeReader(
        layout=layout or CoinbaseCsvLayout(),
        fee_schedule=FeeSchedule(
            flat_amount=Decimal("0.15"),
            percentage_rate=Decimal("0.01"),
            description_pattern=re.compile(DEFAULT_FEE_DESCRIPTION_PATTERN),
        ),
        skip_unmatched_rows=skip_unmatched_rows,
    )


def test_parsing_coinbase_csv_reads_sample_export(sample_export_csv: str) -> None:
    """Skip headers, read fee columns, fall back to notes, and skip transfers.

    Args:
        sample_export_csv: Shared export fixture.

    Returns:
        None: Assertions validate normalized trades.

    Raises:
        AssertionError: Raised when parsed trades deviate from the export.
    """

    reader = _build_reader()

    trades = list(reader.reader_iter_trades(sample_export_csv.splitlines(keepends=True)))

    assert [t.asset_amount for t in trades] == [Decimal("1.0"), Decimal("1.0"), Decimal("-1.5")]
    assert [t.gross_proceeds for t in trades] == [Decimal("101.16"), Decimal("202.15"), Decimal("450.00")]
    assert [t.fee for t in trades] == [Decimal("1.16"), Decimal("2.15"), Decimal("0")]
    assert trades[0].timestamp == datetime(2014, 1, 2, 10, 0, tzinfo=timezone(timedelta(hours=-8)))
    assert trades[0].source_row_ref == "line 4"
    assert trades[2].source_row_ref == "line 7"
    assert reader.reader_skipped_rows == 1


def test_parsing_coinbase_csv_notes_fallback_strips_commas_and_rebuilds_fee() -> None:
    """Recover totals containing thousands separators and rebuild the schedule fee."""

    csv_text = _HEADER + '2014-02-01 09:30:00 -0800,0.0,-10.0,,"Sold 10.0 BTC for $1,010.15.",,\n'

    trades = list(_build_reader().reader_iter_trades(csv_text.splitlines(keepends=True)))

    assert len(trades) == 1
    assert trades[0].gross_proceeds == Decimal("1010.15")
    assert trades[0].fee == Decimal("10.15")
    assert trades[0].unit_price == Decimal("100.00")


def test_parsing_coinbase_csv_notes_fallback_prefers_populated_fee_column() -> None:
    """Use the explicit fee column over the fee schedule when it is populated."""

    csv_text = _HEADER + "2014-02-01 09:30:00 -0800,1.0,1.0,,Bought 1.0 BTC for $101.16.,,0.99\n"

    trades = list(_build_reader().reader_iter_trades(csv_text.splitlines(keepends=True)))

    assert trades[0].gross_proceeds == Decimal("101.16")
    assert trades[0].fee == Decimal("0.99")


def test_parsing_coinbase_csv_skip_policy_logs_or_raises(caplog: pytest.LogCaptureFixture) -> None:
    """Skip unmatched rows with a warning by default and raise in strict mode.

    Args:
        caplog: Pytest log capture fixture.

    Returns:
        None: Assertions validate both skip policies.

    Raises:
        AssertionError: Raised when skip policy behavior is incorrect.
    """

    csv_text = _HEADER + "2014-02-01 09:30:00 -0800,1.0,0.5,,Sent 0.5 BTC to a friend,,\n"
    lines = csv_text.splitlines(keepends=True)

    lenient_reader = _build_reader()
    with caplog.at_level(logging.WARNING, logger="coinledger.parsing.coinbase_csv"):
        assert list(lenient_reader.reader_iter_trades(lines)) == []
    assert lenient_reader.reader_skipped_rows == 1
    assert "line 4" in caplog.text

    strict_reader = _build_reader(skip_unmatched_rows=False)
    with pytest.raises(MalformedInputError) as error_info:
        list(strict_reader.reader_iter_trades(lines))
    assert error_info.value.source_row_ref == "line 4"


@pytest.mark.parametrize(
    "data_row",
    [
        "yesterday,1.0,1.0,,Bought 1.0 BTC for $100.00.,100.00,\n",
        "2014-02-01 09:30:00 -0800,1.0,one,,Bought 1.0 BTC for $100.00.,100.00,\n",
        "2014-02-01 09:30:00 -0800,1.0,1.0,,Bought 1.0 BTC for $100.00.,1OO.00,\n",
        "2014-02-01 09:30:00 -0800,1.0\n",
    ],
)
def test_parsing_coinbase_csv_rejects_malformed_rows(data_row: str) -> None:
    """Reject bad timestamps, non-numeric fields, and truncated rows."""

    with pytest.raises(MalformedInputError):
        list(_build_reader().reader_iter_trades((_HEADER + data_row).splitlines(keepends=True)))


def test_parsing_coinbase_csv_rejects_blank_amount() -> None:
    """Reject a data row whose amount cell is blank instead of skipping it."""

    data_row = "2014-01-02 10:00:00 -0800,1.0,,,Received,,\n"

    with pytest.raises(MalformedInputError) as error_info:
        list(_build_reader().reader_iter_trades((_HEADER + data_row).splitlines(keepends=True)))

    assert error_info.value.source_row_ref == "line 4"


def test_parsing_coinbase_csv_reports_undecodable_bytes_as_malformed_input() -> None:
    """Surface undecodable export bytes as malformed input rather than a codec error."""

    raw_export = (_HEADER + "2014-01-02 10:00:00 -0800,1.0,1.0,,Bought \xff,100.00,\n").encode("latin-1")
    lines = io.TextIOWrapper(io.BytesIO(raw_export), encoding="utf-8", newline="")

    with pytest.raises(MalformedInputError) as error_info:
        list(_build_reader().reader_iter_trades(lines))

    assert isinstance(error_info.value.__cause__, UnicodeDecodeError)


def test_parsing_coinbase_csv_streams_lazily_until_bad_row() -> None:
    """Yield earlier trades before a later malformed row is reached."""

    csv_text = (
        _HEADER
        + "2014-02-01 09:30:00 -0800,1.0,1.0,,,100.00,\n"
        + "\n"
        + "garbage,1.0,1.0,,,100.00,\n"
    )

    trade_stream = _build_reader().reader_iter_trades(csv_text.splitlines(keepends=True))

    first_trade = next(trade_stream)
    assert first_trade.gross_proceeds == Decimal("100.00")
    with pytest.raises(MalformedInputError):
        next(trade_stream)


def test_parsing_coinbase_csv_supports_custom_layout_and_naive_iso_timestamps() -> None:
    """Honor injected column layout and treat naive ISO timestamps as UTC."""

    layout = CoinbaseCsvLayout(
        header_rows=1,
        timestamp_column=0,
        amount_column=1,
        description_column=2,
        total_column=3,
        fee_column=None,
    )
    csv_text = "when,amount,notes,total\n2015-03-04T05:06:07,-0.25,,50.00\n"

    trades = list(_build_reader(layout=layout).reader_iter_trades(csv_text.splitlines(keepends=True)))

    assert trades[0].timestamp == datetime(2015, 3, 4, 5, 6, 7, tzinfo=timezone.utc)
    assert trades[0].asset_amount == Decimal("-0.25")
    assert trades[0].fee == Decimal("0")


def test_parsing_fee_schedule_never_returns_negative_subtotal() -> None:
    """Attribute the whole total to the fee when it is below the flat fee."""

    fee_schedule = FeeSchedule(
        flat_amount=Decimal("0.15"),
        percentage_rate=Decimal("0.01"),
        description_pattern=re.compile(DEFAULT_FEE_DESCRIPTION_PATTERN),
    )

    assert fee_schedule.fee_schedule_reconstruct_fee(Decimal("0.10")) == Decimal("0.10")
    assert fee_schedule.fee_schedule_reconstruct_fee(Decimal("202.15")) == Decimal("2.15")
    assert fee_schedule.fee_schedule_match_total("Bought 1 BTC for for $5.00.") == Decimal("5.00")
    assert fee_schedule.fee_schedule_match_total("Sent 1 BTC") is None
