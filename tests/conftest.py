"""Shared export fixtures for conversion pipeline tests."""

import pytest

from coinledger.config import AppSettings

SAMPLE_EXPORT_CSV = (
    "User,Jane Doe,5f1e\n"
    "BTC Wallet,1AbCdEf\n"
    "Timestamp,Balance,BTC Amount,To,Notes,Transfer Total,Transfer Fee\n"
    "2014-01-02 10:00:00 -0800,1.0,1.0,,Bought 1.0 BTC for $101.16.,101.16,1.16\n"
    "2014-01-03 10:00:00 -0800,2.0,1.0,,Bought 1.0 BTC for $202.15.,,\n"
    "2014-01-04 10:00:00 -0800,2.1,0.1,,Received 0.1 BTC from a friend,,\n"
    "2014-01-05 10:00:00 -0800,0.6,-1.5,,Sold 1.5 BTC for $450.00.,450.00,\n"
)

SAMPLE_EXPORT_LEDGER = (
    "2014-01-02\tBitcoin bought\n"
    "\tAssets:Coinbase\t1.0 BTC {$ 100.00}\n"
    "\tExpenses:Fees\t$ 1.16\n"
    "\tAssets:Cash\t-$ 101.16\n"
    "\n"
    "2014-01-03\tBitcoin bought\n"
    "\tAssets:Coinbase\t1.0 BTC {$ 200.00}\n"
    "\tExpenses:Fees\t$ 2.15\n"
    "\tAssets:Cash\t-$ 202.15\n"
    "\n"
    "2014-01-05\tBitcoin sold\n"
    "\tAssets:Coinbase\t-1.0 BTC {$ 100.00} @ $ 300.00\n"
    "\tAssets:Coinbase\t-0.5 BTC {$ 200.00} @ $ 300.00\n"
    "\tAssets:Cash\t$ 450.00\n"
    "\tIncome:Capital Gains\t-$ 250.00\n"
    "\n"
)

OVERSOLD_EXPORT_CSV = (
    "User,Jane Doe,5f1e\n"
    "BTC Wallet,1AbCdEf\n"
    "Timestamp,Balance,BTC Amount,To,Notes,Transfer Total,Transfer Fee\n"
    "2014-01-02 10:00:00 -0800,1.0,1.0,,Bought 1.0 BTC for $100.00.,100.00,\n"
    "2014-01-03 10:00:00 -0800,0.0,-2.0,,Sold 2.0 BTC for $300.00.,300.00,\n"
)


@pytest.fixture(name="settings")
def settings_fixture(monkeypatch: pytest.MonkeyPatch) -> AppSettings:
    """Provide default settings isolated from a developer `.env` file."""

    for variable_name in ("INPUT_PATH", "OUTPUT_PATH", "LOG_LEVEL", "TRADE_SORT_ENABLED", "SKIP_UNMATCHED_ROWS"):
        monkeypatch.delenv(variable_name, raising=False)
    return AppSettings(_env_file=None)


@pytest.fixture(name="sample_export_csv")
def sample_export_csv_fixture() -> str:
    """Provide a small export with fee-column, notes-fallback, and skipped rows."""

    return SAMPLE_EXPORT_CSV


@pytest.fixture(name="sample_export_ledger")
def sample_export_ledger_fixture() -> str:
    """Provide the expected ledger rendering of the sample export."""

    return SAMPLE_EXPORT_LEDGER


@pytest.fixture(name="oversold_export_csv")
def oversold_export_csv_fixture() -> str:
    """Provide an export selling more than it ever bought."""

    return OVERSOLD_EXPORT_CSV
