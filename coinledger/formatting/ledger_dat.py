"""Ledger-cli text rendering for FIFO ledger entries."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from coinledger.domain.money import ZERO, money_format, money_round_currency
from coinledger.ledger import LedgerEntry


@dataclass(frozen=True)
class LedgerDatFormatConfig:
    """Presentation settings for rendered ledger transactions.

    Attributes:
        asset_name: Asset name used in transaction payees.
        asset_symbol: Commodity symbol of the traded asset.
        currency_symbol: Commodity symbol of the base currency.
        account_asset: Account holding the asset.
        account_cash: Account holding cash.
        account_fees: Expense account for venue fees.
        account_capital_gains: Income account for realized gains.
        date_format: `strftime` format for transaction dates.
    """

    asset_name: str = "Bitcoin"
    asset_symbol: str = "BTC"
    currency_symbol: str = "$"
    account_asset: str = "Assets:Coinbase"
    account_cash: str = "Assets:Cash"
    account_fees: str = "Expenses:Fees"
    account_capital_gains: str = "Income:Capital Gains"
    date_format: str = "%Y-%m-%d"


class LedgerDatFormatter:
    """Render ledger entries as ledger-cli transactions."""

    def __init__(self, config: LedgerDatFormatConfig | None = None):
        self._config = config or LedgerDatFormatConfig()

    def formatter_render_entry(self, entry: LedgerEntry) -> str:
        """Render one entry as a ledger transaction block.

        Buys post the acquired lot at its cost basis and any fee expense against
        the cash paid. Sells post one asset line per matched lot slice, the net cash
        received, and the realized gain on the income account (negative for a
        gain). The sale fee is already netted into the gain, so sells carry no
        fee posting.

        Args:
            entry: Ledger entry produced by the lot ledger.

        Returns:
            str: Transaction text terminated by a blank line.

        Raises:
            ValueError: Raised when a sell entry has no realized gain.
        """

        config = self._config
        date_text = entry.timestamp.strftime(config.date_format)

        if entry.entry_is_acquisition():
            lines = [
                f"{date_text}\t{config.asset_name} bought",
                f"\t{config.account_asset}\t{money_format(entry.asset_amount)} {config.asset_symbol} "
                f"{{{self._formatter_price(entry.unit_price)}}}",
            ]
            lines.extend(self._formatter_fee_lines(entry.fee))
            lines.append(f"\t{config.account_cash}\t{self._formatter_currency(-entry.gross_proceeds)}")
            return "\n".join(lines) + "\n\n"

        if entry.realized_gain is None:
            raise ValueError("sell entry must carry realized_gain")

        lines = [f"{date_text}\t{config.asset_name} sold"]
        for lot_slice in entry.matched_slices:
            lines.append(
                f"\t{config.account_asset}\t{money_format(-lot_slice.consumed_amount)} {config.asset_symbol} "
                f"{{{self._formatter_price(lot_slice.lot_unit_price)}}} @ "
                f"{self._formatter_price(lot_slice.disposal_unit_price)}"
            )
        lines.append(f"\t{config.account_cash}\t{self._formatter_currency(entry.gross_proceeds - entry.fee)}")
        lines.append(f"\t{config.account_capital_gains}\t{self._formatter_currency(-entry.realized_gain)}")
        return "\n".join(lines) + "\n\n"

    def formatter_render_entries(self, entries: Iterable[LedgerEntry]) -> str:
        """Render entries in order and join them into one document."""

        return "".join(self.formatter_render_entry(entry) for entry in entries)

    def _formatter_fee_lines(self, fee: Decimal) -> list[str]:
        if fee == ZERO:
            return []
        return [f"\t{self._config.account_fees}\t{self._formatter_currency(fee)}"]

    def _formatter_price(self, value: Decimal) -> str:
        return f"{self._config.currency_symbol} {money_format(money_round_currency(value))}"

    def _formatter_currency(self, value: Decimal) -> str:
        rounded_value = money_round_currency(value)
        if rounded_value < ZERO:
            return f"-{self._config.currency_symbol} {money_format(-rounded_value)}"
        return f"{self._config.currency_symbol} {money_format(abs(rounded_value))}"


__all__ = ["LedgerDatFormatConfig", "LedgerDatFormatter"]
