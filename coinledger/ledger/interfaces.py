"""Typed interfaces for ledger-layer computations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Final, Protocol

from coinledger.domain import Trade

DIRECTION_BUY: Final[str] = "buy"
DIRECTION_SELL: Final[str] = "sell"


@dataclass(frozen=True)
class LotSlice:
    """One open-lot consumption produced by a disposal.

    Attributes:
        consumed_amount: Asset quantity taken from the lot.
        lot_unit_price: Cost basis per unit of the consumed lot.
        disposal_unit_price: Net disposal price per unit of the sale.
        cost_basis: `consumed_amount * lot_unit_price` rounded to currency scale.
        lot_opened_at: Acquisition timestamp of the consumed lot.
    """

    consumed_amount: Decimal
    lot_unit_price: Decimal
    disposal_unit_price: Decimal
    cost_basis: Decimal
    lot_opened_at: datetime


@dataclass(frozen=True)
class LedgerEntry:
    """Per-trade ledger output consumed by formatters.

    Attributes:
        timestamp: Trade timestamp.
        direction: `buy` or `sell`.
        asset_amount: Unsigned traded quantity.
        unit_price: Lot cost basis per unit for buys, net disposal price per unit for sells.
        gross_proceeds: Unsigned currency total of the trade.
        fee: Unsigned venue fee.
        cost_basis: Acquired cost for buys, sum of matched slice bases for sells.
        matched_slices: Ordered consumed lots; empty for buys.
        realized_gain: Gain net of fee for sells, None for buys.
        source_row_ref: Optional source row locator.
    """

    timestamp: datetime
    direction: str
    asset_amount: Decimal
    unit_price: Decimal
    gross_proceeds: Decimal
    fee: Decimal
    cost_basis: Decimal
    matched_slices: tuple[LotSlice, ...] = ()
    realized_gain: Decimal | None = None
    source_row_ref: str | None = None

    def entry_is_acquisition(self) -> bool:
        """Return whether this entry records a buy."""

        return self.direction == DIRECTION_BUY


@dataclass(frozen=True)
class OpenLotView:
    """Read-only snapshot of one open lot.

    Attributes:
        opened_at: Acquisition timestamp.
        original_amount: Quantity acquired.
        remaining_amount: Quantity not yet sold.
        unit_price: Immutable cost basis per unit.
        source_row_ref: Optional source row locator of the acquisition.
    """

    opened_at: datetime
    original_amount: Decimal
    remaining_amount: Decimal
    unit_price: Decimal
    source_row_ref: str | None


class LotLedgerPort(Protocol):
    """Port definition for stateful lot-matching engines."""

    def ledger_policy_name(self) -> str:
        """Return policy label for the active lot-matching strategy.

        Returns:
            str: Ledger policy identifier.

        Raises:
            RuntimeError: Raised when policy metadata is unavailable.
        """

    def ledger_record_trade(self, trade: Trade) -> LedgerEntry:
        """Apply one trade to open-lot state and describe its ledger effect.

        Args:
            trade: Normalized trade in chronological order.

        Returns:
            LedgerEntry: Per-trade ledger output.

        Raises:
            InvalidTradeError: Raised when trade values are invalid.
            InsufficientLotsError: Raised when a disposal exceeds open lots.
        """

    def ledger_open_lots(self) -> tuple[OpenLotView, ...]:
        """Return open lots oldest first.

        Returns:
            tuple[OpenLotView, ...]: Open lot snapshots.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """
