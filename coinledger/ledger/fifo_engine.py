"""FIFO lot-matching engine for capital-gains computation."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from coinledger.domain import InsufficientLotsError, InvalidTradeError, Trade
from coinledger.domain.money import ZERO, money_divide_currency, money_multiply_currency

from .interfaces import DIRECTION_BUY, DIRECTION_SELL, LedgerEntry, LotSlice, OpenLotView

logger = logging.getLogger(__name__)


@dataclass
class _OpenFifoLot:
    """Mutable internal lot state used during FIFO processing."""

    opened_at: datetime
    original_amount: Decimal
    remaining_amount: Decimal
    unit_price: Decimal
    source_row_ref: str | None


class FifoLotLedger:
    """Track open acquisition lots and realize gains oldest-first.

    One instance covers one processing run. Lots left open at the end of the
    run are dropped with the instance. Not thread-safe.
    """

    def __init__(self) -> None:
        self._open_lots: deque[_OpenFifoLot] = deque()
        self._realized_gain_total = ZERO

    def ledger_policy_name(self) -> str:
        """Return policy label for this engine.

        Returns:
            str: Always `fifo`.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return "fifo"

    def ledger_record_trade(self, trade: Trade) -> LedgerEntry:
        """Apply one trade to open-lot state and describe its ledger effect.

        Inputs are validated before any state mutation, so a rejected trade
        leaves the open-lot queue untouched.

        Args:
            trade: Normalized trade in chronological order.

        Returns:
            LedgerEntry: Buy entry, or sell entry with matched slices and realized gain.

        Raises:
            InvalidTradeError: Raised for zero amounts or negative proceeds/fees.
            InsufficientLotsError: Raised when a disposal exceeds the open quantity.
        """

        if trade is None:
            raise InvalidTradeError("trade must not be None")
        if trade.asset_amount == ZERO:
            raise InvalidTradeError(f"asset amount must not be zero ({_ledger_describe(trade)})")
        if trade.gross_proceeds < ZERO:
            raise InvalidTradeError(f"gross proceeds must not be negative ({_ledger_describe(trade)})")
        if trade.fee < ZERO:
            raise InvalidTradeError(f"fee must not be negative ({_ledger_describe(trade)})")

        if trade.trade_is_acquisition():
            return self._ledger_record_acquisition(trade)
        return self._ledger_record_disposal(trade)

    def ledger_open_lots(self) -> tuple[OpenLotView, ...]:
        """Return open lots oldest first.

        Returns:
            tuple[OpenLotView, ...]: Open lot snapshots.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return tuple(
            OpenLotView(
                opened_at=lot.opened_at,
                original_amount=lot.original_amount,
                remaining_amount=lot.remaining_amount,
                unit_price=lot.unit_price,
                source_row_ref=lot.source_row_ref,
            )
            for lot in self._open_lots
        )

    def ledger_open_quantity(self) -> Decimal:
        """Return total remaining quantity across open lots."""

        return sum((lot.remaining_amount for lot in self._open_lots), ZERO)

    def ledger_realized_gain_total(self) -> Decimal:
        """Return realized gain accumulated across all recorded disposals."""

        return self._realized_gain_total

    def _ledger_record_acquisition(self, trade: Trade) -> LedgerEntry:
        unit_price = trade.unit_price
        self._open_lots.append(
            _OpenFifoLot(
                opened_at=trade.timestamp,
                original_amount=trade.asset_amount,
                remaining_amount=trade.asset_amount,
                unit_price=unit_price,
                source_row_ref=trade.source_row_ref,
            )
        )
        logger.debug("Opened lot %s @ %s (%d open)", trade.asset_amount, unit_price, len(self._open_lots))

        return LedgerEntry(
            timestamp=trade.timestamp,
            direction=DIRECTION_BUY,
            asset_amount=trade.asset_amount,
            unit_price=unit_price,
            gross_proceeds=trade.gross_proceeds,
            fee=trade.fee,
            cost_basis=money_multiply_currency(trade.asset_amount, unit_price),
            source_row_ref=trade.source_row_ref,
        )

    def _ledger_record_disposal(self, trade: Trade) -> LedgerEntry:
        quantity = trade.trade_quantity()
        available_quantity = self.ledger_open_quantity()
        if quantity > available_quantity:
            raise InsufficientLotsError(
                f"cannot sell {quantity} with only {available_quantity} in open lots ({_ledger_describe(trade)})",
                requested_amount=quantity,
                available_amount=available_quantity,
            )

        disposal_unit_price = abs(money_divide_currency(trade.gross_proceeds - trade.fee, quantity))
        quantity_to_sell = quantity
        realized_gain = trade.gross_proceeds
        cost_basis_total = ZERO
        matched_slices: list[LotSlice] = []

        while quantity_to_sell > ZERO:
            current_lot = self._open_lots[0]
            consumed_amount = min(quantity_to_sell, current_lot.remaining_amount)

            current_lot.remaining_amount -= consumed_amount
            if current_lot.remaining_amount == ZERO:
                self._open_lots.popleft()
            quantity_to_sell -= consumed_amount

            slice_cost_basis = money_multiply_currency(consumed_amount, current_lot.unit_price)
            realized_gain -= slice_cost_basis
            cost_basis_total += slice_cost_basis
            matched_slices.append(
                LotSlice(
                    consumed_amount=consumed_amount,
                    lot_unit_price=current_lot.unit_price,
                    disposal_unit_price=disposal_unit_price,
                    cost_basis=slice_cost_basis,
                    lot_opened_at=current_lot.opened_at,
                )
            )

        # Sale proceeds are pre-fee, so the fee is deducted exactly once here.
        realized_gain -= trade.fee
        self._realized_gain_total += realized_gain
        logger.debug(
            "Sold %s across %d lots, realized gain %s (%d open)",
            quantity,
            len(matched_slices),
            realized_gain,
            len(self._open_lots),
        )

        return LedgerEntry(
            timestamp=trade.timestamp,
            direction=DIRECTION_SELL,
            asset_amount=quantity,
            unit_price=disposal_unit_price,
            gross_proceeds=trade.gross_proceeds,
            fee=trade.fee,
            cost_basis=cost_basis_total,
            matched_slices=tuple(matched_slices),
            realized_gain=realized_gain,
            source_row_ref=trade.source_row_ref,
        )


def _ledger_describe(trade: Trade) -> str:
    """Build a short trade locator for error messages."""

    if trade.source_row_ref:
        return f"{trade.source_row_ref}, {trade.timestamp.isoformat()}"
    return trade.timestamp.isoformat()
