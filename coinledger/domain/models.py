"""Typed domain models shared across runtime layers.

This module provides the normalized trade contract produced by parsers and
consumed by the FIFO lot ledger, plus a small metadata contract for the API.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from .money import ZERO, money_divide_currency


@dataclass(frozen=True)
class AppMetadata:
    """Static application metadata for runtime identification.

    Attributes:
        application_name: Human-readable app name.
        environment_name: Runtime environment label.
    """

    application_name: str
    environment_name: str


@dataclass(frozen=True)
class Trade:
    """One normalized historical buy or sell event.

    Attributes:
        timestamp: Offset-aware execution timestamp in source order.
        asset_amount: Signed asset quantity; positive buys, negative sells.
        gross_proceeds: Unsigned total currency amount exchanged.
        fee: Unsigned venue fee charged for the trade.
        source_row_ref: Optional source row locator for diagnostics.
    """

    timestamp: datetime
    asset_amount: Decimal
    gross_proceeds: Decimal
    fee: Decimal = ZERO
    source_row_ref: str | None = None

    def trade_is_acquisition(self) -> bool:
        """Return whether this trade acquires the asset.

        Returns:
            bool: True for buys, False for sells.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return self.asset_amount > ZERO

    def trade_quantity(self) -> Decimal:
        """Return the unsigned traded quantity."""

        return abs(self.asset_amount)

    @property
    def unit_price(self) -> Decimal:
        """Net currency amount per asset unit, rounded to currency scale.

        Returns:
            Decimal: `abs((gross_proceeds - fee) / asset_amount)` rounded half-up.

        Raises:
            InvalidTradeError: Raised when `asset_amount` is zero.
        """

        return abs(money_divide_currency(self.gross_proceeds - self.fee, self.asset_amount))
