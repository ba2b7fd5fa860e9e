"""Project-native typed exceptions for conversion pipeline failures."""

from __future__ import annotations

from decimal import Decimal


class CoinLedgerError(Exception):
    """Base exception for conversion pipeline failures.

    Attributes:
        error_code: Stable machine-readable failure code.
    """

    error_code = "COIN_LEDGER_ERROR"

    def __init__(self, message: str):
        super().__init__(message)


class MalformedInputError(CoinLedgerError, ValueError):
    """Source row cannot be parsed into a trade.

    Attributes:
        source_row_ref: Optional row locator for operator diagnostics.
    """

    error_code = "MALFORMED_INPUT"

    def __init__(self, message: str, source_row_ref: str | None = None):
        if source_row_ref is not None:
            message = f"{message} (row={source_row_ref})"
        super().__init__(message)
        self.source_row_ref = source_row_ref


class InvalidTradeError(CoinLedgerError, ValueError):
    """Trade values violate ledger input constraints."""

    error_code = "INVALID_TRADE"


class InsufficientLotsError(CoinLedgerError, RuntimeError):
    """Disposal quantity exceeds the open lot quantity.

    Attributes:
        requested_amount: Quantity the disposal tried to sell.
        available_amount: Quantity held in open lots at rejection time.
    """

    error_code = "INSUFFICIENT_LOTS"

    def __init__(self, message: str, requested_amount: Decimal, available_amount: Decimal):
        super().__init__(message)
        self.requested_amount = requested_amount
        self.available_amount = available_amount


class InputFileNotFoundError(CoinLedgerError, FileNotFoundError):
    """Configured input history file does not exist."""

    error_code = "INPUT_NOT_FOUND"
