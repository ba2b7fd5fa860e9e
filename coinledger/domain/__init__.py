"""Domain models used across application layer boundaries."""

from .errors import (
    CoinLedgerError,
    InputFileNotFoundError,
    InsufficientLotsError,
    InvalidTradeError,
    MalformedInputError,
)
from .models import AppMetadata, Trade

__all__ = [
    "AppMetadata",
    "Trade",
    "CoinLedgerError",
    "InputFileNotFoundError",
    "InsufficientLotsError",
    "InvalidTradeError",
    "MalformedInputError",
]
