"""Typed interfaces for transaction-source parsing responsibilities."""

from collections.abc import Iterable, Iterator
from typing import Protocol

from coinledger.domain import Trade


class TradeSourcePort(Protocol):
    """Port definition for turning raw export text into normalized trades."""

    reader_skipped_rows: int

    def reader_iter_trades(self, lines: Iterable[str]) -> Iterator[Trade]:
        """Yield normalized trades lazily in source order.

        Args:
            lines: Raw export lines.

        Returns:
            Iterator[Trade]: Single-pass trade stream; exhaustion ends the input.

        Raises:
            MalformedInputError: Raised when one row cannot be parsed.
        """
