"""Parsing layer package for brokerage export readers."""

from .interfaces import TradeSourcePort
from .coinbase_csv import CoinbaseCsvLayout, CoinbaseCsvTradeReader, FeeSchedule

__all__ = [
	"TradeSourcePort",
	"CoinbaseCsvLayout",
	"CoinbaseCsvTradeReader",
	"FeeSchedule",
]
