"""Ledger layer package for FIFO lot matching and realized gains."""

from .interfaces import DIRECTION_BUY, DIRECTION_SELL, LedgerEntry, LotLedgerPort, LotSlice, OpenLotView
from .fifo_engine import FifoLotLedger

__all__ = [
	"DIRECTION_BUY",
	"DIRECTION_SELL",
	"LedgerEntry",
	"LotLedgerPort",
	"LotSlice",
	"OpenLotView",
	"FifoLotLedger",
]
