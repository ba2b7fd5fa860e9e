"""Formatting layer package for ledger text output."""

from .ledger_dat import LedgerDatFormatConfig, LedgerDatFormatter

__all__ = ["LedgerDatFormatConfig", "LedgerDatFormatter"]
