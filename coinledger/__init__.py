"""Coinbase export to double-entry ledger converter with FIFO capital gains."""
