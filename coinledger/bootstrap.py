"""Application bootstrap wiring for startup validation and dependency assembly."""

from __future__ import annotations

import re

from fastapi import FastAPI

from coinledger.api import create_api_application
from coinledger.config import AppSettings, config_load_settings
from coinledger.formatting import LedgerDatFormatConfig, LedgerDatFormatter
from coinledger.jobs import ConversionJobOrchestrator, ConversionOrchestratorConfig
from coinledger.parsing import CoinbaseCsvLayout, CoinbaseCsvTradeReader, FeeSchedule


def bootstrap_create_trade_reader(settings: AppSettings) -> CoinbaseCsvTradeReader:
    """Build one Coinbase CSV reader from validated settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        CoinbaseCsvTradeReader: Fresh reader with zeroed counters.

    Raises:
        ValueError: Raised when reader dependencies are invalid.
    """

    layout = CoinbaseCsvLayout(
        header_rows=settings.csv_header_rows,
        timestamp_column=settings.csv_timestamp_column,
        amount_column=settings.csv_amount_column,
        description_column=settings.csv_description_column,
        total_column=settings.csv_total_column,
        fee_column=settings.csv_fee_column,
        timestamp_format=settings.csv_timestamp_format,
    )
    fee_schedule = FeeSchedule(
        flat_amount=settings.fee_flat_amount,
        percentage_rate=settings.fee_percentage_rate,
        description_pattern=re.compile(settings.fee_description_pattern),
    )
    return CoinbaseCsvTradeReader(
        layout=layout,
        fee_schedule=fee_schedule,
        skip_unmatched_rows=settings.skip_unmatched_rows,
    )


def bootstrap_create_conversion_orchestrator(
    settings: AppSettings | None = None,
    input_path: str | None = None,
    output_path: str | None = None,
) -> ConversionJobOrchestrator:
    """Build conversion orchestrator for CLI and HTTP trigger surfaces.

    Args:
        settings: Optional pre-validated settings; loaded from environment when omitted.
        input_path: Optional input path override.
        output_path: Optional output path override.

    Returns:
        ConversionJobOrchestrator: Fully wired conversion orchestrator instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    formatter = LedgerDatFormatter(
        LedgerDatFormatConfig(
            asset_name=resolved_settings.asset_name,
            asset_symbol=resolved_settings.asset_symbol,
            currency_symbol=resolved_settings.currency_symbol,
            account_asset=resolved_settings.account_asset,
            account_cash=resolved_settings.account_cash,
            account_fees=resolved_settings.account_fees,
            account_capital_gains=resolved_settings.account_capital_gains,
            date_format=resolved_settings.ledger_date_format,
        )
    )
    return ConversionJobOrchestrator(
        trade_reader_factory=lambda: bootstrap_create_trade_reader(resolved_settings),
        formatter=formatter,
        config=ConversionOrchestratorConfig(
            input_path=(input_path or resolved_settings.input_path).strip(),
            output_path=(output_path or resolved_settings.output_path).strip(),
            trade_sort_enabled=resolved_settings.trade_sort_enabled,
        ),
    )


def bootstrap_create_application(settings: AppSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Args:
        settings: Optional pre-validated settings; loaded from environment when omitted.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    return create_api_application(
        settings=resolved_settings,
        conversion_orchestrator=bootstrap_create_conversion_orchestrator(settings=resolved_settings),
    )
