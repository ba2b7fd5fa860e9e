"""Typed runtime settings with dotenv support and startup validation."""

from __future__ import annotations

import logging
import re
from decimal import Decimal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FEE_DESCRIPTION_PATTERN = r"(?P<side>Bought|Sold) (?P<asset_amount>[0-9.]+) BTC (for )+\$(?P<total>[0-9,.]+)\."


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for conversion runs and the HTTP surface.

    Environment variable names map directly to field names in uppercase.
    Example: `input_path` reads from `INPUT_PATH`.

    Attributes:
        environment_name: Runtime environment label.
        application_host: Host interface for web server binding.
        application_port: Web server port.
        log_level: Root logging level name.
        input_path: Source CSV export path.
        output_path: Target ledger file path.
        csv_header_rows: Leading metadata/header rows to skip.
        csv_timestamp_column: Column index of the trade timestamp.
        csv_amount_column: Column index of the signed asset amount.
        csv_description_column: Column index of the free-text notes.
        csv_total_column: Column index of the currency total.
        csv_fee_column: Column index of the venue fee, or None when absent.
        csv_timestamp_format: `strptime` format of the timestamp column.
        fee_flat_amount: Venue flat fee per trade.
        fee_percentage_rate: Venue percentage fee applied to the subtotal.
        fee_description_pattern: Regex with a `total` group for notes-only rows.
        skip_unmatched_rows: Skip rows with no total and no pattern match instead of failing.
        trade_sort_enabled: Stable-sort trades by timestamp before lot matching.
        asset_name: Human-readable asset name used in transaction payees.
        asset_symbol: Commodity symbol of the traded asset.
        currency_symbol: Commodity symbol of the base currency.
        account_asset: Ledger account holding the asset.
        account_cash: Ledger account holding cash.
        account_fees: Ledger expense account for fees.
        account_capital_gains: Ledger income account for realized gains.
        ledger_date_format: `strftime` format for transaction dates.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="development")
    application_host: str = Field(default="0.0.0.0")
    application_port: int = Field(default=8000, ge=1, le=65535)
    log_level: str = Field(default="INFO")
    input_path: str = Field(default="coinbase.csv", min_length=1)
    output_path: str = Field(default="ledger.dat", min_length=1)
    csv_header_rows: int = Field(default=3, ge=0)
    csv_timestamp_column: int = Field(default=0, ge=0)
    csv_amount_column: int = Field(default=2, ge=0)
    csv_description_column: int = Field(default=4, ge=0)
    csv_total_column: int = Field(default=5, ge=0)
    csv_fee_column: int | None = Field(default=6, ge=0)
    csv_timestamp_format: str = Field(default="%Y-%m-%d %H:%M:%S %z", min_length=1)
    fee_flat_amount: Decimal = Field(default=Decimal("0.15"), ge=0)
    fee_percentage_rate: Decimal = Field(default=Decimal("0.01"), ge=0, lt=1)
    fee_description_pattern: str = Field(default=DEFAULT_FEE_DESCRIPTION_PATTERN)
    skip_unmatched_rows: bool = Field(default=True)
    trade_sort_enabled: bool = Field(default=False)
    asset_name: str = Field(default="Bitcoin", min_length=1)
    asset_symbol: str = Field(default="BTC", min_length=1)
    currency_symbol: str = Field(default="$", min_length=1)
    account_asset: str = Field(default="Assets:Coinbase", min_length=1)
    account_cash: str = Field(default="Assets:Cash", min_length=1)
    account_fees: str = Field(default="Expenses:Fees", min_length=1)
    account_capital_gains: str = Field(default="Income:Capital Gains", min_length=1)
    ledger_date_format: str = Field(default="%Y-%m-%d", min_length=1)

    @field_validator("input_path", "output_path", "asset_symbol", "account_asset", "account_cash", "account_fees", "account_capital_gains")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if normalized_value not in logging.getLevelNamesMapping():
            raise ValueError(f"unsupported log_level={value}")
        return normalized_value

    @field_validator("fee_description_pattern")
    @classmethod
    def _validate_fee_description_pattern(cls, value: str) -> str:
        try:
            compiled_pattern = re.compile(value)
        except re.error as error:
            raise ValueError(f"fee_description_pattern is not a valid regex: {error}") from error
        if "total" not in compiled_pattern.groupindex:
            raise ValueError("fee_description_pattern must define a named group `total`")
        return value


def config_load_settings(**overrides: object) -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Args:
        overrides: Explicit field values that take precedence over the environment.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when required settings are missing or invalid.
    """

    try:
        return AppSettings(**overrides)
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
