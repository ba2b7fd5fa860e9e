"""Regression tests for runtime settings loading and validation."""

from decimal import Decimal

import pytest

from coinledger.config import SettingsLoadError, config_load_settings


def test_config_settings_defaults_and_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Load defaults and apply environment overrides with exact decimals.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate loaded settings.

    Raises:
        AssertionError: Raised when settings loading is incorrect.
    """

    monkeypatch.delenv("INPUT_PATH", raising=False)
    monkeypatch.setenv("FEE_FLAT_AMOUNT", "0.30")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = config_load_settings(_env_file=None)

    assert settings.input_path == "coinbase.csv"
    assert settings.csv_header_rows == 3
    assert settings.fee_flat_amount == Decimal("0.30")
    assert settings.fee_percentage_rate == Decimal("0.01")
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    "overrides",
    [
        {"fee_description_pattern": "(Bought|Sold) ([0-9.]+) BTC"},
        {"fee_description_pattern": "(?P<total>[0-9"},
        {"log_level": "chatty"},
        {"fee_percentage_rate": Decimal("1")},
        {"output_path": "   "},
    ],
)
def test_config_settings_rejects_invalid_values(overrides: dict[str, object]) -> None:
    """Wrap validation failures in a settings load error."""

    with pytest.raises(SettingsLoadError):
        config_load_settings(_env_file=None, **overrides)
