"""Configuration package for runtime settings and startup validation."""

from .settings import DEFAULT_FEE_DESCRIPTION_PATTERN, AppSettings, SettingsLoadError, config_load_settings

__all__ = ["AppSettings", "DEFAULT_FEE_DESCRIPTION_PATTERN", "SettingsLoadError", "config_load_settings"]
