"""Configuration package."""

from beanbot.config.settings import (
    AppSettings,
    ConfigurationError,
    GitHubSettings,
    LedgerSettings,
    Settings,
    get_settings,
    load_ledger_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "ConfigurationError",
    "GitHubSettings",
    "LedgerSettings",
    "Settings",
    "get_settings",
    "load_ledger_settings",
    "validate_all_settings",
]
