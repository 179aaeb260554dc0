"""
Configuration Management for Beanbot

Uses pydantic-settings for type-safe configuration from environment
variables and a TOML document.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
A missing or malformed ledger configuration is fatal: the bot never
runs with a partial account mapping.
"""

import os
import re
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)


CONFIG_FILE_ENV = "BEANBOT_CONFIG_FILE"
DEFAULT_CONFIG_FILE = "config.toml"

ACCOUNT_PATH_RE = re.compile(r"^[^\s:]+(?::[^\s:]+)*$")


class ConfigurationError(Exception):
    """Settings are missing or malformed. Fatal at startup."""
    pass


def config_file_path() -> Path:
    """Path of the TOML document holding the ledger configuration."""
    return Path(os.getenv(CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE))


class LedgerSettings(BaseSettings):
    """
    Currency default and alias -> canonical account mapping.

    Example ``config.toml``::

        default_currency = "AUD"

        [accounts]
        cba = "Assets:MasterCard:CBA"
        food = "Expenses:Food"
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        extra="ignore",
        frozen=True,
    )

    default_currency: str = Field(
        default="AUD",
        pattern=r"^[A-Z]{3}$",
        description="Currency used when a message does not name one"
    )
    accounts: dict[str, str] = Field(
        ...,
        description="Alias (case-sensitive) to canonical account path"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=config_file_path()),
        )

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_currency_key(cls, data: Any) -> Any:
        """Older config files name the default currency ``currency``."""
        if isinstance(data, dict) and "currency" in data and "default_currency" not in data:
            data = dict(data)
            data["default_currency"] = data.pop("currency")
        return data

    @field_validator("accounts")
    @classmethod
    def validate_accounts(cls, v: dict[str, str]) -> dict[str, str]:
        """Aliases are single tokens, targets are colon-separated paths."""
        for alias, account in v.items():
            if not alias or any(ch.isspace() for ch in alias) or ">" in alias:
                raise ValueError(
                    f"Account alias {alias!r} must be a single token without '>'"
                )
            if not ACCOUNT_PATH_RE.match(account):
                raise ValueError(
                    f"Account {account!r} for alias {alias!r} is not a canonical account path"
                )
        return v

    def resolve_account(self, alias: str) -> Optional[str]:
        """Canonical account path for an alias, or None if unmapped."""
        return self.accounts.get(alias)


class GitHubSettings(BaseSettings):
    """GitHub repository holding the yearly ledger files."""

    model_config = SettingsConfigDict(
        env_prefix="GITHUB_",
        extra="ignore"
    )

    owner: str = Field(
        ...,
        description="Owner (user or organization) of the ledger repository"
    )
    repo: str = Field(
        ...,
        description="Name of the ledger repository"
    )
    token: str = Field(
        ...,
        description="Token with contents read/write permission"
    )
    branch: Optional[str] = Field(
        default=None,
        description="Branch to commit to; repository default if unset"
    )
    api_url: str = Field(
        default="https://api.github.com",
        description="GitHub REST API base URL"
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Timeout for every request to the contents API"
    )
    commit_message: str = Field(
        default="Add transaction to {path}",
        description="Commit message template; {path} is the ledger file"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level for the structured logger"
    )

    # Parsing
    strict_parsing: bool = Field(
        default=False,
        description="Require fields in the fixed grammar order"
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


def load_ledger_settings(path: Optional[Union[str, Path]] = None) -> LedgerSettings:
    """
    Load ledger settings, failing loudly.

    Args:
        path: Explicit TOML document. If None, the document named by
              BEANBOT_CONFIG_FILE (default ``config.toml``) is used
              together with LEDGER_* environment variables.

    Raises:
        ConfigurationError: If the source is missing or malformed
    """
    try:
        if path is None:
            return LedgerSettings()

        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Ledger configuration not found: {path}")
        with path.open("rb") as fh:
            data = tomllib.load(fh)
        return LedgerSettings(**data)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Ledger configuration is not valid TOML: {e}") from e
    except ValidationError as e:
        raise ConfigurationError(f"Ledger configuration is invalid: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Ledger configuration could not be read: {e}") from e


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Note: These are loaded lazily to allow partial configuration

    @property
    def ledger(self) -> LedgerSettings:
        return load_ledger_settings()

    @property
    def github(self) -> GitHubSettings:
        return GitHubSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, Any]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid} plus
    {setting_name_error: message} for each failure.
    Useful for startup checks.
    """
    results: dict[str, Any] = {}

    settings = get_settings()

    checks = {
        "ledger": lambda: settings.ledger,
        "github": lambda: settings.github,
        "app": lambda: settings.app,
    }
    for name, load in checks.items():
        try:
            load()
            results[name] = True
        except (ConfigurationError, ValidationError) as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
