"""Tests for configuration loading."""

import pytest

from beanbot.config import (
    AppSettings,
    ConfigurationError,
    LedgerSettings,
    get_settings,
    load_ledger_settings,
    validate_all_settings,
)


CONFIG_TOML = """
default_currency = "AUD"

[accounts]
cba = "Assets:MasterCard:CBA"
food = "Expenses:Food"
"""


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """A config.toml named by BEANBOT_CONFIG_FILE."""
    path = tmp_path / "config.toml"
    path.write_text(CONFIG_TOML)
    monkeypatch.setenv("BEANBOT_CONFIG_FILE", str(path))
    monkeypatch.delenv("LEDGER_ACCOUNTS", raising=False)
    monkeypatch.delenv("LEDGER_DEFAULT_CURRENCY", raising=False)
    get_settings.cache_clear()
    yield path
    get_settings.cache_clear()


class TestLedgerSettings:
    """Tests for LedgerSettings and load_ledger_settings."""

    def test_load_from_explicit_path(self, tmp_path):
        path = tmp_path / "ledger.toml"
        path.write_text(CONFIG_TOML)

        settings = load_ledger_settings(path)

        assert settings.default_currency == "AUD"
        assert settings.accounts == {
            "cba": "Assets:MasterCard:CBA",
            "food": "Expenses:Food",
        }

    def test_load_from_env_named_file(self, config_file):
        """Test the TOML file named by BEANBOT_CONFIG_FILE is a settings source."""
        settings = load_ledger_settings()
        assert settings.resolve_account("cba") == "Assets:MasterCard:CBA"

    def test_environment_overrides_file(self, config_file, monkeypatch):
        monkeypatch.setenv("LEDGER_DEFAULT_CURRENCY", "USD")
        assert load_ledger_settings().default_currency == "USD"

    def test_legacy_currency_key(self, tmp_path):
        """Test older files that call the default currency `currency`."""
        path = tmp_path / "config.toml"
        path.write_text('currency = "NZD"\n[accounts]\ncash = "Assets:Cash"\n')
        assert load_ledger_settings(path).default_currency == "NZD"

    def test_missing_file_is_fatal(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_ledger_settings(tmp_path / "missing.toml")

    def test_missing_default_source_is_fatal(self, tmp_path, monkeypatch):
        """Test no file and no environment means no accounts, which is fatal."""
        monkeypatch.setenv("BEANBOT_CONFIG_FILE", str(tmp_path / "missing.toml"))
        monkeypatch.delenv("LEDGER_ACCOUNTS", raising=False)
        with pytest.raises(ConfigurationError):
            load_ledger_settings()

    def test_malformed_toml_is_fatal(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("default_currency = \n[accounts")
        with pytest.raises(ConfigurationError, match="not valid TOML"):
            load_ledger_settings(path)

    def test_bad_account_path_is_fatal(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[accounts]\ncba = "Assets MasterCard"\n')
        with pytest.raises(ConfigurationError, match="canonical account path"):
            load_ledger_settings(path)

    @pytest.mark.parametrize("alias", ["my card", "a>b", ""])
    def test_alias_must_be_single_token(self, alias):
        with pytest.raises(ValueError):
            LedgerSettings(accounts={alias: "Assets:Cash"})

    def test_bad_currency(self):
        with pytest.raises(ValueError):
            LedgerSettings(default_currency="dollars", accounts={})

    def test_settings_are_frozen(self, ledger_settings):
        with pytest.raises(ValueError):
            ledger_settings.default_currency = "USD"

    def test_unknown_alias_resolves_to_none(self, ledger_settings):
        assert ledger_settings.resolve_account("nope") is None


class TestAppSettings:
    def test_log_level_is_normalized(self):
        assert AppSettings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValueError):
            AppSettings(log_level="chatty")

    def test_strict_parsing_off_by_default(self, monkeypatch):
        monkeypatch.delenv("STRICT_PARSING", raising=False)
        assert AppSettings().strict_parsing is False


class TestValidateAllSettings:
    def test_reports_each_section(self, config_file, monkeypatch):
        monkeypatch.delenv("GITHUB_OWNER", raising=False)
        monkeypatch.delenv("GITHUB_REPO", raising=False)
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)

        status = validate_all_settings()

        assert status["ledger"] is True
        assert status["app"] is True
        assert status["github"] is False
        assert "github_error" in status

    def test_reports_github_when_configured(self, config_file, monkeypatch):
        monkeypatch.setenv("GITHUB_OWNER", "me")
        monkeypatch.setenv("GITHUB_REPO", "ledger")
        monkeypatch.setenv("GITHUB_TOKEN", "secret")

        assert validate_all_settings()["github"] is True
