"""Tests for configuration management."""
import pytest
from config.settings import Settings

ENV_VARS = (
    'ATM_DATA_FILE',
    'ATM_FIRST_ACCOUNT_NO',
    'ATM_MAX_ACCOUNTS',
    'ATM_LOG_FILE',
    'ATM_LOG_LEVEL',
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_settings_load(monkeypatch):
    """Test loading Settings from environment variables."""
    monkeypatch.setenv('ATM_DATA_FILE', '/tmp/bank.dat')
    monkeypatch.setenv('ATM_FIRST_ACCOUNT_NO', '500000')
    monkeypatch.setenv('ATM_MAX_ACCOUNTS', '20')
    monkeypatch.setenv('ATM_LOG_FILE', '/tmp/bank.log')
    monkeypatch.setenv('ATM_LOG_LEVEL', 'debug')

    settings = Settings.load()

    assert settings.data_file == '/tmp/bank.dat'
    assert settings.first_account_no == 500000
    assert settings.max_accounts == 20
    assert settings.log_file == '/tmp/bank.log'
    assert settings.log_level == 'DEBUG'


def test_settings_defaults():
    """Test that all default values are correctly set."""
    settings = Settings()

    assert settings.data_file == 'accounts.dat'
    assert settings.first_account_no == 100100
    assert settings.max_accounts == 200
    assert settings.log_file == 'atm.log'
    assert settings.log_level == 'INFO'


def test_settings_load_without_environment():
    """Unset variables keep their defaults."""
    assert Settings.load() == Settings()


def test_settings_load_invalid_integer(monkeypatch):
    monkeypatch.setenv('ATM_MAX_ACCOUNTS', 'lots')

    with pytest.raises(ValueError, match="ATM_MAX_ACCOUNTS environment variable must be an integer"):
        Settings.load()


def test_settings_load_invalid_log_level(monkeypatch):
    monkeypatch.setenv('ATM_LOG_LEVEL', 'chatty')

    with pytest.raises(ValueError, match="ATM_LOG_LEVEL"):
        Settings.load()
