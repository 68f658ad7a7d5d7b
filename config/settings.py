"""Configuration management for the ATM simulator."""
import logging
import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Configuration settings for the ATM simulator.

    This class centralizes the values the entry point needs to wire up
    the account file, the registry limits and logging.
    """

    # Persistence
    data_file: str = 'accounts.dat'

    # Registry Rules
    first_account_no: int = 100100
    max_accounts: int = 200

    # Logging
    log_file: str = 'atm.log'
    log_level: str = 'INFO'

    @classmethod
    def load(cls) -> 'Settings':
        """Load settings from environment variables.

        Unset variables keep their defaults.

        Returns:
            Settings: A Settings instance with values from environment variables.

        Raises:
            ValueError: If a numeric variable is not an integer or the log level is unknown.
        """
        defaults = cls()
        log_level = os.getenv('ATM_LOG_LEVEL', defaults.log_level).upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"ATM_LOG_LEVEL must be a logging level name, got {log_level!r}")

        return cls(
            data_file=os.getenv('ATM_DATA_FILE', defaults.data_file),
            first_account_no=_int_env('ATM_FIRST_ACCOUNT_NO', defaults.first_account_no),
            max_accounts=_int_env('ATM_MAX_ACCOUNTS', defaults.max_accounts),
            log_file=os.getenv('ATM_LOG_FILE', defaults.log_file),
            log_level=log_level,
        )


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} environment variable must be an integer, got {value!r}")
