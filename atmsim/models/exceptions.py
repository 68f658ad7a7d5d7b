"""Custom exceptions for the ATM simulator."""


class BankError(Exception):
    """Base exception for all banking-related errors."""
    pass


class AccountNotFoundError(BankError):
    """Raised when an account cannot be found."""
    pass


class RecipientNotFoundError(AccountNotFoundError):
    """Raised when the receiving account of a transfer cannot be found."""
    pass


class IncorrectPINError(BankError):
    """Raised when the PIN does not match the account."""
    pass


class InsufficientFundsError(BankError):
    """Raised when an account has insufficient balance for a transaction."""
    pass


class InvalidAmountError(BankError):
    """Raised when an invalid amount is provided (e.g., zero or negative amount)."""
    pass


class InvalidTransferError(BankError):
    """Raised when a transfer operation is invalid (e.g., sender == receiver)."""
    pass


class CapacityExceededError(BankError):
    """Raised when the registry already holds the maximum number of accounts."""
    pass


class SessionClosedError(BankError):
    """Raised when a session is used after logout."""
    pass


class PersistenceError(BankError):
    """Raised when the account file cannot be read or written."""
    pass


class CorruptFileError(PersistenceError):
    """Raised when the account file exists but does not match the expected layout."""
    pass
