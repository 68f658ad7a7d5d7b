"""Data models for the ATM simulator."""

from .account import Account
from .transaction import Transaction, TransactionType
from .transaction_log import MAX_TXNS, TransactionLog
from .exceptions import (
    BankError,
    AccountNotFoundError,
    RecipientNotFoundError,
    IncorrectPINError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidTransferError,
    CapacityExceededError,
    SessionClosedError,
    PersistenceError,
    CorruptFileError,
)

__all__ = [
    "Account",
    "Transaction",
    "TransactionType",
    "TransactionLog",
    "MAX_TXNS",
    "BankError",
    "AccountNotFoundError",
    "RecipientNotFoundError",
    "IncorrectPINError",
    "InsufficientFundsError",
    "InvalidAmountError",
    "InvalidTransferError",
    "CapacityExceededError",
    "SessionClosedError",
    "PersistenceError",
    "CorruptFileError",
]
