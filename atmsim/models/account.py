"""Account data model."""

from dataclasses import dataclass, field

from .transaction_log import TransactionLog

NAME_LEN = 64


def truncate_name(name: str, limit: int = NAME_LEN - 1) -> str:
    """
    Cut a name down so its UTF-8 encoding fits the fixed name buffer.

    One byte of the buffer is reserved for the terminating null. A multi-byte
    character that would be split at the limit is dropped entirely.
    """
    encoded = name.encode("utf-8")[:limit]
    return encoded.decode("utf-8", errors="ignore")


@dataclass
class Account:
    """Represents a bank account."""

    acc_no: int
    name: str
    pin: int
    balance: float
    transactions: TransactionLog = field(default_factory=TransactionLog)
