"""Transaction data model."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class TransactionType(str, Enum):
    """Closed set of transaction tags."""

    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"
    TRANSFER_OUT = "TRANSFER_OUT"
    TRANSFER_IN = "TRANSFER_IN"


@dataclass(frozen=True)
class Transaction:
    """Represents a single entry in an account's transaction log."""

    type: TransactionType
    amount: float
    timestamp: int
    other_account: int = 0

    @property
    def time(self) -> datetime:
        """Creation time as a local datetime."""
        return datetime.fromtimestamp(self.timestamp)

    @classmethod
    def create(
        cls,
        type: TransactionType,
        amount: float,
        other_account: int = 0,
    ) -> "Transaction":
        """
        Create a transaction stamped with the current wall-clock time.

        Args:
            type: The type of transaction
            amount: The transaction amount
            other_account: Counterpart account number for transfers, 0 otherwise

        Returns:
            A new Transaction with the current time in whole epoch seconds
        """
        return cls(
            type=TransactionType(type),
            amount=amount,
            timestamp=int(datetime.now().timestamp()),
            other_account=other_account,
        )
