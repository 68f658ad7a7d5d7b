"""Bounded per-account transaction log."""

from collections import deque
from typing import Iterable, Iterator

from .transaction import Transaction, TransactionType

MAX_TXNS = 10


class TransactionLog:
    """Fixed-size sliding window of the most recent transactions, oldest first."""

    capacity = MAX_TXNS

    def __init__(self, entries: Iterable[Transaction] = ()):
        self._entries: deque[Transaction] = deque(maxlen=self.capacity)
        for txn in entries:
            self.add(txn)

    def append(
        self,
        type: TransactionType,
        amount: float,
        other_account: int = 0,
    ) -> Transaction:
        """
        Record a new transaction at the end of the log.

        When the log is full the oldest entry is dropped.

        Args:
            type: The type of transaction
            amount: The transaction amount
            other_account: Counterpart account number for transfers

        Returns:
            The recorded Transaction
        """
        txn = Transaction.create(type, amount, other_account)
        self.add(txn)
        return txn

    def add(self, txn: Transaction) -> None:
        """Insert an existing transaction, dropping the oldest when at capacity."""
        self._entries.append(txn)

    def entries(self) -> list[Transaction]:
        """Return the transactions, oldest first."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self.entries())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TransactionLog):
            return NotImplemented
        return self.entries() == other.entries()

    def __repr__(self) -> str:
        return f"TransactionLog({self.entries()!r})"
