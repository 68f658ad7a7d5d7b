"""In-memory account registry."""

from typing import Iterator

from atmsim.models.account import Account, truncate_name
from atmsim.models.exceptions import CapacityExceededError
from atmsim.models.transaction import TransactionType

FIRST_ACCOUNT_NO = 100100
MAX_ACCOUNTS = 200


class AccountStore:
    """Owns the registered accounts and the next-account-number counter."""

    def __init__(
        self,
        next_acc_no: int = FIRST_ACCOUNT_NO,
        max_accounts: int = MAX_ACCOUNTS,
    ):
        """
        Initialize an empty store.

        Args:
            next_acc_no: Number assigned to the next created account
            max_accounts: Maximum number of accounts the store may hold
        """
        self._accounts: list[Account] = []
        self._next_acc_no = next_acc_no
        self._max_accounts = max_accounts

    @property
    def max_accounts(self) -> int:
        return self._max_accounts

    def find_by_number(self, acc_no: int) -> Account | None:
        """
        Find an account by account number.

        Args:
            acc_no: The account number to search for

        Returns:
            Account object if found, None otherwise
        """
        for account in self._accounts:
            if account.acc_no == acc_no:
                return account
        return None

    def create(self, name: str, pin: int, initial_deposit: float) -> Account:
        """
        Create and register a new account.

        The account receives the next account number and an initial DEPOSIT
        record for ``initial_deposit`` (also when it is zero).

        Args:
            name: The account holder's name, truncated to the name buffer
            pin: The numeric PIN; a negative value is stored as its absolute value
            initial_deposit: Opening balance

        Returns:
            The created Account

        Raises:
            CapacityExceededError: If the store is already full
        """
        if self.count() >= self._max_accounts:
            raise CapacityExceededError(
                f"Reached maximum account limit of {self._max_accounts}"
            )

        account = Account(
            acc_no=self._next_acc_no,
            name=truncate_name(name),
            pin=abs(pin),
            balance=initial_deposit,
        )
        account.transactions.append(TransactionType.DEPOSIT, initial_deposit)

        self._next_acc_no += 1
        self._accounts.append(account)
        return account

    def add(self, account: Account) -> None:
        """
        Register an already numbered account (used when loading from file).

        Raises:
            CapacityExceededError: If the store is already full
        """
        if self.count() >= self._max_accounts:
            raise CapacityExceededError(
                f"Reached maximum account limit of {self._max_accounts}"
            )
        self._accounts.append(account)

    def remove_last_created(self, account: Account) -> None:
        """
        Undo the most recent ``create`` call.

        Only used when persisting a freshly created account fails; accounts
        are otherwise never removed.
        """
        if not self._accounts or self._accounts[-1] is not account:
            raise ValueError(f"Account {account.acc_no} is not the most recently created")
        self._accounts.pop()
        self._next_acc_no = account.acc_no

    def count(self) -> int:
        """Return the number of registered accounts."""
        return len(self._accounts)

    def next_account_number(self) -> int:
        """Return the number the next created account will receive."""
        return self._next_acc_no

    def accounts(self) -> list[Account]:
        """Return the accounts in creation order."""
        return list(self._accounts)

    def __iter__(self) -> Iterator[Account]:
        return iter(self.accounts())

    def __len__(self) -> int:
        return self.count()
