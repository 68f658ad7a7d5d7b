"""Bank service for business logic layer."""

import logging
import math
from contextlib import contextmanager
from typing import Iterator

from atmsim.models.account import Account
from atmsim.models.exceptions import (
    AccountNotFoundError,
    CapacityExceededError,
    IncorrectPINError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidTransferError,
    PersistenceError,
    RecipientNotFoundError,
)
from atmsim.models.transaction import Transaction, TransactionType
from atmsim.models.transaction_log import TransactionLog
from atmsim.repositories.account_codec import AccountCodec
from atmsim.repositories.account_store import AccountStore
from atmsim.services.session import Session

logger = logging.getLogger(__name__)


class BankService:
    """Service layer for ATM operations.

    Every mutating operation updates the store and writes it through the
    codec before returning. When the write fails the in-memory change is
    undone and the PersistenceError propagates.
    """

    def __init__(self, store: AccountStore, codec: AccountCodec):
        """
        Initialize the BankService.

        Args:
            store: The in-memory account registry
            codec: Codec used to persist the registry after each mutation
        """
        self._store = store
        self._codec = codec

    @property
    def store(self) -> AccountStore:
        return self._store

    @contextmanager
    def _persisting(self, *accounts: Account) -> Iterator[None]:
        """
        Apply a mutation to ``accounts`` and save the store.

        The balances, PINs and logs of ``accounts`` are restored if the
        mutation or the save raises.
        """
        snapshots = [
            (account, account.balance, account.pin, account.transactions.entries())
            for account in accounts
        ]
        try:
            yield
            self._codec.save(self._store)
        except Exception:
            for account, balance, pin, entries in snapshots:
                account.balance = balance
                account.pin = pin
                account.transactions = TransactionLog(entries)
            raise

    def _validate_amount(self, amount: float, action: str) -> None:
        if not math.isfinite(amount) or amount <= 0:
            logger.warning("Rejected %s of invalid amount %r", action, amount)
            raise InvalidAmountError(
                f"{action.capitalize()} amount must be a finite number greater than zero, got {amount}"
            )

    def _check_funds(self, account: Account, amount: float) -> None:
        if amount > account.balance:
            logger.warning(
                "Rejected debit of %.2f from %d: balance %.2f",
                amount, account.acc_no, account.balance,
            )
            raise InsufficientFundsError(
                f"Insufficient funds: {account.balance:.2f} available, {amount:.2f} requested"
            )

    def create_account(self, name: str, pin: int, initial_deposit: float) -> Account:
        """
        Create a new account.

        Args:
            name: The account holder's name
            pin: The numeric PIN (sign is normalized to non-negative)
            initial_deposit: Opening balance, may be zero

        Returns:
            The created Account

        Raises:
            InvalidAmountError: If the initial deposit is negative or not finite
            CapacityExceededError: If the registry is full
            PersistenceError: If the registry cannot be saved
        """
        if not math.isfinite(initial_deposit) or initial_deposit < 0:
            raise InvalidAmountError(
                f"Initial deposit must be a finite, non-negative amount, got {initial_deposit}"
            )

        try:
            account = self._store.create(name, pin, initial_deposit)
        except CapacityExceededError:
            logger.warning("Rejected account creation for %r: registry full", name)
            raise

        try:
            self._codec.save(self._store)
        except PersistenceError:
            self._store.remove_last_created(account)
            raise

        logger.info("Created account %d for %r", account.acc_no, account.name)
        return account

    def find_account(self, acc_no: int) -> Account:
        """
        Look up an account by number.

        Raises:
            AccountNotFoundError: If no account has this number
        """
        account = self._store.find_by_number(acc_no)
        if account is None:
            raise AccountNotFoundError(f"Account {acc_no} not found")
        return account

    def authenticate(self, acc_no: int, pin: int) -> Account:
        """
        Check an account number and PIN.

        Returns:
            The matching Account

        Raises:
            AccountNotFoundError: If the account doesn't exist
            IncorrectPINError: If the PIN does not match
        """
        account = self._store.find_by_number(acc_no)
        if account is None:
            logger.warning("Login attempt for unknown account %d", acc_no)
            raise AccountNotFoundError(f"Account {acc_no} not found")
        if account.pin != pin:
            logger.warning("Incorrect PIN for account %d", acc_no)
            raise IncorrectPINError("Incorrect PIN")
        logger.info("Account %d authenticated", acc_no)
        return account

    def open_session(self, acc_no: int, pin: int) -> Session:
        """Authenticate and return a session bound to the account."""
        return Session(self, self.authenticate(acc_no, pin))

    def get_balance(self, account: Account) -> float:
        """Return the current balance of ``account``."""
        return account.balance

    def statement(self, account: Account) -> list[Transaction]:
        """Return the mini-statement of ``account``, oldest first."""
        return account.transactions.entries()

    def deposit(self, account: Account, amount: float) -> Transaction:
        """
        Deposit funds into an account.

        Returns:
            The recorded DEPOSIT transaction

        Raises:
            InvalidAmountError: If the amount is not a positive finite number
            PersistenceError: If the registry cannot be saved
        """
        self._validate_amount(amount, "deposit")

        with self._persisting(account):
            account.balance += amount
            txn = account.transactions.append(TransactionType.DEPOSIT, amount)

        logger.info("Deposited %.2f into %d", amount, account.acc_no)
        return txn

    def withdraw(self, account: Account, amount: float) -> Transaction:
        """
        Withdraw funds from an account.

        Returns:
            The recorded WITHDRAW transaction

        Raises:
            InvalidAmountError: If the amount is not a positive finite number
            InsufficientFundsError: If the amount exceeds the balance
            PersistenceError: If the registry cannot be saved
        """
        self._validate_amount(amount, "withdrawal")
        self._check_funds(account, amount)

        with self._persisting(account):
            account.balance -= amount
            txn = account.transactions.append(TransactionType.WITHDRAW, amount)

        logger.info("Withdrew %.2f from %d", amount, account.acc_no)
        return txn

    def transfer(self, account: Account, to_acc_no: int, amount: float) -> Transaction:
        """
        Transfer funds to another account.

        Both balances and both log entries are updated before the single
        save, so a debit is never persisted without its credit.

        Returns:
            The TRANSFER_OUT transaction recorded on the sender

        Raises:
            RecipientNotFoundError: If the recipient doesn't exist
            InvalidTransferError: If the recipient is the sender
            InvalidAmountError: If the amount is not a positive finite number
            InsufficientFundsError: If the amount exceeds the sender's balance
            PersistenceError: If the registry cannot be saved
        """
        recipient = self._store.find_by_number(to_acc_no)
        if recipient is None:
            logger.warning("Transfer from %d to unknown account %d", account.acc_no, to_acc_no)
            raise RecipientNotFoundError(f"Recipient account {to_acc_no} not found")
        if recipient is account:
            logger.warning("Rejected transfer from %d to itself", account.acc_no)
            raise InvalidTransferError("Cannot transfer to the same account")

        self._validate_amount(amount, "transfer")
        self._check_funds(account, amount)

        with self._persisting(account, recipient):
            account.balance -= amount
            recipient.balance += amount
            txn = account.transactions.append(
                TransactionType.TRANSFER_OUT, amount, recipient.acc_no
            )
            recipient.transactions.append(
                TransactionType.TRANSFER_IN, amount, account.acc_no
            )

        logger.info(
            "Transferred %.2f from %d to %d", amount, account.acc_no, recipient.acc_no
        )
        return txn

    def change_pin(self, account: Account, new_pin: int) -> None:
        """
        Replace the PIN of an account.

        The PIN is stored as given; format checks belong to the caller.

        Raises:
            PersistenceError: If the registry cannot be saved
        """
        with self._persisting(account):
            account.pin = new_pin

        logger.info("PIN changed for account %d", account.acc_no)
