"""Tests for BankService remaining operations (PIN change, sessions, save failures)."""

import pytest

from atmsim.models.exceptions import (
    IncorrectPINError,
    PersistenceError,
    SessionClosedError,
)
from atmsim.models.transaction import TransactionType
from atmsim.repositories.account_codec import AccountCodec
from atmsim.repositories.account_store import AccountStore
from atmsim.services.bank_service import BankService


class FailingCodec(AccountCodec):
    """Codec whose writes start failing once ``broken`` is set."""

    broken = False

    def save(self, store):
        if self.broken:
            raise PersistenceError("disk full")
        super().save(store)


@pytest.fixture
def codec(tmp_path):
    """Create an AccountCodec writing to a temporary file."""
    return FailingCodec(tmp_path / "accounts.dat")


@pytest.fixture
def bank_service(codec):
    """Create a BankService instance with an empty store."""
    return BankService(store=AccountStore(), codec=codec)


@pytest.fixture
def alice(bank_service):
    return bank_service.create_account("Alice", 1111, 500.0)


@pytest.fixture
def bob(bank_service, alice):
    return bank_service.create_account("Bob", 2222, 0.0)


def test_change_pin(bank_service, codec, alice):
    """New PIN is used for authentication and persisted."""
    bank_service.change_pin(alice, 4321)

    assert bank_service.authenticate(alice.acc_no, 4321) is alice
    with pytest.raises(IncorrectPINError):
        bank_service.authenticate(alice.acc_no, 1111)
    assert codec.load().find_by_number(alice.acc_no).pin == 4321


def test_change_pin_does_not_normalize_sign(bank_service, alice):
    bank_service.change_pin(alice, -7)

    assert alice.pin == -7


def test_change_pin_does_not_log_transaction(bank_service, alice):
    bank_service.change_pin(alice, 4321)

    assert len(alice.transactions) == 1


def test_statement_oldest_first(bank_service, alice):
    bank_service.deposit(alice, 10.0)
    bank_service.withdraw(alice, 20.0)

    assert [txn.type for txn in bank_service.statement(alice)] == [
        TransactionType.DEPOSIT,
        TransactionType.DEPOSIT,
        TransactionType.WITHDRAW,
    ]


def test_session_operations(bank_service, alice, bob):
    session = bank_service.open_session(alice.acc_no, 1111)

    session.deposit(50.0)
    session.withdraw(25.0)
    session.transfer(bob.acc_no, 100.0)
    session.change_pin(9876)

    assert session.balance() == 425.0
    assert bob.balance == 100.0
    assert [txn.type for txn in session.statement()] == [
        TransactionType.DEPOSIT,
        TransactionType.DEPOSIT,
        TransactionType.WITHDRAW,
        TransactionType.TRANSFER_OUT,
    ]
    assert alice.pin == 9876


def test_session_logout(bank_service, alice):
    """Any call after logout raises SessionClosedError."""
    session = bank_service.open_session(alice.acc_no, 1111)
    session.logout()

    assert not session.active
    with pytest.raises(SessionClosedError):
        session.balance()
    with pytest.raises(SessionClosedError):
        session.deposit(10.0)
    assert alice.balance == 500.0


def test_failed_save_rolls_back_deposit(bank_service, codec, alice):
    """A save failure is surfaced and the in-memory change undone."""
    before_file = codec.path.read_bytes()
    codec.broken = True

    with pytest.raises(PersistenceError):
        bank_service.deposit(alice, 100.0)

    assert alice.balance == 500.0
    assert len(alice.transactions) == 1
    assert codec.path.read_bytes() == before_file


def test_failed_save_rolls_back_rotated_log(bank_service, codec, alice):
    """Rollback restores the entry that rotation evicted."""
    for i in range(9):
        bank_service.deposit(alice, 1.0)
    before = alice.transactions.entries()
    codec.broken = True

    with pytest.raises(PersistenceError):
        bank_service.withdraw(alice, 1.0)

    assert alice.transactions.entries() == before


def test_failed_save_rolls_back_transfer(bank_service, codec, alice, bob):
    codec.broken = True

    with pytest.raises(PersistenceError):
        bank_service.transfer(alice, bob.acc_no, 100.0)

    assert alice.balance == 500.0
    assert bob.balance == 0.0
    assert len(alice.transactions) == 1
    assert len(bob.transactions) == 1


def test_failed_save_rolls_back_pin_change(bank_service, codec, alice):
    codec.broken = True

    with pytest.raises(PersistenceError):
        bank_service.change_pin(alice, 4321)

    assert alice.pin == 1111


def test_failed_save_rolls_back_account_creation(bank_service, codec, alice):
    codec.broken = True

    with pytest.raises(PersistenceError):
        bank_service.create_account("Bob", 2222, 10.0)

    assert bank_service.store.count() == 1
    assert bank_service.store.next_account_number() == 100101

    # The number is handed out again once saving works
    codec.broken = False
    assert bank_service.create_account("Bob", 2222, 10.0).acc_no == 100101
