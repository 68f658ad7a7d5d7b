"""Authenticated session handle."""

from typing import TYPE_CHECKING

from atmsim.models.account import Account
from atmsim.models.exceptions import SessionClosedError
from atmsim.models.transaction import Transaction

if TYPE_CHECKING:
    from atmsim.services.bank_service import BankService


class Session:
    """Operations available to a logged-in account holder."""

    def __init__(self, service: "BankService", account: Account):
        self._service = service
        self._account: Account | None = account

    @property
    def account(self) -> Account:
        if self._account is None:
            raise SessionClosedError("Session has been logged out")
        return self._account

    @property
    def active(self) -> bool:
        return self._account is not None

    def balance(self) -> float:
        return self._service.get_balance(self.account)

    def deposit(self, amount: float) -> Transaction:
        return self._service.deposit(self.account, amount)

    def withdraw(self, amount: float) -> Transaction:
        return self._service.withdraw(self.account, amount)

    def transfer(self, to_acc_no: int, amount: float) -> Transaction:
        return self._service.transfer(self.account, to_acc_no, amount)

    def statement(self) -> list[Transaction]:
        return self._service.statement(self.account)

    def change_pin(self, new_pin: int) -> None:
        self._service.change_pin(self.account, new_pin)

    def logout(self) -> None:
        """End the session; later calls raise SessionClosedError."""
        self._account = None
