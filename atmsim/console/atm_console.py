"""Interactive operator console for the ATM simulator."""

from typing import Callable

from tabulate import tabulate

from atmsim.models.exceptions import BankError
from atmsim.models.transaction import Transaction
from atmsim.services.bank_service import BankService
from atmsim.services.session import Session

MAIN_MENU = (
    "\n==== ATM SIMULATION ====\n"
    "1) Create new account\n"
    "2) Login to account\n"
    "3) Exit"
)

SESSION_MENU = (
    "1) Check Balance\n"
    "2) Withdraw\n"
    "3) Deposit\n"
    "4) Transfer\n"
    "5) Mini-Statement\n"
    "6) Change PIN\n"
    "7) Logout"
)


class InvalidInput(Exception):
    """Raised when a typed value cannot be parsed."""


def parse_pin(text: str) -> int:
    """Accept exactly four digits."""
    text = text.strip()
    if len(text) != 4 or not text.isdigit():
        raise InvalidInput("PIN must be exactly 4 digits")
    return int(text)


def render_statement(transactions: list[Transaction]) -> str:
    """Render transactions as a table, most recent last."""
    rows = [
        [
            txn.time.strftime("%Y-%m-%d %H:%M:%S"),
            txn.type.value,
            txn.amount,
            txn.other_account or "",
        ]
        for txn in transactions
    ]
    return tabulate(
        rows,
        headers=["Time", "Type", "Amount", "Other Acc"],
        stralign='right',
        numalign='right',
        floatfmt=".2f",
    )


class AtmConsole:
    """Menu loop that reads operator input and calls into BankService."""

    def __init__(
        self,
        service: BankService,
        input_fn: Callable[[str], str] = input,
        print_fn: Callable[..., None] = print,
    ):
        self.service = service
        self._input = input_fn
        self._print = print_fn

    def _ask(self, prompt: str) -> str:
        return self._input(prompt)

    def _ask_int(self, prompt: str) -> int:
        text = self._ask(prompt).strip()
        try:
            return int(text)
        except ValueError:
            raise InvalidInput(f"Not a whole number: {text!r}")

    def _ask_float(self, prompt: str) -> float:
        text = self._ask(prompt).strip()
        try:
            return float(text)
        except ValueError:
            raise InvalidInput(f"Not an amount: {text!r}")

    def run(self) -> None:
        """Run the main menu until the operator exits or input ends."""
        try:
            while True:
                self._print(MAIN_MENU)
                try:
                    choice = self._ask_int("Choose: ")
                except InvalidInput:
                    self._print("Invalid input.")
                    continue

                if choice == 1:
                    self.create_account()
                elif choice == 2:
                    session = self.login()
                    if session is not None:
                        self.session_loop(session)
                elif choice == 3:
                    self._print("Goodbye!")
                    return
                else:
                    self._print("Invalid choice.")
        except EOFError:
            self._print("Goodbye!")

    def create_account(self) -> None:
        name = self._ask("Enter customer name: ").strip()
        try:
            pin = parse_pin(self._ask("Set 4-digit PIN (numbers only): "))
            deposit = self._ask_float("Initial deposit amount: ")
        except InvalidInput as err:
            self._print(f"Invalid input. {err}")
            return

        try:
            account = self.service.create_account(name, pin, deposit)
        except BankError as err:
            self._print(str(err))
        else:
            self._print(f"Account created successfully!\nAccount Number: {account.acc_no}")

    def login(self) -> Session | None:
        try:
            acc_no = self._ask_int("Enter account number: ")
            pin = self._ask_int("Enter PIN: ")
        except InvalidInput:
            self._print("Invalid input.")
            return None

        try:
            return self.service.open_session(acc_no, pin)
        except BankError as err:
            self._print(str(err))
            return None

    def session_loop(self, session: Session) -> None:
        actions = {
            1: self._show_balance,
            2: self._withdraw,
            3: self._deposit,
            4: self._transfer,
            5: self._mini_statement,
            6: self._change_pin,
        }
        while session.active:
            account = session.account
            self._print(f"\nWelcome, {account.name} (Acc {account.acc_no})")
            self._print(SESSION_MENU)
            try:
                choice = self._ask_int("Choose: ")
            except InvalidInput:
                self._print("Invalid.")
                continue

            if choice == 7:
                session.logout()
                self._print("Logging out...")
                continue

            action = actions.get(choice)
            if action is None:
                self._print("Invalid choice.")
                continue
            try:
                action(session)
            except InvalidInput:
                self._print("Invalid.")
            except BankError as err:
                self._print(str(err))

    def _show_balance(self, session: Session) -> None:
        self._print(f"Available balance: {session.balance():.2f}")

    def _withdraw(self, session: Session) -> None:
        amount = self._ask_float("Enter amount to withdraw: ")
        session.withdraw(amount)
        self._print(f"Withdrawn {amount:.2f}. New balance: {session.balance():.2f}")

    def _deposit(self, session: Session) -> None:
        amount = self._ask_float("Enter amount to deposit: ")
        session.deposit(amount)
        self._print(f"Deposited {amount:.2f}. New balance: {session.balance():.2f}")

    def _transfer(self, session: Session) -> None:
        to_acc_no = self._ask_int("Enter recipient account number: ")
        amount = self._ask_float("Enter amount to transfer: ")
        session.transfer(to_acc_no, amount)
        self._print(
            f"Transferred {amount:.2f} to {to_acc_no}. Your new balance: {session.balance():.2f}"
        )

    def _mini_statement(self, session: Session) -> None:
        account = session.account
        self._print(f"Mini-statement for {account.name} (Acc: {account.acc_no})")
        self._print("Recent transactions (most recent last):")
        self._print(render_statement(session.statement()))

    def _change_pin(self, session: Session) -> None:
        new_pin = parse_pin(self._ask("Enter new 4-digit PIN: "))
        session.change_pin(new_pin)
        self._print("PIN changed successfully.")
