"""Binary persistence of the account registry.

File layout, version 1. Every field is little-endian and unpadded.

Header::

    magic      4s   b"ATMS"
    version    H    1
    count      I    number of account records
    next_acc   q    next account number

followed by ``count`` fixed-size account records::

    acc_no     q
    name       64s  UTF-8, null padded
    pin        i
    balance    d
    MAX_TXNS x (type 16s, amount d, timestamp q, other_account q)
    txn_count  I

Unused transaction slots are zero-filled.
"""

import logging
import struct
from pathlib import Path

from atmsim.models.account import NAME_LEN, Account
from atmsim.models.exceptions import CorruptFileError, PersistenceError
from atmsim.models.transaction import Transaction, TransactionType
from atmsim.models.transaction_log import MAX_TXNS, TransactionLog
from atmsim.repositories.account_store import (
    FIRST_ACCOUNT_NO,
    MAX_ACCOUNTS,
    AccountStore,
)

logger = logging.getLogger(__name__)

MAGIC = b"ATMS"
FORMAT_VERSION = 1
TYPE_LEN = 16

HEADER = struct.Struct("<4sHIq")
ACCOUNT_FIELDS = struct.Struct(f"<q{NAME_LEN}sid")
TXN_SLOT = struct.Struct(f"<{TYPE_LEN}sdqq")
TXN_COUNT = struct.Struct("<I")

RECORD_SIZE = ACCOUNT_FIELDS.size + MAX_TXNS * TXN_SLOT.size + TXN_COUNT.size
EMPTY_SLOT = bytes(TXN_SLOT.size)


class AccountCodec:
    """Reads and writes the whole AccountStore to a single flat file."""

    def __init__(
        self,
        path: str | Path,
        first_account_no: int = FIRST_ACCOUNT_NO,
        max_accounts: int = MAX_ACCOUNTS,
    ):
        """
        Initialize the codec.

        Args:
            path: Location of the account file
            first_account_no: Counter value for a store created on first run
            max_accounts: Capacity of stores returned by ``load``
        """
        self._path = Path(path)
        self._first_account_no = first_account_no
        self._max_accounts = max_accounts

    @property
    def path(self) -> Path:
        return self._path

    def save(self, store: AccountStore) -> None:
        """
        Overwrite the account file with the full contents of ``store``.

        The file is truncated and rewritten; a failure part way through
        leaves it incomplete.

        Raises:
            PersistenceError: If the store cannot be encoded or written
        """
        data = self.encode(store)
        try:
            with open(self._path, "wb") as fh:
                fh.write(data)
        except OSError as err:
            logger.error("Failed to write %s: %s", self._path, err)
            raise PersistenceError(f"Cannot write {self._path}: {err}") from err
        logger.debug("Saved %d accounts to %s", store.count(), self._path)

    def load(self) -> AccountStore:
        """
        Read the account file into a new store.

        A missing file is the first-run case and yields an empty store.

        Raises:
            CorruptFileError: If the file does not match the expected layout
            PersistenceError: If the file exists but cannot be read
        """
        try:
            with open(self._path, "rb") as fh:
                data = fh.read()
        except FileNotFoundError:
            logger.info("No account file at %s, starting empty", self._path)
            return AccountStore(self._first_account_no, self._max_accounts)
        except OSError as err:
            logger.error("Failed to read %s: %s", self._path, err)
            raise PersistenceError(f"Cannot read {self._path}: {err}") from err

        store = self.decode(data)
        logger.info("Loaded %d accounts from %s", store.count(), self._path)
        return store

    def encode(self, store: AccountStore) -> bytes:
        """Serialize ``store`` into the version 1 layout."""
        try:
            parts = [
                HEADER.pack(
                    MAGIC, FORMAT_VERSION, store.count(), store.next_account_number()
                )
            ]
            parts.extend(self._encode_account(account) for account in store)
        except (struct.error, UnicodeEncodeError) as err:
            raise PersistenceError(f"Cannot encode account registry: {err}") from err
        return b"".join(parts)

    def decode(self, data: bytes) -> AccountStore:
        """
        Rebuild a store from bytes produced by ``encode``.

        Raises:
            CorruptFileError: If ``data`` is not a complete version 1 image
        """
        if len(data) < HEADER.size:
            raise CorruptFileError(
                f"{self._path}: header truncated ({len(data)} of {HEADER.size} bytes)"
            )
        magic, version, count, next_acc_no = HEADER.unpack_from(data, 0)
        if magic != MAGIC:
            raise CorruptFileError(f"{self._path}: not an account file (magic {magic!r})")
        if version != FORMAT_VERSION:
            raise CorruptFileError(f"{self._path}: unsupported format version {version}")
        if count > self._max_accounts:
            raise CorruptFileError(
                f"{self._path}: {count} accounts exceeds the maximum of {self._max_accounts}"
            )

        expected = HEADER.size + count * RECORD_SIZE
        if len(data) != expected:
            raise CorruptFileError(
                f"{self._path}: expected {expected} bytes for {count} accounts, found {len(data)}"
            )

        store = AccountStore(next_acc_no, self._max_accounts)
        offset = HEADER.size
        seen: set[int] = set()
        for _ in range(count):
            account = self._decode_account(data, offset)
            if account.acc_no in seen:
                raise CorruptFileError(
                    f"{self._path}: account number {account.acc_no} appears more than once"
                )
            if account.acc_no >= next_acc_no:
                raise CorruptFileError(
                    f"{self._path}: next account number {next_acc_no} is not above "
                    f"existing account {account.acc_no}"
                )
            seen.add(account.acc_no)
            store.add(account)
            offset += RECORD_SIZE
        return store

    def _encode_account(self, account: Account) -> bytes:
        entries = account.transactions.entries()
        parts = [
            ACCOUNT_FIELDS.pack(
                account.acc_no,
                account.name.encode("utf-8"),
                account.pin,
                account.balance,
            )
        ]
        for txn in entries:
            parts.append(
                TXN_SLOT.pack(
                    txn.type.value.encode("ascii"),
                    txn.amount,
                    txn.timestamp,
                    txn.other_account,
                )
            )
        parts.append(EMPTY_SLOT * (MAX_TXNS - len(entries)))
        parts.append(TXN_COUNT.pack(len(entries)))
        return b"".join(parts)

    def _decode_account(self, data: bytes, offset: int) -> Account:
        acc_no, raw_name, pin, balance = ACCOUNT_FIELDS.unpack_from(data, offset)
        (txn_count,) = TXN_COUNT.unpack_from(data, offset + RECORD_SIZE - TXN_COUNT.size)
        if txn_count > MAX_TXNS:
            raise CorruptFileError(
                f"{self._path}: account {acc_no} claims {txn_count} transactions"
            )

        try:
            name = raw_name.rstrip(b"\x00").decode("utf-8")
        except UnicodeDecodeError as err:
            raise CorruptFileError(f"{self._path}: account {acc_no} has an invalid name") from err

        log = TransactionLog()
        slot_offset = offset + ACCOUNT_FIELDS.size
        for _ in range(txn_count):
            raw_type, amount, timestamp, other = TXN_SLOT.unpack_from(data, slot_offset)
            try:
                txn_type = TransactionType(raw_type.rstrip(b"\x00").decode("ascii"))
            except (UnicodeDecodeError, ValueError) as err:
                raise CorruptFileError(
                    f"{self._path}: account {acc_no} has unknown transaction type {raw_type!r}"
                ) from err
            log.add(Transaction(txn_type, amount, timestamp, other))
            slot_offset += TXN_SLOT.size

        return Account(
            acc_no=acc_no,
            name=name,
            pin=pin,
            balance=balance,
            transactions=log,
        )
