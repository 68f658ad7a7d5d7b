import logging
import sys

from dotenv import load_dotenv

from atmsim.console.atm_console import AtmConsole
from atmsim.models.exceptions import PersistenceError
from atmsim.repositories.account_codec import AccountCodec
from atmsim.services.bank_service import BankService
from config.settings import Settings


def setup_logging(settings: Settings) -> None:
    logger = logging.getLogger('atmsim')
    logger.setLevel(settings.log_level)
    handler = logging.FileHandler(filename=settings.log_file, encoding='utf-8', mode='w')
    handler.setFormatter(logging.Formatter('%(asctime)s:%(levelname)s:%(name)s: %(message)s'))
    logger.addHandler(handler)


def main() -> int:
    load_dotenv()
    settings = Settings.load()
    setup_logging(settings)

    codec = AccountCodec(
        settings.data_file,
        first_account_no=settings.first_account_no,
        max_accounts=settings.max_accounts,
    )
    try:
        store = codec.load()
    except PersistenceError as err:
        print(f"Account registry unavailable: {err}", file=sys.stderr)
        return 1

    AtmConsole(BankService(store, codec)).run()
    return 0


if __name__ == '__main__':
    sys.exit(main())
