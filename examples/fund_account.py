"""Example: Fund an account and wait for confirmation"""

import os
import sys

from liberdus_sdk import LiberdusError, Settings, derive_address, discover, fund_account
from liberdus_sdk.logging_config import setup_logging


def main():
    setup_logging()

    private_key = os.environ['LIBERDUS_PRIVATE_KEY']
    network_id = os.environ['LIBERDUS_NETWORK_ID']
    amount = sys.argv[1] if len(sys.argv) > 1 else '35'

    settings = Settings.load()
    params = discover(settings)

    print(f"Funding {derive_address(private_key)} with {amount} LIB...")
    try:
        receipt = fund_account(
            params,
            private_key,
            amount,
            network_id,
            settings=settings,
        )
    except LiberdusError as e:
        print(f"Funding failed: {e.reason}")
        sys.exit(1)

    print(f"Confirmed: {receipt}")


if __name__ == '__main__':
    main()
