"""Example: Discover the gateway and network parameters"""

from liberdus_sdk import Settings, discover
from liberdus_sdk.logging_config import setup_logging


def main():
    setup_logging()

    # Reads LIBERDUS_BASE_URL (or the file named by LIBERDUS_CONFIG)
    params = discover(Settings.load())

    print(f"Gateway: {params.gateway_url}")
    print(f"Stability factor: {params.stability_factor}")
    print(f"Network fee: {params.network_fee_asset} LIB ({params.network_fee_usd} USD)")
    print(f"Default toll: {params.default_toll_asset} LIB ({params.default_toll_usd} USD)")
    print(f"Toll tax: {params.network_toll_tax_rate:.2%}")


if __name__ == '__main__':
    main()
