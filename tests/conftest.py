import json

import httpx
import pytest

from liberdus_sdk import NetworkParameters, TransactionBuilder

# web3.py documentation key; its address is well known
TEST_PRIVATE_KEY = '0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318'
TEST_ADDRESS = '2c7536e3605d9c16a7a3d7b1898e529396a65c23' + '0' * 24
NETWORK_ID = 'a3b1c2d4e5f60718293a4b5c6d7e8f90a1b2c3d4e5f60718293a4b5c6d7e8f90'


class FakeClock:
    """Monotonic clock advanced only by sleep()"""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float):
        self.sleeps.append(seconds)
        self.now += seconds


class Recorder:
    """MockTransport handler that records requests and delegates to a function"""

    def __init__(self, handler):
        self.handler = handler
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def urls(self):
        return [str(r.url) for r in self.requests]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def json_response(body, status_code=200):
    return httpx.Response(status_code, text=json.dumps(body), headers={'content-type': 'application/json'})


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def unsigned_tx():
    return TransactionBuilder.create(TEST_ADDRESS, 35 * 10 ** 18, NETWORK_ID, timestamp=1700000000000).build()


@pytest.fixture
def params():
    return NetworkParameters.derive(
        base_url='http://app.test',
        gateway_url='http://gateway.test',
        stability_factor=2.0,
        network_fee_usd=0.2,
        default_toll_usd=1.0,
        toll_tax_percent=1,
    )
