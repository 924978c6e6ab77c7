import json

import httpx
import pytest
from eth_account import Account

from liberdus_sdk import (
    ApplicationError,
    ConfirmationPoller,
    GatewayClient,
    Settings,
    SubmissionResult,
    Transaction,
    TransactionFailed,
    TransactionTimeout,
    expand_address,
    fund_account,
    hash_tx,
)

from .conftest import NETWORK_ID, TEST_ADDRESS, TEST_PRIVATE_KEY, Recorder, json_response


def clients(handler, clock):
    recorder = Recorder(handler)
    transport = recorder.transport()
    gateway = GatewayClient(transport=transport)
    poller = ConfirmationPoller(transport=transport, clock=clock, sleep=clock.sleep)
    return gateway, poller, recorder


def test_funds_and_waits_for_receipt(params, clock):
    def handler(request):
        if request.url.path == '/inject':
            return json_response({'result': {'success': True, 'txId': 'abc'}})
        if request.url.path == '/transaction/abc':
            return json_response({'transaction': {'success': True, 'txId': 'abc'}})
        return httpx.Response(404)

    gateway, poller, recorder = clients(handler, clock)
    receipt = fund_account(params, TEST_PRIVATE_KEY, '35', NETWORK_ID, gateway=gateway, poller=poller)

    assert receipt == {'success': True, 'txId': 'abc'}
    assert recorder.urls == ['http://gateway.test/inject', 'http://gateway.test/transaction/abc']

    tx = json.loads(json.loads(recorder.requests[0].content)['tx'])
    assert tx['type'] == 'create'
    assert tx['from'] == TEST_ADDRESS
    assert tx['networkId'] == NETWORK_ID
    assert int(tx['amount']['value'], 16) == 35 * 10 ** 18
    assert tx['sign']['owner'] == TEST_ADDRESS


def test_returns_submission_without_tx_id(params, clock):
    gateway, poller, recorder = clients(lambda request: json_response({'result': {'success': True}}), clock)

    result = fund_account(params, TEST_PRIVATE_KEY, 1, NETWORK_ID, gateway=gateway, poller=poller)

    assert isinstance(result, SubmissionResult)
    assert len(recorder.requests) == 1


def test_rejected_submission_is_not_polled(params, clock):
    gateway, poller, recorder = clients(
        lambda request: json_response({'result': {'success': False, 'reason': 'insufficient funds'}}), clock)

    with pytest.raises(ApplicationError, match='insufficient funds'):
        fund_account(params, TEST_PRIVATE_KEY, '1', NETWORK_ID, gateway=gateway, poller=poller)
    assert len(recorder.requests) == 1


def test_failed_confirmation_raises(params, clock):
    def handler(request):
        if request.url.path == '/inject':
            return json_response({'txId': 'abc'})
        return json_response({'transaction': {'success': False, 'reason': 'account exists'}})

    gateway, poller, _ = clients(handler, clock)
    with pytest.raises(TransactionFailed, match='account exists'):
        fund_account(params, TEST_PRIVATE_KEY, '1', NETWORK_ID, gateway=gateway, poller=poller)


def test_settings_hash_key_signs_submission(params, clock):
    hash_key = '11' * 32
    gateway, poller, recorder = clients(lambda request: json_response({'result': {'success': True}}), clock)

    fund_account(params, TEST_PRIVATE_KEY, 1, NETWORK_ID, gateway=gateway, poller=poller,
                 settings=Settings.load(environ={'LIBERDUS_HASH_KEY': hash_key}))

    tx = Transaction.from_dict(json.loads(json.loads(recorder.requests[0].content)['tx']))
    signature = bytes.fromhex(tx.sign.sig)
    recovered = Account._recover_hash(bytes.fromhex(hash_tx(tx, hash_key)), signature=signature)
    assert expand_address(recovered) == TEST_ADDRESS
    default_recovered = Account._recover_hash(bytes.fromhex(hash_tx(tx)), signature=signature)
    assert expand_address(default_recovered) != TEST_ADDRESS


def test_settings_drive_polling_schedule(params, clock):
    def handler(request):
        if request.url.path == '/inject':
            return json_response({'txId': 'abc'})
        return json_response({})

    gateway, poller, recorder = clients(handler, clock)
    settings = Settings(poll_interval_ms=1000, poll_timeout_ms=4000)

    with pytest.raises(TransactionTimeout) as excinfo:
        fund_account(params, TEST_PRIVATE_KEY, 1, NETWORK_ID, gateway=gateway, poller=poller, settings=settings)
    assert excinfo.value.timeout_ms == 4000
    assert clock.sleeps == [1.0, 1.0, 1.0, 1.0]
    assert len(recorder.requests) == 5

    clock.sleeps.clear()
    with pytest.raises(TransactionTimeout):
        fund_account(params, TEST_PRIVATE_KEY, 1, NETWORK_ID, gateway=gateway, poller=poller,
                     settings=settings, timeout_ms=2000)
    assert clock.sleeps == [1.0, 1.0]
