import json

import pytest
from eth_account import Account

from liberdus_sdk import (
    InvalidPrivateKey,
    Signer,
    TransactionError,
    derive_address,
    expand_address,
    hash_tx,
    serialize,
    sign,
)

from .conftest import TEST_ADDRESS, TEST_PRIVATE_KEY


def test_derived_address_matches_known_value():
    address = derive_address(TEST_PRIVATE_KEY)
    assert address == TEST_ADDRESS
    assert len(address) == 64
    assert address == address.lower()


@pytest.mark.parametrize('key', [
    TEST_PRIVATE_KEY[2:],
    TEST_PRIVATE_KEY.upper().replace('0X', '0x'),
    bytes.fromhex(TEST_PRIVATE_KEY[2:]),
])
def test_key_formats_derive_same_address(key):
    assert derive_address(key) == TEST_ADDRESS


def test_expand_address():
    assert expand_address('0x2c7536E3605D9C16a7a3D7b1898e529396a65c23') == TEST_ADDRESS
    with pytest.raises(ValueError):
        expand_address('0x1234')


def test_sign_attaches_derived_owner(unsigned_tx):
    signed, digest = sign(unsigned_tx, TEST_PRIVATE_KEY)

    assert digest == hash_tx(unsigned_tx)
    assert signed.sign.owner == TEST_ADDRESS
    assert len(signed.sign.sig) == 130
    assert unsigned_tx.sign is None


def test_signature_recovers_signer(unsigned_tx):
    signed, digest = Signer(TEST_PRIVATE_KEY).sign(unsigned_tx)
    recovered = Account._recover_hash(bytes.fromhex(digest), signature=bytes.fromhex(signed.sign.sig))
    assert expand_address(recovered) == TEST_ADDRESS


def test_owner_ignores_sender_field(unsigned_tx):
    other_key = '0x' + '11' * 32
    signed, _ = sign(unsigned_tx, other_key)
    assert signed.sign.owner == derive_address(other_key)
    assert signed.sign.owner != unsigned_tx.from_


def test_signed_payload_serializes_signature(unsigned_tx):
    signed, _ = sign(unsigned_tx, TEST_PRIVATE_KEY)
    data = json.loads(serialize(signed))
    assert data['sign'] == {'owner': TEST_ADDRESS, 'sig': signed.sign.sig}


def test_cannot_resign(unsigned_tx):
    signed, _ = sign(unsigned_tx, TEST_PRIVATE_KEY)
    with pytest.raises(TransactionError):
        sign(signed, TEST_PRIVATE_KEY)


@pytest.mark.parametrize('key', [
    'not-a-key',
    '0x1234',
    '00' * 32,
    'FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141',
    b'\x01' * 31,
    12345,
])
def test_invalid_private_keys(key):
    with pytest.raises(InvalidPrivateKey):
        Signer(key)


def test_invalid_key_error_hides_key_material():
    key = 'ff' * 32
    with pytest.raises(InvalidPrivateKey) as excinfo:
        Signer(key)
    assert key not in str(excinfo.value)
