"""Transaction signing and ledger address derivation"""

import logging
import re
from typing import Tuple, Union

from eth_account import Account
from eth_account.signers.local import LocalAccount

from .config import DEFAULT_HASH_KEY
from .errors import InvalidPrivateKey, SigningError
from .transaction import Signature, Transaction, hash_tx

logger = logging.getLogger(__name__)

ADDRESS_WIDTH = 64
_SHORT_ADDRESS = re.compile(r'^(0x)?[0-9a-fA-F]{40}$')
_PRIVATE_KEY = re.compile(r'^(0x)?[0-9a-fA-F]{64}$')
# secp256k1 group order
CURVE_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

PrivateKey = Union[str, bytes]


def expand_address(address: str) -> str:
    """
    Format a 20-byte account address to the ledger's fixed width.

    The ``0x`` prefix is stripped, the hex lower-cased and right-padded
    with zeros to 64 characters.
    """
    if not _SHORT_ADDRESS.match(address):
        raise ValueError(f"Not a 20-byte hex address: {address!r}")
    short = address[2:] if address.lower().startswith('0x') else address
    return short.lower().ljust(ADDRESS_WIDTH, '0')


def load_account(private_key: PrivateKey) -> LocalAccount:
    if isinstance(private_key, str):
        key = private_key.strip()
        if not _PRIVATE_KEY.match(key):
            raise InvalidPrivateKey("Private key must be 32 bytes of hex")
    elif isinstance(private_key, (bytes, bytearray)):
        if len(private_key) != 32:
            raise InvalidPrivateKey(f"Private key must be 32 bytes, got {len(private_key)}")
        key = bytes(private_key)
    else:
        raise InvalidPrivateKey(f"Unsupported private key type {type(private_key).__name__}")

    scalar = int.from_bytes(key, 'big') if isinstance(key, bytes) else int(key, 16)
    if not 0 < scalar < CURVE_ORDER:
        # never echo key material
        raise InvalidPrivateKey("Private key is not a valid secp256k1 scalar")
    return Account.from_key(key)


def derive_address(private_key: PrivateKey) -> str:
    """Ledger address owned by ``private_key``"""
    return expand_address(load_account(private_key).address)


class Signer:
    """Signs transactions with an account's private key"""

    def __init__(self, private_key: PrivateKey, hash_key: str = DEFAULT_HASH_KEY):
        self._account = load_account(private_key)
        self.hash_key = hash_key
        self.address = expand_address(self._account.address)

    def sign(self, tx: Transaction) -> Tuple[Transaction, str]:
        """
        Sign ``tx`` and return the signed transaction with its hash.

        The hash covers every field except ``sign`` and doubles as the
        client-side transaction id.
        """
        digest = hash_tx(tx, self.hash_key)
        try:
            signed = self._account.unsafe_sign_hash(bytes.fromhex(digest))
        except Exception as exc:
            raise SigningError(f"Failed to sign transaction {digest}: {exc}") from exc

        if tx.from_ != self.address:
            logger.debug("Signing %s transaction from %s as %s", tx.type, tx.from_, self.address)
        signature = Signature(owner=self.address, sig=bytes(signed.signature).hex())
        return tx.with_signature(signature), digest


def sign(tx: Transaction, private_key: PrivateKey, hash_key: str = DEFAULT_HASH_KEY) -> Tuple[Transaction, str]:
    """Sign ``tx`` with ``private_key``"""
    return Signer(private_key, hash_key).sign(tx)
