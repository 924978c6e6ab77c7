"""Transaction builder and codec"""

import json
import time
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

import nacl.encoding
import nacl.hash

from .config import DEFAULT_HASH_KEY
from .errors import InvalidAmount, TransactionError

DECIMALS = 18

# Fields encoded as tagged big integers on the wire
BIGINT_FIELDS = frozenset({'amount', 'fee', 'toll'})

Amount = Union[str, int, float, Decimal]


@dataclass(frozen=True)
class Signature:
    """Signature attached to a transaction"""
    owner: str
    sig: str

    def to_dict(self) -> Dict[str, str]:
        return {'owner': self.owner, 'sig': self.sig}


@dataclass(frozen=True)
class Transaction:
    """
    Immutable transaction payload.

    ``sign`` is the only field set after construction, and only through
    ``with_signature`` which returns a new object.
    """
    type: str
    from_: str
    amount: int
    timestamp: int
    network_id: str
    extra: Mapping[str, Any] = field(default_factory=dict)
    sign: Optional[Signature] = None

    def __post_init__(self):
        object.__setattr__(self, 'extra', MappingProxyType(dict(self.extra)))

    def with_signature(self, signature: Signature) -> 'Transaction':
        if self.sign is not None:
            raise TransactionError("Transaction is already signed")
        return replace(self, sign=signature)

    def to_dict(self, include_sign: bool = True) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.extra)
        data.update({
            'type': self.type,
            'from': self.from_,
            'amount': self.amount,
            'timestamp': self.timestamp,
            'networkId': self.network_id,
        })
        if include_sign and self.sign is not None:
            data['sign'] = self.sign.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Transaction':
        """Build a transaction from its wire field names"""
        required = ('type', 'from', 'amount', 'timestamp', 'networkId')
        missing = [name for name in required if name not in data]
        if missing:
            raise TransactionError(f"Missing transaction fields: {', '.join(missing)}")
        sign = data.get('sign')
        extra = {k: v for k, v in data.items() if k not in required and k != 'sign'}
        return cls(
            type=data['type'],
            from_=data['from'],
            amount=_decode_bigint(data['amount']),
            timestamp=int(data['timestamp']),
            network_id=data['networkId'],
            extra=extra,
            sign=Signature(owner=sign['owner'], sig=sign['sig']) if sign else None,
        )


class TransactionBuilder:
    """Single-use builder for constructing transactions"""

    def __init__(self, tx_type: str):
        self.tx_type = tx_type
        self.from_: Optional[str] = None
        self.amount: Optional[int] = None
        self.timestamp: Optional[int] = None
        self.network_id: Optional[str] = None
        self.extra: Dict[str, Any] = {}
        self._built = False

    @classmethod
    def create(
        cls,
        address: str,
        amount: int,
        network_id: str,
        timestamp: Optional[int] = None,
    ) -> 'TransactionBuilder':
        """Builder for a ``create`` transaction that funds ``address``"""
        builder = cls('create').set_from(address).set_amount(amount).set_network_id(network_id)
        if timestamp is not None:
            builder.set_timestamp(timestamp)
        return builder

    def set_from(self, address: str) -> 'TransactionBuilder':
        self.from_ = address
        return self

    def set_amount(self, amount: int) -> 'TransactionBuilder':
        """Set the amount in minor units"""
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise InvalidAmount(f"Amount must be a non-negative integer of minor units, got {amount!r}")
        self.amount = amount
        return self

    def set_timestamp(self, timestamp: int) -> 'TransactionBuilder':
        self.timestamp = int(timestamp)
        return self

    def set_network_id(self, network_id: str) -> 'TransactionBuilder':
        self.network_id = network_id
        return self

    def with_field(self, name: str, value: Any) -> 'TransactionBuilder':
        """Add a type specific field"""
        if name in ('type', 'from', 'amount', 'timestamp', 'networkId', 'sign'):
            raise TransactionError(f"Field {name!r} has a dedicated setter")
        self.extra[name] = value
        return self

    def build(self) -> Transaction:
        """Build the transaction"""
        if self._built:
            raise TransactionError("Builder already used")
        if not self.from_:
            raise TransactionError("Sender address not set")
        if self.amount is None:
            raise TransactionError("Amount not set")
        if not self.network_id:
            raise TransactionError("Network id not set")

        self._built = True
        return Transaction(
            type=self.tx_type,
            from_=self.from_,
            amount=self.amount,
            timestamp=self.timestamp if self.timestamp is not None else int(time.time() * 1000),
            network_id=self.network_id,
            extra=self.extra,
        )


def _encode_bigint(value: int) -> Dict[str, str]:
    return {'dataType': 'bi', 'value': format(value, 'x')}


def _decode_bigint(value: Any) -> int:
    if isinstance(value, dict) and value.get('dataType') == 'bi':
        return int(value['value'], 16)
    if isinstance(value, bool) or not isinstance(value, int):
        raise TransactionError(f"Expected an integer amount, got {value!r}")
    return value


def _wire_value(name: str, value: Any) -> Any:
    if name in BIGINT_FIELDS and isinstance(value, int) and not isinstance(value, bool):
        return _encode_bigint(value)
    return value


def serialize(tx: Transaction, include_sign: bool = True) -> str:
    """
    Stable JSON form of ``tx``.

    Keys are sorted at every level so two equal transactions serialize
    identically whatever order their fields were set in.
    """
    data = {name: _wire_value(name, value) for name, value in tx.to_dict(include_sign).items()}
    return json.dumps(data, sort_keys=True, separators=(',', ':'), ensure_ascii=False)


def canonicalize(tx: Transaction) -> bytes:
    """Canonical bytes of the unsigned payload"""
    return serialize(tx, include_sign=False).encode('utf-8')


def hash_tx(tx: Transaction, hash_key: str = DEFAULT_HASH_KEY) -> str:
    """Keyed BLAKE2b-256 of the canonical payload, as lower-case hex"""
    digest = nacl.hash.blake2b(
        canonicalize(tx),
        digest_size=32,
        key=bytes.fromhex(hash_key),
        encoder=nacl.encoding.HexEncoder,
    )
    return digest.decode('ascii')


def to_minor_units(amount: Amount, decimals: int = DECIMALS) -> int:
    """
    Convert a human readable amount to integer minor units.

    The fraction is zero-padded or truncated (never rounded) to ``decimals``
    digits. Integers are taken to already be minor units. Floats use their
    shortest round-tripping representation.
    """
    if isinstance(amount, bool):
        raise InvalidAmount(f"Invalid amount: {amount!r}")
    if isinstance(amount, int):
        if amount < 0:
            raise InvalidAmount(f"Amount must be non-negative, got {amount}")
        return amount

    try:
        value = Decimal(repr(amount)) if isinstance(amount, float) else Decimal(str(amount).strip())
    except InvalidOperation as exc:
        raise InvalidAmount(f"Invalid amount: {amount!r}") from exc
    if not value.is_finite() or value < 0:
        raise InvalidAmount(f"Amount must be a finite non-negative decimal, got {amount!r}")

    whole, _, fraction = format(value, 'f').partition('.')
    fraction = (fraction + '0' * decimals)[:decimals]
    return int(whole + fraction)


def from_minor_units(value: int, decimals: int = DECIMALS) -> Decimal:
    """Exact decimal amount for ``value`` minor units"""
    return Decimal(f"{int(value)}E-{decimals}")
