"""Liberdus Python SDK: network discovery, signing, submission and confirmation"""

from .client import GatewayClient, SubmissionResult, extract_tx_id
from .config import Settings, resolve_base_url
from .discovery import NetworkDiscovery, discover
from .errors import (
    ApplicationError,
    ConfigParseError,
    DiscoveryError,
    HttpError,
    InvalidAmount,
    InvalidNetworkParameters,
    InvalidPrivateKey,
    LiberdusError,
    NetworkError,
    RequestTimeout,
    SigningError,
    SubmissionError,
    SubmissionHttpError,
    TooManyRedirects,
    TransactionError,
    TransactionFailed,
    TransactionTimeout,
)
from .funding import fund_account
from .params import NetworkParameters
from .poller import ConfirmationPoller, Failed, PollStatus, Success, Timeout, wait_for_transaction
from .signer import Signer, derive_address, expand_address, sign
from .transaction import (
    Signature,
    Transaction,
    TransactionBuilder,
    canonicalize,
    from_minor_units,
    hash_tx,
    serialize,
    to_minor_units,
)

__version__ = '0.1.0'

__all__ = [
    'ApplicationError',
    'ConfigParseError',
    'ConfirmationPoller',
    'DiscoveryError',
    'Failed',
    'GatewayClient',
    'HttpError',
    'InvalidAmount',
    'InvalidNetworkParameters',
    'InvalidPrivateKey',
    'LiberdusError',
    'NetworkDiscovery',
    'NetworkError',
    'NetworkParameters',
    'PollStatus',
    'RequestTimeout',
    'Settings',
    'Signature',
    'Signer',
    'SigningError',
    'SubmissionError',
    'SubmissionHttpError',
    'SubmissionResult',
    'Success',
    'Timeout',
    'TooManyRedirects',
    'Transaction',
    'TransactionBuilder',
    'TransactionError',
    'TransactionFailed',
    'TransactionTimeout',
    'canonicalize',
    'derive_address',
    'discover',
    'expand_address',
    'extract_tx_id',
    'from_minor_units',
    'fund_account',
    'hash_tx',
    'resolve_base_url',
    'serialize',
    'sign',
    'to_minor_units',
    'wait_for_transaction',
]
