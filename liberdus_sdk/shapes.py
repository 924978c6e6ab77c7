"""
Decoders for gateway responses.

The gateway nests the same logical fields differently depending on the
endpoint. Each decoder here walks a fixed, ordered list of candidate shapes
and returns the first match, so callers never chain lookups themselves.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

PathElement = Union[str, int]


@dataclass(frozen=True)
class Shape:
    """A candidate location inside a decoded JSON document"""
    name: str
    path: Tuple[PathElement, ...]
    # skip this shape when the document carries any of these top-level keys
    unless: Tuple[str, ...] = ()

    def extract(self, document: Any) -> Any:
        if isinstance(document, dict) and any(key in document for key in self.unless):
            return None
        value = document
        for element in self.path:
            if isinstance(element, int):
                if not isinstance(value, list) or len(value) <= element:
                    return None
            elif not isinstance(value, dict) or element not in value:
                return None
            value = value[element]
        return value


# GET /transaction/{id} and GET /collector/api/transaction?appReceiptId={id}
TRANSACTION_SHAPES = (
    Shape('transaction', ('transaction',)),
    Shape('result', ('result',)),
    Shape('collector listing', ('transactions', 0)),
    Shape('document', (), unless=('transactions',)),
)

# POST /inject
TX_ID_SHAPES = (
    Shape('txId', ('txId',)),
    Shape('txid', ('txid',)),
    Shape('result.txId', ('result', 'txId')),
    Shape('result.txid', ('result', 'txid')),
)

SUBMISSION_RESULT_SHAPES = (
    Shape('result', ('result',)),
    Shape('document', ()),
)

# GET {gateway}/account/{zero-id}
NETWORK_ACCOUNT_SHAPES = (
    Shape('account.current', ('account', 'current')),
    Shape('account.data.current', ('account', 'data', 'current')),
)


def first_object(document: Any, shapes: Tuple[Shape, ...]) -> Optional[Dict[str, Any]]:
    """Return the first non-empty object matched by ``shapes``"""
    for shape in shapes:
        value = shape.extract(document)
        if isinstance(value, dict) and value:
            return value
    return None


def first_scalar(document: Any, shapes: Tuple[Shape, ...]) -> Optional[str]:
    """Return the first non-empty string or number matched by ``shapes`` as text"""
    for shape in shapes:
        value = shape.extract(document)
        if isinstance(value, bool) or value is None or value == '':
            continue
        if isinstance(value, (str, int, float)):
            return str(value)
    return None


def error_reason(error: Any, default: str) -> str:
    """Human readable reason from an ``error`` member of any shape"""
    if isinstance(error, dict):
        for key in ('reason', 'message'):
            if error.get(key):
                return str(error[key])
        return default
    if isinstance(error, str) and error:
        return error
    return default
