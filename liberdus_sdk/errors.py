"""Error types raised by the Liberdus SDK"""

from typing import Any, Dict, Optional


class LiberdusError(Exception):
    """Base class for every SDK error"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class DiscoveryError(LiberdusError):
    """Base URL, gateway or network parameters could not be resolved"""


class ConfigParseError(DiscoveryError):
    """Network topology document is malformed or lacks a gateway"""


class InvalidNetworkParameters(DiscoveryError):
    """Zero-account values failed validation"""


class NetworkError(LiberdusError):
    """Transport level failure"""


class RequestTimeout(NetworkError):
    """Request exceeded its timeout"""


class TooManyRedirects(NetworkError):
    """Redirect chain exceeded the configured limit"""


class HttpError(NetworkError):
    """HTTP response with an error status"""

    def __init__(self, status: int, body: str = '', url: Optional[str] = None):
        self.status = status
        self.body = body
        self.url = url
        where = f" fetching {url}" if url else ''
        detail = f": {body}" if body else ''
        super().__init__(f"HTTP {status}{where}{detail}")


class InvalidAmount(LiberdusError, ValueError):
    """Amount is not a valid non-negative decimal"""


class TransactionError(LiberdusError):
    """Transaction could not be built"""


class InvalidPrivateKey(LiberdusError):
    """Private key is malformed or outside the curve order"""


class SigningError(LiberdusError):
    """Underlying signature primitive failed"""


class SubmissionError(LiberdusError):
    """Gateway rejected or could not accept a transaction"""


class SubmissionHttpError(HttpError, SubmissionError):
    """Gateway answered the inject call with an error status"""


class ApplicationError(SubmissionError):
    """Gateway accepted the request but reported an application failure"""


class TransactionFailed(LiberdusError):
    """Ledger reported the transaction as unsuccessful"""

    def __init__(self, reason: str, receipt: Optional[Dict[str, Any]] = None):
        self.receipt = receipt
        super().__init__(reason)


class TransactionTimeout(LiberdusError):
    """No terminal transaction state observed before the deadline"""

    def __init__(self, tx_id: str, timeout_ms: int):
        self.tx_id = tx_id
        self.timeout_ms = timeout_ms
        super().__init__(f"Transaction {tx_id} polling timed out after {timeout_ms}ms")
