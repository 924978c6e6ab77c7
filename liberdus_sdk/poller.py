"""Transaction confirmation polling"""

import json
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, Optional, Union
from urllib.parse import quote

import httpx

from .errors import TransactionFailed, TransactionTimeout
from .shapes import TRANSACTION_SHAPES, first_object

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_REASON = 'Transaction failed'


class PollStatus(Enum):
    """Confirmation state"""
    POLLING = 'polling'
    SUCCESS = 'success'
    FAILED = 'failed'
    TIMEOUT = 'timeout'


@dataclass(frozen=True)
class Success:
    receipt: Dict[str, Any]
    status: ClassVar[PollStatus] = PollStatus.SUCCESS


@dataclass(frozen=True)
class Failed:
    reason: str
    receipt: Dict[str, Any] = field(default_factory=dict)
    status: ClassVar[PollStatus] = PollStatus.FAILED


@dataclass(frozen=True)
class Timeout:
    status: ClassVar[PollStatus] = PollStatus.TIMEOUT


PollResult = Union[Success, Failed, Timeout]


def primary_endpoint(base_url: str, tx_id: str) -> str:
    return f"{base_url.rstrip('/')}/transaction/{quote(tx_id, safe='')}"


def collector_endpoint(base_url: str, tx_id: str) -> str:
    return f"{base_url.rstrip('/')}/collector/api/transaction?appReceiptId={quote(tx_id, safe='')}"


class ConfirmationPoller:
    """
    Polls the ledger until a submitted transaction reaches a terminal state.

    Recent transactions are answered by the primary endpoint; once
    ``collector_switch_ms`` has elapsed the durable collector store is
    queried instead. Individual poll failures are retried until the
    overall deadline, so ``wait`` never raises for them.
    """

    def __init__(
        self,
        request_timeout_ms: int = 15000,
        transport: Optional[httpx.BaseTransport] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.request_timeout_ms = request_timeout_ms
        self._transport = transport
        self._clock = clock
        self._sleep = sleep

    def wait(
        self,
        base_url: str,
        tx_id: str,
        poll_interval_ms: int = 2000,
        collector_switch_ms: int = 20000,
        timeout_ms: int = 30000,
    ) -> PollResult:
        """Poll until Success, Failed or Timeout"""
        start = self._clock()
        attempt = 0

        with httpx.Client(
            timeout=self.request_timeout_ms / 1000,
            headers={'Accept': 'application/json'},
            transport=self._transport,
        ) as client:
            while True:
                elapsed_ms = (self._clock() - start) * 1000
                if elapsed_ms >= timeout_ms:
                    break

                attempt += 1
                if elapsed_ms <= collector_switch_ms:
                    url = primary_endpoint(base_url, tx_id)
                else:
                    url = collector_endpoint(base_url, tx_id)
                logger.debug("Poll %d for %s at %.0fms: %s", attempt, tx_id, elapsed_ms, url)

                remaining_ms = timeout_ms - elapsed_ms
                payload = self._poll_once(client, url, min(self.request_timeout_ms, remaining_ms))
                if (self._clock() - start) * 1000 > timeout_ms:
                    # answers arriving after the deadline do not count
                    break
                if payload is not None:
                    success = payload.get('success')
                    if success is True:
                        logger.info("Transaction %s succeeded after %d polls", tx_id, attempt)
                        return Success(receipt=payload)
                    if success is False:
                        reason = payload.get('reason') or DEFAULT_FAILURE_REASON
                        logger.info("Transaction %s failed: %s", tx_id, reason)
                        return Failed(reason=str(reason), receipt=payload)

                remaining_ms = timeout_ms - (self._clock() - start) * 1000
                if remaining_ms > 0:
                    self._sleep(min(poll_interval_ms, remaining_ms) / 1000)

        logger.info("Transaction %s not confirmed within %dms", tx_id, timeout_ms)
        return Timeout()

    def _poll_once(self, client: httpx.Client, url: str, timeout_ms: float) -> Optional[Dict[str, Any]]:
        """Transaction payload at ``url``, or None when absent or unreachable"""
        try:
            response = client.get(url, timeout=timeout_ms / 1000)
        except httpx.HTTPError as exc:
            logger.debug("Poll of %s failed: %s", url, exc)
            return None
        if not response.is_success:
            logger.debug("Poll of %s returned HTTP %d", url, response.status_code)
            return None
        try:
            body = json.loads(response.text) if response.text.strip() else {}
        except ValueError:
            logger.debug("Poll of %s returned a non-JSON body", url)
            return None
        return first_object(body, TRANSACTION_SHAPES)


def wait_for_transaction(
    base_url: str,
    tx_id: str,
    poller: Optional[ConfirmationPoller] = None,
    **options: Any,
) -> Dict[str, Any]:
    """
    Wait for ``tx_id`` and return its receipt.

    Raises TransactionFailed or TransactionTimeout instead of returning a
    non-success result.
    """
    poller = poller or ConfirmationPoller()
    result = poller.wait(base_url, tx_id, **options)
    if isinstance(result, Success):
        return result.receipt
    if isinstance(result, Failed):
        raise TransactionFailed(result.reason, result.receipt)
    raise TransactionTimeout(tx_id, options.get('timeout_ms', 30000))
