"""HTTP client for a Liberdus gateway"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

import httpx

from .errors import ApplicationError, NetworkError, RequestTimeout, SubmissionError, SubmissionHttpError
from .shapes import SUBMISSION_RESULT_SHAPES, TX_ID_SHAPES, error_reason, first_object, first_scalar
from .transaction import Transaction, serialize

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    """Normalized response of an inject call"""
    raw: Dict[str, Any]
    result: Dict[str, Any] = field(default_factory=dict)

    @property
    def tx_id(self) -> Optional[str]:
        return extract_tx_id(self.raw)

    @property
    def reason(self) -> Optional[str]:
        return self.result.get('reason')


def extract_tx_id(response: Union[SubmissionResult, Dict[str, Any], None]) -> Optional[str]:
    """Transaction id from any of the known inject response shapes"""
    if isinstance(response, SubmissionResult):
        response = response.raw
    if not isinstance(response, dict):
        return None
    return first_scalar(response, TX_ID_SHAPES)


class GatewayClient:
    """Submits signed transactions to a gateway"""

    def __init__(self, timeout_ms: int = 15000, transport: Optional[httpx.BaseTransport] = None):
        self.timeout_ms = timeout_ms
        self._transport = transport

    def submit(self, gateway_url: str, signed_tx: Transaction) -> SubmissionResult:
        """
        POST ``signed_tx`` to ``{gateway_url}/inject``.

        A single attempt is made; retry policy belongs to the caller.
        """
        if signed_tx.sign is None:
            raise SubmissionError("Transaction must be signed before submission")

        url = f"{gateway_url.rstrip('/')}/inject"
        envelope = {'tx': serialize(signed_tx)}
        logger.info("Submitting %s transaction from %s to %s", signed_tx.type, signed_tx.from_, url)

        with httpx.Client(timeout=self.timeout_ms / 1000, transport=self._transport) as client:
            try:
                response = client.post(url, json=envelope)
            except httpx.TimeoutException as exc:
                raise RequestTimeout(f"Submission to {url} timed out after {self.timeout_ms}ms") from exc
            except httpx.HTTPError as exc:
                raise NetworkError(f"Submission to {url} failed: {exc}") from exc

        text = response.text
        if not response.is_success:
            raise SubmissionHttpError(response.status_code, text, url)

        try:
            body = json.loads(text) if text.strip() else {}
        except ValueError as exc:
            raise SubmissionError(f"Gateway returned malformed JSON: {text[:200]}") from exc
        if not isinstance(body, dict):
            raise SubmissionError(f"Gateway returned unexpected payload: {text[:200]}")

        if body.get('error'):
            raise ApplicationError(error_reason(body['error'], text))

        result = first_object(body, SUBMISSION_RESULT_SHAPES) or {}
        if result.get('success') is False:
            raise ApplicationError(error_reason(result, text))

        submission = SubmissionResult(raw=body, result=result)
        logger.info("Gateway accepted transaction %s", submission.tx_id or '<no id>')
        return submission
