"""Account funding through a signed ``create`` transaction"""

import logging
from typing import Any, Dict, Optional, Union

from .client import GatewayClient, SubmissionResult
from .config import Settings
from .params import NetworkParameters
from .poller import ConfirmationPoller, wait_for_transaction
from .signer import PrivateKey, Signer
from .transaction import Amount, TransactionBuilder, to_minor_units

logger = logging.getLogger(__name__)


def fund_account(
    params: NetworkParameters,
    private_key: PrivateKey,
    amount: Amount,
    network_id: str,
    gateway: Optional[GatewayClient] = None,
    poller: Optional[ConfirmationPoller] = None,
    settings: Optional[Settings] = None,
    **poll_options: Any,
) -> Union[Dict[str, Any], SubmissionResult]:
    """
    Fund the account owned by ``private_key`` with ``amount`` of the native asset.

    Strings, floats and Decimals are human readable amounts; integers are
    minor units. ``settings`` supplies the hash key, the request timeout of
    clients not passed in, and the polling schedule; ``poll_options``
    override the schedule. Returns the confirmation receipt, or the
    submission result when the gateway assigns no transaction id.
    """
    settings = settings or Settings()
    options = {
        'poll_interval_ms': settings.poll_interval_ms,
        'collector_switch_ms': settings.collector_switch_ms,
        'timeout_ms': settings.poll_timeout_ms,
    }
    options.update(poll_options)

    signer = Signer(private_key, hash_key=settings.hash_key)
    tx = TransactionBuilder.create(signer.address, to_minor_units(amount), network_id).build()
    signed_tx, digest = signer.sign(tx)
    logger.info("Funding %s with %s (client id %s)", signer.address, amount, digest)

    gateway = gateway or GatewayClient(timeout_ms=settings.request_timeout_ms)
    submission = gateway.submit(params.gateway_url, signed_tx)
    tx_id = submission.tx_id
    if not tx_id:
        logger.warning("Gateway returned no transaction id for %s; skipping confirmation", digest)
        return submission

    poller = poller or ConfirmationPoller(request_timeout_ms=settings.request_timeout_ms)
    return wait_for_transaction(params.gateway_url, tx_id, poller=poller, **options)
