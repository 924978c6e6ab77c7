"""Gateway and network parameter discovery"""

import json
import logging
import math
import re
from typing import Any, Dict, List, Optional

import httpx

from .config import Settings, resolve_base_url
from .errors import (
    ConfigParseError,
    HttpError,
    InvalidNetworkParameters,
    NetworkError,
    RequestTimeout,
    TooManyRedirects,
)
from .params import NetworkParameters
from .shapes import NETWORK_ACCOUNT_SHAPES, first_object

logger = logging.getLogger(__name__)

# Reserved account publishing network-wide constants
ZERO_ACCOUNT_ID = '0' * 64

_TOKEN = re.compile(
    r'''
    (?P<space>\s+)
  | (?P<comment>//[^\n]*|/\*.*?\*/)
  | (?P<dstring>"(?:[^"\\]|\\.)*")
  | (?P<sstring>'(?:[^'\\]|\\.)*')
  | (?P<number>-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)
  | (?P<ident>[A-Za-z_$][\w$]*)
  | (?P<punct>[{}\[\]:,])
    ''',
    re.VERBOSE | re.DOTALL,
)


_ESCAPES = {
    'n': '\n', 't': '\t', 'r': '\r', 'b': '\b', 'f': '\f', 'v': '\v', '0': '\0',
    '\n': '', '\r': '',
}
_ESCAPE = re.compile(r'\\(x[0-9a-fA-F]{2}|u\{[0-9a-fA-F]{1,6}\}|u[0-9a-fA-F]{4}|.)', re.DOTALL)


def _unescape(body: str) -> str:
    """Decode the escape sequences of a JavaScript string literal body"""
    def replace(match):
        seq = match.group(1)
        if seq[0] in 'xu' and len(seq) > 1:
            try:
                return chr(int(seq[1:].strip('{}'), 16))
            except ValueError as exc:
                raise ConfigParseError(f"Invalid escape \\{seq} in network description") from exc
        if seq[0] in 'xu':
            raise ConfigParseError(f"Invalid escape \\{seq} in network description")
        return _ESCAPES.get(seq, seq)

    return _ESCAPE.sub(replace, body)


def _tokens(text: str, strict: bool = True):
    """Yield ``(kind, value, start)`` for data tokens of ``text``, skipping blanks and comments"""
    pos = 0
    while pos < len(text):
        match = _TOKEN.match(text, pos)
        if match is None:
            if strict:
                raise ConfigParseError(f"Unexpected character {text[pos]!r} at offset {pos}")
            pos += 1
            continue
        pos = match.end()
        if match.lastgroup not in ('space', 'comment'):
            yield match.lastgroup, match.group(), match.start()


def _object_span(document: str) -> str:
    """Source of the first top-level object literal, ignoring braces in comments and strings"""
    depth = 0
    start = None
    for kind, value, offset in _tokens(document, strict=False):
        if kind != 'punct' or value not in '{}':
            continue
        if value == '{':
            if depth == 0:
                start = offset
            depth += 1
        elif depth:
            depth -= 1
            if depth == 0:
                return document[start:offset + 1]
    raise ConfigParseError("network description holds no object")


def _literal_to_json(text: str) -> str:
    """
    Rewrite a JavaScript object literal into JSON.

    Only data is accepted: quoted or bare keys, strings, numbers, booleans,
    null, arrays and objects. Anything else is rejected.
    """
    out: List[str] = []
    bare_key: Optional[str] = None
    for kind, value, _ in _tokens(text):
        # identifiers other than literals are only valid as object keys
        if bare_key is not None and value != ':':
            raise ConfigParseError(f"Unsupported expression {bare_key!r} in network description")
        bare_key = None
        if kind in ('sstring', 'dstring'):
            value = json.dumps(_unescape(value[1:-1]))
        elif kind == 'ident':
            if value not in ('true', 'false', 'null'):
                bare_key = value
                value = json.dumps(value)
        elif kind == 'punct' and value in '}]' and out and out[-1] == ',':
            out.pop()
        out.append(value)
    return ''.join(out)


def parse_gateway_url(document: str) -> str:
    """
    Extract the first gateway's ``web`` URL from a network topology document.

    The document is either JSON or a script that assigns a single object
    literal (``const network = {...}; export default network``). The object
    literal is parsed as data; nothing is evaluated.
    """
    body = _object_span(document)
    try:
        network = json.loads(body)
    except ValueError:
        try:
            network = json.loads(_literal_to_json(body))
        except ValueError as exc:
            raise ConfigParseError(f"network description is malformed: {exc}") from exc

    gateways = network.get('gateways') if isinstance(network, dict) else None
    if not isinstance(gateways, list) or not gateways or not isinstance(gateways[0], dict):
        raise ConfigParseError("gateway list not found in network description")
    web = gateways[0].get('web')
    if not isinstance(web, str) or not web.strip():
        raise ConfigParseError("gateway web not found in network description")
    return web.strip().rstrip('/')


def _number(current: Dict[str, Any], key: str) -> float:
    raw = current.get(key)
    if raw is None or raw == '':
        return 0.0
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidNetworkParameters(f"{key} is not a number: {raw!r}") from exc


class NetworkDiscovery:
    """Resolves the active gateway and the network's economic constants"""

    def __init__(
        self,
        timeout_ms: int = 15000,
        max_redirects: int = 5,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.timeout_ms = timeout_ms
        self.max_redirects = max_redirects
        self._transport = transport

    def fetch_text(
        self,
        url: str,
        timeout_ms: Optional[int] = None,
        max_redirects: Optional[int] = None,
    ) -> str:
        """GET ``url`` following redirects manually, returning the body text"""
        timeout_ms = self.timeout_ms if timeout_ms is None else timeout_ms
        max_redirects = self.max_redirects if max_redirects is None else max_redirects
        redirects = 0

        with httpx.Client(
            timeout=timeout_ms / 1000,
            follow_redirects=False,
            transport=self._transport,
        ) as client:
            while True:
                try:
                    response = client.get(url)
                except httpx.TimeoutException as exc:
                    raise RequestTimeout(f"Request timed out after {timeout_ms}ms for {url}") from exc
                except httpx.HTTPError as exc:
                    raise NetworkError(f"Request to {url} failed: {exc}") from exc

                location = response.headers.get('location')
                if 300 <= response.status_code < 400 and location:
                    if redirects >= max_redirects:
                        raise TooManyRedirects(f"Too many redirects fetching {url}")
                    redirects += 1
                    url = str(response.url.join(location))
                    logger.debug("Following redirect %d to %s", redirects, url)
                    continue

                if response.status_code >= 400:
                    raise HttpError(response.status_code, response.text, url)
                return response.text

    def extract_gateway_url(self, config_source: str, base_url: str) -> str:
        """Fetch ``{base_url}/{config_source}`` and return the first gateway URL"""
        url = f"{base_url.rstrip('/')}/{config_source.lstrip('/')}"
        gateway_url = parse_gateway_url(self.fetch_text(url))
        logger.info("Resolved gateway %s from %s", gateway_url, url)
        return gateway_url

    def fetch_network_parameters(self, gateway_url: str, base_url: Optional[str] = None) -> NetworkParameters:
        """
        Read the zero-account from the gateway and derive NetworkParameters.

        No value is ever defaulted into validity; a missing or non-positive
        stability factor or fee makes the whole call fail.
        """
        gateway_url = gateway_url.rstrip('/')
        text = self.fetch_text(f"{gateway_url}/account/{ZERO_ACCOUNT_ID}")
        try:
            document = json.loads(text)
        except ValueError as exc:
            raise InvalidNetworkParameters(f"zero-account response is not JSON: {exc}") from exc

        current = first_object(document, NETWORK_ACCOUNT_SHAPES)
        if current is None:
            raise InvalidNetworkParameters("zero-account response carries no current parameters")

        stability_factor = _number(current, 'stabilityFactorStr')
        fee_usd = _number(current, 'transactionFeeUsdStr')
        min_toll_usd = _number(current, 'minTollUsdStr')
        toll_tax_percent = _number(current, 'tollNetworkTaxPercent')
        if not math.isfinite(toll_tax_percent) or toll_tax_percent < 0:
            raise InvalidNetworkParameters(f"tollNetworkTaxPercent must be >= 0, got {toll_tax_percent}")

        params = NetworkParameters.derive(
            base_url=(base_url or gateway_url).rstrip('/'),
            gateway_url=gateway_url,
            stability_factor=stability_factor,
            network_fee_usd=fee_usd,
            default_toll_usd=min_toll_usd,
            toll_tax_percent=toll_tax_percent,
        )
        logger.info(
            "Network parameters: stabilityFactor=%s fee=%s toll=%s tax=%s",
            params.stability_factor,
            params.network_fee_asset,
            params.default_toll_asset,
            params.network_toll_tax_rate,
        )
        return params

    def discover(self, settings: Settings) -> NetworkParameters:
        """Run the full discovery chain once"""
        base_url = resolve_base_url(settings)
        gateway_url = self.extract_gateway_url(settings.network_config, base_url)
        return self.fetch_network_parameters(gateway_url, base_url=base_url)


def discover(settings: Optional[Settings] = None, transport: Optional[httpx.BaseTransport] = None) -> NetworkParameters:
    """Resolve NetworkParameters from settings loaded from file and environment"""
    settings = settings or Settings.load()
    discovery = NetworkDiscovery(
        timeout_ms=settings.request_timeout_ms,
        max_redirects=settings.max_redirects,
        transport=transport,
    )
    return discovery.discover(settings)
