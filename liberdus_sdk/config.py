"""Client settings and base URL resolution"""

import logging
import os
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import DiscoveryError

logger = logging.getLogger(__name__)

ENV_PREFIX = 'LIBERDUS_'
CONFIG_ENV = ENV_PREFIX + 'CONFIG'

# libsodium generic-hash key used by the network for object hashing
DEFAULT_HASH_KEY = '69fa4195670576c0160d660c3be36556ff8d504725be8a59b5a96509e0c994bc'


@dataclass(frozen=True)
class Settings:
    """Settings shared by discovery, submission and polling"""
    base_url: Optional[str] = None
    network_config: str = 'network.js'
    request_timeout_ms: int = 15000
    max_redirects: int = 5
    poll_interval_ms: int = 2000
    collector_switch_ms: int = 20000
    poll_timeout_ms: int = 30000
    hash_key: str = DEFAULT_HASH_KEY

    @classmethod
    def load(
        cls,
        path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> 'Settings':
        """
        Build settings from an optional TOML file and the environment.

        The file is taken from ``path`` or ``LIBERDUS_CONFIG``; its
        ``[liberdus]`` table is read. ``LIBERDUS_<FIELD>`` variables
        override file values.
        """
        environ = os.environ if environ is None else environ
        if path is None and environ.get(CONFIG_ENV):
            path = Path(environ[CONFIG_ENV])

        values: Dict[str, Any] = {}
        if path is not None:
            values.update(_read_toml(Path(path)))
        for field in fields(cls):
            raw = environ.get(ENV_PREFIX + field.name.upper())
            if raw is not None and raw.strip():
                values[field.name] = raw.strip()

        return replace(cls(), **{k: _coerce(cls, k, v) for k, v in values.items()})


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        data = tomllib.loads(path.read_text())
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise DiscoveryError(f"Failed to read config {path}: {exc}") from exc
    table = data.get('liberdus', {})
    if not isinstance(table, dict):
        raise DiscoveryError(f"[liberdus] in {path} must be a table")
    known = {f.name for f in fields(Settings)}
    unknown = set(table) - known
    if unknown:
        logger.warning("Ignoring unknown settings in %s: %s", path, ', '.join(sorted(unknown)))
    return {k: v for k, v in table.items() if k in known}


def _coerce(cls, name: str, value: Any) -> Any:
    default = getattr(cls(), name)
    if isinstance(default, int) and not isinstance(value, int):
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise DiscoveryError(f"Setting {name} must be an integer, got {value!r}") from exc
    return value


def resolve_base_url(settings: Settings) -> str:
    """Return the configured application base URL without trailing slashes"""
    base_url = (settings.base_url or '').strip().rstrip('/')
    if not base_url:
        raise DiscoveryError(
            f"baseURL not configured; set {ENV_PREFIX}BASE_URL or base_url in the config file"
        )
    return base_url
