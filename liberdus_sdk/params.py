"""Network-wide economic parameters"""

import math
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict

from .errors import InvalidNetworkParameters


def usd_to_asset(usd: float, stability_factor: float) -> float:
    """Convert a USD amount to the native asset, NaN when undefined"""
    if stability_factor > 0 and usd > 0:
        return usd / stability_factor
    return math.nan


@dataclass(frozen=True)
class NetworkParameters:
    """
    Values published by the zero-account, resolved once per process.

    Construction fails with InvalidNetworkParameters unless the stability
    factor is positive, both derived asset amounts are finite and the toll
    tax rate lies in [0, 1).
    """
    base_url: str
    gateway_url: str
    stability_factor: float
    network_fee_usd: float
    default_toll_usd: float
    network_toll_tax_rate: float
    network_fee_asset: float
    default_toll_asset: float
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        if not self.base_url or not self.gateway_url:
            raise InvalidNetworkParameters("base and gateway URLs must be non-empty")
        if not (math.isfinite(self.stability_factor) and self.stability_factor > 0):
            raise InvalidNetworkParameters(
                f"stabilityFactor must be positive, got {self.stability_factor}"
            )
        for name in ('network_fee_usd', 'default_toll_usd', 'network_fee_asset', 'default_toll_asset'):
            value = getattr(self, name)
            if not (math.isfinite(value) and value >= 0):
                raise InvalidNetworkParameters(f"{name} must be a finite non-negative number, got {value}")
        if not (math.isfinite(self.network_toll_tax_rate) and 0 <= self.network_toll_tax_rate < 1):
            raise InvalidNetworkParameters(
                f"toll tax rate must be in [0, 1), got {self.network_toll_tax_rate}"
            )

    @classmethod
    def derive(
        cls,
        base_url: str,
        gateway_url: str,
        stability_factor: float,
        network_fee_usd: float,
        default_toll_usd: float,
        toll_tax_percent: float,
    ) -> 'NetworkParameters':
        """Derive asset-denominated amounts from USD values and validate"""
        return cls(
            base_url=base_url,
            gateway_url=gateway_url,
            stability_factor=stability_factor,
            network_fee_usd=network_fee_usd,
            default_toll_usd=default_toll_usd,
            network_toll_tax_rate=toll_tax_percent / 100,
            network_fee_asset=usd_to_asset(network_fee_usd, stability_factor),
            default_toll_asset=usd_to_asset(default_toll_usd, stability_factor),
        )

    def usd_to_asset(self, usd: float) -> float:
        return usd_to_asset(usd, self.stability_factor)

    def toll_after_tax(self, toll: float) -> float:
        """Portion of a toll the recipient keeps once the network takes its cut"""
        return toll * (1 - self.network_toll_tax_rate)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['fetched_at'] = self.fetched_at.isoformat()
        return data
