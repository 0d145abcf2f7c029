"""Derived per-tier metrics: priority fee, USD cost and confirmation time."""

import math
from dataclasses import dataclass
from typing import Dict

from .constants import (
    DEFAULT_BLOCK_TIME_SECS,
    DEFAULT_GAS_LIMIT,
    GWEI_PER_ETH,
    TARGET_BLOCKS,
    TIERS,
)
from .models import GasSample


@dataclass(frozen=True)
class TierEstimate:
    """Computed metrics for one price tier."""
    tier: str
    price: float
    base_fee: float
    priority_fee: float
    cost_usd: float
    confirmation_seconds: int


def priority_fee(tier_price: float, base_fee: float) -> float:
    """Tip above the network base fee, in Gwei."""
    return tier_price - base_fee


def cost_usd(tier_price_gwei: float, gas_limit: int, eth_usd_price: float) -> float:
    """
    Estimate the USD cost of a transaction.

    Args:
        tier_price_gwei: Gas price in Gwei
        gas_limit: Gas units consumed
        eth_usd_price: ETH price in USD

    Returns:
        Cost in USD rounded to 2 decimal places
    """
    cost_eth = (tier_price_gwei * gas_limit) / GWEI_PER_ETH
    return round(cost_eth * eth_usd_price, 2)


def estimated_confirmation_seconds(
    tier_price: float,
    tier: str,
    block_time_secs: float = DEFAULT_BLOCK_TIME_SECS,
) -> int:
    """
    Rough confirmation time: fewer blocks to wait the higher the price.

    Args:
        tier_price: Gas price in Gwei
        tier: One of "low", "avg", "high"
        block_time_secs: Average block interval

    Returns:
        Estimated seconds until confirmation

    Raises:
        KeyError: If tier is unknown
        ValueError: If tier_price is not positive
    """
    if tier_price <= 0:
        raise ValueError(f"tier price must be positive, got {tier_price}")
    blocks = math.ceil(TARGET_BLOCKS[tier] / tier_price)
    return int(math.ceil(blocks * block_time_secs))


def tier_estimates(
    sample: GasSample,
    eth_usd_price: float,
    gas_limit: int = DEFAULT_GAS_LIMIT,
    block_time_secs: float = DEFAULT_BLOCK_TIME_SECS,
) -> Dict[str, TierEstimate]:
    """
    Compute metrics for every tier of a complete sample.

    A sample without a base fee is treated as having a base fee of 0.
    """
    base_fee = sample.base_fee or 0.0
    result = {}
    for tier in TIERS:
        price = getattr(sample, tier)
        result[tier] = TierEstimate(
            tier=tier,
            price=price,
            base_fee=base_fee,
            priority_fee=priority_fee(price, base_fee),
            cost_usd=cost_usd(price, gas_limit, eth_usd_price),
            confirmation_seconds=estimated_confirmation_seconds(price, tier, block_time_secs),
        )
    return result
