"""Escrow funding fee calculation.

The client funding a contract pays the contract principal plus a platform fee
(percentage by subscription tier) plus an approximation of the card
processor's fee on the post-platform-fee subtotal::

    platform_fee  = amount * tier_pct / 100
    processor_fee = (amount + platform_fee) * 0.029 + 0.30
    total_charge  = amount + platform_fee + processor_fee

Values stay at full float precision; rounding to cents happens only at the
point a charge or a display string is produced (see ``FeeBreakdown``).
"""

from .config import EscrowFeeConfig, default_config
from .models import FeeBreakdown, SubscriptionTier


def platform_fee_percentage(
    subscription_tier: str | None, config: EscrowFeeConfig | None = None
) -> float:
    cfg = config or default_config
    return cfg.tiers.for_tier(SubscriptionTier.parse(subscription_tier).value)


def calculate_escrow_fees(
    contract_amount: float,
    subscription_tier: str | None = SubscriptionTier.FREE,
    config: EscrowFeeConfig | None = None,
) -> FeeBreakdown:
    """Compute platform fee, processor fee and total charge for a contract.

    Callers reject non-positive amounts before calling.
    """
    cfg = config or default_config
    tier = SubscriptionTier.parse(subscription_tier)
    pct = cfg.tiers.for_tier(tier.value)

    platform_fee = contract_amount * pct / 100
    processor_fee = (contract_amount + platform_fee) * cfg.processor.rate + cfg.processor.fixed
    total_charge = contract_amount + platform_fee + processor_fee

    return FeeBreakdown(
        contract_amount=contract_amount,
        subscription_tier=tier,
        platform_fee_percentage=pct,
        platform_fee=platform_fee,
        processor_fee=processor_fee,
        total_charge=total_charge,
    )


class EscrowFeeCalculator:
    """Config-bound wrapper around ``calculate_escrow_fees``."""

    def __init__(self, config: EscrowFeeConfig | None = None) -> None:
        self._config = config or default_config

    @property
    def config(self) -> EscrowFeeConfig:
        return self._config

    def calculate(
        self, contract_amount: float, subscription_tier: str | None = None
    ) -> FeeBreakdown:
        return calculate_escrow_fees(contract_amount, subscription_tier, self._config)

    def tier_table(self) -> dict[str, float]:
        return {tier.value: self._config.tiers.for_tier(tier.value) for tier in SubscriptionTier}
