"""Escrow funding fee configuration."""

import os
from dataclasses import dataclass, field


@dataclass
class TierFeePercentages:
    free: float = 10.0
    professional: float = 7.5
    business: float = 5.0

    def for_tier(self, tier: str) -> float:
        return getattr(self, tier, self.free)


@dataclass
class ProcessorFee:
    # Card processing approximation: 2.9% + $0.30 on the post-platform-fee subtotal
    rate: float = 0.029
    fixed: float = 0.30


@dataclass
class EscrowFeeConfig:
    tiers: TierFeePercentages = field(default_factory=TierFeePercentages)
    processor: ProcessorFee = field(default_factory=ProcessorFee)

    @classmethod
    def from_env(cls) -> "EscrowFeeConfig":
        """Load config with env var overrides. Env vars use ESCROW_ prefix."""
        config = cls()

        if v := os.getenv("ESCROW_FEE_PCT_FREE"):
            config.tiers.free = float(v)
        if v := os.getenv("ESCROW_FEE_PCT_PROFESSIONAL"):
            config.tiers.professional = float(v)
        if v := os.getenv("ESCROW_FEE_PCT_BUSINESS"):
            config.tiers.business = float(v)

        if v := os.getenv("ESCROW_PROCESSOR_RATE"):
            config.processor.rate = float(v)
        if v := os.getenv("ESCROW_PROCESSOR_FIXED"):
            config.processor.fixed = float(v)

        return config


# Module-level default instance
default_config = EscrowFeeConfig()
