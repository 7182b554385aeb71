"""Escrow funding fees domain."""

from .checkout import build_checkout_line_items, build_checkout_metadata
from .config import EscrowFeeConfig
from .fees import EscrowFeeCalculator, calculate_escrow_fees, platform_fee_percentage
from .models import FeeBreakdown, SubscriptionTier, to_minor_units

__all__ = [
    "EscrowFeeCalculator",
    "EscrowFeeConfig",
    "FeeBreakdown",
    "SubscriptionTier",
    "build_checkout_line_items",
    "build_checkout_metadata",
    "calculate_escrow_fees",
    "platform_fee_percentage",
    "to_minor_units",
]
