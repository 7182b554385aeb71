"""Pydantic models for the escrow domain."""

import math
from decimal import ROUND_HALF_UP, Decimal
from enum import StrEnum

from pydantic import BaseModel, Field

_CENT = Decimal("0.01")


class SubscriptionTier(StrEnum):
    FREE = "free"
    PROFESSIONAL = "professional"
    BUSINESS = "business"

    @classmethod
    def parse(cls, value: str | None) -> "SubscriptionTier":
        """Unknown or missing tiers are billed as free."""
        try:
            return cls(value)
        except ValueError:
            return cls.FREE


def to_minor_units(value: float) -> int:
    """Round half-up to whole cents, the way charges are created."""
    return math.floor(value * 100 + 0.5)


def to_display(value: float) -> Decimal:
    return Decimal(repr(value)).quantize(_CENT, rounding=ROUND_HALF_UP)


class FeeBreakdown(BaseModel):
    """Full-precision fee triple; round only when charging or displaying."""

    contract_amount: float
    subscription_tier: SubscriptionTier
    platform_fee_percentage: float
    platform_fee: float
    processor_fee: float
    total_charge: float

    def minor_units(self) -> dict[str, int]:
        return {
            "contract_amount": to_minor_units(self.contract_amount),
            "platform_fee": to_minor_units(self.platform_fee),
            "processor_fee": to_minor_units(self.processor_fee),
            "total_charge": to_minor_units(self.total_charge),
        }

    def display(self) -> dict[str, str]:
        return {
            "contract_amount": str(to_display(self.contract_amount)),
            "platform_fee": str(to_display(self.platform_fee)),
            "processor_fee": str(to_display(self.processor_fee)),
            "total_charge": str(to_display(self.total_charge)),
        }


class EscrowFeeRequest(BaseModel):
    contract_amount: float = Field(gt=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    subscription_tier: str | None = None
    payer_id: str | None = None
    contract_id: str | None = None
    contract_title: str | None = None
    contract_number: str | None = None
