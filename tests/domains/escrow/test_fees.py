"""Unit tests for escrow fee calculation."""

import pytest

from src.domains.escrow import (
    EscrowFeeCalculator,
    EscrowFeeConfig,
    SubscriptionTier,
    calculate_escrow_fees,
)
from src.domains.escrow.fees import platform_fee_percentage
from src.domains.escrow.models import to_display, to_minor_units


class TestCalculateEscrowFees:
    def test_free_tier_worked_example(self):
        fees = calculate_escrow_fees(5000.0, "free")
        assert fees.platform_fee == pytest.approx(500.0)
        # (5000 + 500) * 0.029 + 0.30
        assert fees.processor_fee == pytest.approx(159.80)
        assert fees.total_charge == pytest.approx(5659.80)
        assert fees.platform_fee_percentage == 10.0
        assert fees.subscription_tier == SubscriptionTier.FREE

    def test_display_rounds_to_cents(self):
        fees = calculate_escrow_fees(5000.0, "free")
        assert fees.display() == {
            "contract_amount": "5000.00",
            "platform_fee": "500.00",
            "processor_fee": "159.80",
            "total_charge": "5659.80",
        }
        assert fees.minor_units() == {
            "contract_amount": 500000,
            "platform_fee": 50000,
            "processor_fee": 15980,
            "total_charge": 565980,
        }

    @pytest.mark.parametrize(
        "tier,pct,platform_fee",
        [("free", 10.0, 100.0), ("professional", 7.5, 75.0), ("business", 5.0, 50.0)],
    )
    def test_tier_percentages(self, tier, pct, platform_fee):
        fees = calculate_escrow_fees(1000.0, tier)
        assert fees.platform_fee_percentage == pct
        assert fees.platform_fee == pytest.approx(platform_fee)

    def test_total_is_sum_of_parts(self):
        fees = calculate_escrow_fees(1234.56, "professional")
        assert fees.total_charge == pytest.approx(
            fees.contract_amount + fees.platform_fee + fees.processor_fee
        )

    def test_processor_fee_applies_to_post_platform_subtotal(self):
        fees = calculate_escrow_fees(100.0, "business")
        assert fees.processor_fee == pytest.approx(105.0 * 0.029 + 0.30)

    @pytest.mark.parametrize("tier", [None, "", "enterprise", "FREE"])
    def test_unknown_tier_billed_as_free(self, tier):
        fees = calculate_escrow_fees(1000.0, tier)
        assert fees.subscription_tier == SubscriptionTier.FREE
        assert fees.platform_fee_percentage == 10.0

    def test_idempotent(self):
        assert calculate_escrow_fees(777.77, "business") == calculate_escrow_fees(
            777.77, "business"
        )

    @pytest.mark.parametrize("tier", list(SubscriptionTier))
    def test_total_monotonic_in_amount(self, tier):
        amounts = [0.01, 1.0, 10.0, 99.99, 100.0, 1000.0, 25_000.0]
        totals = [calculate_escrow_fees(a, tier).total_charge for a in amounts]
        assert totals == sorted(totals)
        assert len(set(totals)) == len(totals)

    @pytest.mark.parametrize("amount", [1.0, 250.0, 5000.0, 100_000.0])
    def test_higher_tier_never_pays_more(self, amount):
        free = calculate_escrow_fees(amount, "free").total_charge
        professional = calculate_escrow_fees(amount, "professional").total_charge
        business = calculate_escrow_fees(amount, "business").total_charge
        assert free >= professional >= business

    def test_tiny_amount_dominated_by_fixed_fee(self):
        fees = calculate_escrow_fees(0.01, "free")
        assert fees.processor_fee == pytest.approx(0.011 * 0.029 + 0.30)
        assert fees.minor_units()["total_charge"] == 31


class TestRounding:
    def test_half_up_to_minor_units(self):
        assert to_minor_units(10.125) == 1013
        assert to_minor_units(159.8) == 15980
        assert to_minor_units(0.005) == 1

    def test_display_half_up(self):
        assert str(to_display(2.675)) == "2.68"
        assert str(to_display(10.0)) == "10.00"


class TestPlatformFeePercentage:
    def test_lookup(self):
        assert platform_fee_percentage("professional") == 7.5
        assert platform_fee_percentage("nonsense") == 10.0


class TestEscrowFeeCalculator:
    def test_uses_bound_config(self):
        config = EscrowFeeConfig()
        config.tiers.business = 2.0
        calculator = EscrowFeeCalculator(config)
        fees = calculator.calculate(1000.0, "business")
        assert fees.platform_fee == pytest.approx(20.0)
        assert calculator.config is config

    def test_tier_table(self):
        assert EscrowFeeCalculator().tier_table() == {
            "free": 10.0,
            "professional": 7.5,
            "business": 5.0,
        }


class TestEscrowFeeConfig:
    def test_defaults(self):
        config = EscrowFeeConfig()
        assert config.processor.rate == 0.029
        assert config.processor.fixed == 0.30

    def test_from_env_overrides(self, monkeypatch):
        monkeypatch.setenv("ESCROW_FEE_PCT_FREE", "12")
        monkeypatch.setenv("ESCROW_PROCESSOR_FIXED", "0.25")
        config = EscrowFeeConfig.from_env()
        assert config.tiers.free == 12.0
        assert config.tiers.professional == 7.5
        assert config.processor.fixed == 0.25

    def test_from_env_without_overrides(self, monkeypatch):
        for name in ("ESCROW_FEE_PCT_FREE", "ESCROW_PROCESSOR_RATE", "ESCROW_PROCESSOR_FIXED"):
            monkeypatch.delenv(name, raising=False)
        assert EscrowFeeConfig.from_env() == EscrowFeeConfig()
