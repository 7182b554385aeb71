"""Unit tests for the payout method check."""

from datetime import timedelta

import pytest

from src.domains.withdrawal.checks import PayoutMethodCheck
from src.domains.withdrawal.models import RiskFlag

from .fakes import NOW, InMemoryWithdrawalDataSource, make_context, utc_config

CONFIG = utc_config()


class TestPayoutMethodCheck:
    check = PayoutMethodCheck()

    @pytest.mark.asyncio
    async def test_established_verified_bank_account(self):
        ds = InMemoryWithdrawalDataSource()
        ds.add_payout_method()
        result = await self.check.evaluate(make_context(), ds, CONFIG, NOW)
        assert result.score == 0
        assert result.flags == []
        assert result.details["method_type"] == "bank_account"

    @pytest.mark.asyncio
    async def test_new_method_boundary(self):
        ds = InMemoryWithdrawalDataSource()
        ds.add_payout_method(age=timedelta(hours=71))
        young = await self.check.evaluate(make_context(), ds, CONFIG, NOW)
        assert young.score == 35
        assert young.flags == [RiskFlag.NEW_PAYOUT_METHOD]

        ds = InMemoryWithdrawalDataSource()
        ds.add_payout_method(age=timedelta(hours=73))
        older = await self.check.evaluate(make_context(), ds, CONFIG, NOW)
        assert older.score == 0

    @pytest.mark.asyncio
    async def test_unverified_method(self):
        ds = InMemoryWithdrawalDataSource()
        ds.add_payout_method(is_verified=False)
        result = await self.check.evaluate(make_context(), ds, CONFIG, NOW)
        assert result.score == 40
        assert result.flags == [RiskFlag.UNVERIFIED_PAYOUT_METHOD]

    @pytest.mark.asyncio
    async def test_debit_card(self):
        ds = InMemoryWithdrawalDataSource()
        ds.add_payout_method(method_type="debit_card")
        result = await self.check.evaluate(make_context(), ds, CONFIG, NOW)
        assert result.score == 10
        assert result.flags == [RiskFlag.DEBIT_CARD_PAYOUT]

    @pytest.mark.asyncio
    async def test_new_unverified_debit_card_accumulates(self):
        ds = InMemoryWithdrawalDataSource()
        ds.add_payout_method(method_type="debit_card", is_verified=False, age=timedelta(hours=1))
        result = await self.check.evaluate(make_context(), ds, CONFIG, NOW)
        assert result.score == 35 + 40 + 10

    @pytest.mark.asyncio
    async def test_missing_method_short_circuits(self):
        ds = InMemoryWithdrawalDataSource()
        result = await self.check.evaluate(make_context(), ds, CONFIG, NOW)
        assert result.score == 50
        assert result.flags == [RiskFlag.INVALID_PAYOUT_METHOD]

    @pytest.mark.asyncio
    async def test_method_owned_by_another_user_is_invalid(self):
        ds = InMemoryWithdrawalDataSource()
        ds.add_payout_method(user_id="someone-else", is_verified=False, age=timedelta(hours=1))
        result = await self.check.evaluate(make_context(), ds, CONFIG, NOW)
        assert result.score == 50
        assert result.flags == [RiskFlag.INVALID_PAYOUT_METHOD]

    @pytest.mark.asyncio
    async def test_lookup_failure_degrades(self):
        ds = InMemoryWithdrawalDataSource(failing=("get_payout_method",))
        result = await self.check.evaluate(make_context(), ds, CONFIG, NOW)
        assert result.score == 25
        assert result.flags == [RiskFlag.PAYOUT_METHOD_CHECK_ERROR]
