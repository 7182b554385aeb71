"""Withdrawal attempt rate limits over the trailing hour and day."""

from datetime import datetime, timedelta

from ..config import WithdrawalRiskConfig
from ..models import CheckResult, RiskFlag, WithdrawalContext
from ..repository import WithdrawalDataSource
from .base import RiskCheck


class RateLimitCheck(RiskCheck):
    check_id = "rate_limit"
    category = "rate_limit"
    error_flag = RiskFlag.RATE_LIMIT_CHECK_ERROR

    def _error_score(self, config: WithdrawalRiskConfig) -> int:
        return config.rate_limit.error_score

    async def _assess(
        self,
        context: WithdrawalContext,
        data_source: WithdrawalDataSource,
        config: WithdrawalRiskConfig,
        now: datetime,
    ) -> CheckResult:
        cfg = config.rate_limit
        score = 0
        flags: list[str] = []

        hourly = await data_source.count_withdrawals(context.user_id, now - timedelta(hours=1))
        if hourly >= cfg.max_hourly_attempts:
            score += cfg.hourly_limit_score
            flags.append(RiskFlag.HOURLY_RATE_LIMIT_EXCEEDED)

        daily = await data_source.count_withdrawals(context.user_id, now - timedelta(hours=24))
        if daily >= cfg.max_daily_attempts:
            score += cfg.daily_limit_score
            flags.append(RiskFlag.DAILY_RATE_LIMIT_EXCEEDED)

        return self._result(score, flags, {"hourly_count": hourly, "daily_count": daily})
