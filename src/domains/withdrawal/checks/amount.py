"""Amount size and trailing-week withdrawal pattern."""

from datetime import datetime, timedelta

from ..config import WithdrawalRiskConfig
from ..models import CheckResult, RiskFlag, WithdrawalContext
from ..repository import WithdrawalDataSource
from .base import RiskCheck


class AmountPatternCheck(RiskCheck):
    check_id = "amount_pattern"
    category = "amount"
    error_flag = RiskFlag.AMOUNT_CHECK_ERROR

    def _error_score(self, config: WithdrawalRiskConfig) -> int:
        return config.amount.error_score

    async def _assess(
        self,
        context: WithdrawalContext,
        data_source: WithdrawalDataSource,
        config: WithdrawalRiskConfig,
        now: datetime,
    ) -> CheckResult:
        cfg = config.amount
        amount = context.amount_cents
        score = 0
        flags: list[str] = []

        if amount >= cfg.high_amount_cents:
            score += cfg.high_amount_score
            flags.append(RiskFlag.HIGH_AMOUNT)
        elif amount >= cfg.medium_amount_cents:
            score += cfg.medium_amount_score
            flags.append(RiskFlag.MEDIUM_AMOUNT)

        recent = await data_source.list_withdrawals(
            context.user_id, now - timedelta(days=cfg.history_window_days)
        )
        details: dict = {"recent_count": len(recent)}

        if recent:
            avg_amount = sum(w.amount_cents for w in recent) / len(recent)
            details["avg_amount_cents"] = avg_amount
            if amount > avg_amount * cfg.unusual_multiplier:
                score += cfg.unusual_pattern_score
                flags.append(RiskFlag.UNUSUAL_AMOUNT_PATTERN)

            settled = [w for w in recent if w.status in cfg.rapid_statuses]
            details["settled_count"] = len(settled)
            if len(settled) >= cfg.rapid_min_count:
                score += cfg.rapid_pattern_score
                flags.append(RiskFlag.RAPID_WITHDRAWAL_PATTERN)

        return self._result(score, flags, details)
