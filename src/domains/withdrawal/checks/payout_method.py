"""Payout destination: ownership, age, verification and type."""

from datetime import datetime

from ..config import WithdrawalRiskConfig
from ..models import CheckResult, PayoutMethodType, RiskFlag, WithdrawalContext
from ..repository import WithdrawalDataSource
from .base import RiskCheck


class PayoutMethodCheck(RiskCheck):
    check_id = "payout_method_security"
    category = "payout_method"
    error_flag = RiskFlag.PAYOUT_METHOD_CHECK_ERROR

    def _error_score(self, config: WithdrawalRiskConfig) -> int:
        return config.payout_method.error_score

    async def _assess(
        self,
        context: WithdrawalContext,
        data_source: WithdrawalDataSource,
        config: WithdrawalRiskConfig,
        now: datetime,
    ) -> CheckResult:
        cfg = config.payout_method
        method = await data_source.get_payout_method(context.payout_method_id, context.user_id)
        # Missing or owned by someone else: stop here
        if method is None:
            return self._result(cfg.invalid_method_score, [RiskFlag.INVALID_PAYOUT_METHOD])

        score = 0
        flags: list[str] = []

        method_age_hours = (now - method.added_at).total_seconds() / 3600
        if method_age_hours < cfg.min_method_age_hours:
            score += cfg.new_method_score
            flags.append(RiskFlag.NEW_PAYOUT_METHOD)

        if not method.is_verified:
            score += cfg.unverified_score
            flags.append(RiskFlag.UNVERIFIED_PAYOUT_METHOD)

        if method.method_type == PayoutMethodType.DEBIT_CARD:
            score += cfg.debit_card_score
            flags.append(RiskFlag.DEBIT_CARD_PAYOUT)

        return self._result(
            score,
            flags,
            {
                "method_age_hours": round(method_age_hours, 2),
                "method_type": method.method_type,
                "is_verified": method.is_verified,
            },
        )
