"""Account posture: age, identity verification, KYC risk, recent failures."""

from datetime import datetime, timedelta

from ..config import WithdrawalRiskConfig
from ..models import (
    CheckResult,
    IdentityStatus,
    RiskFlag,
    SecurityEventType,
    WithdrawalContext,
)
from ..repository import WithdrawalDataSource
from .base import RiskCheck


class AccountSecurityCheck(RiskCheck):
    check_id = "account_security"
    category = "account"
    error_flag = RiskFlag.ACCOUNT_CHECK_ERROR

    def _error_score(self, config: WithdrawalRiskConfig) -> int:
        return config.account.error_score

    async def _assess(
        self,
        context: WithdrawalContext,
        data_source: WithdrawalDataSource,
        config: WithdrawalRiskConfig,
        now: datetime,
    ) -> CheckResult:
        cfg = config.account
        profile = await data_source.get_profile(context.user_id)
        if profile is None:
            return self._result(cfg.profile_not_found_score, [RiskFlag.PROFILE_NOT_FOUND])

        score = 0
        flags: list[str] = []

        account_age_days = (now - profile.created_at).total_seconds() / 86400
        if account_age_days < cfg.min_account_age_days:
            score += cfg.new_account_score
            flags.append(RiskFlag.NEW_ACCOUNT)

        if profile.identity_status != IdentityStatus.VERIFIED:
            score += cfg.identity_not_verified_score
            flags.append(RiskFlag.IDENTITY_NOT_VERIFIED)

        if profile.kyc_risk_score is not None and profile.kyc_risk_score > cfg.high_kyc_risk_min:
            score += cfg.high_kyc_risk_score
            flags.append(RiskFlag.HIGH_KYC_RISK)

        recent_failures = await data_source.count_security_events(
            context.user_id,
            SecurityEventType.FAILURE,
            now - timedelta(hours=cfg.failure_window_hours),
        )
        if recent_failures >= cfg.max_failed_attempts:
            score += cfg.multiple_failures_score
            flags.append(RiskFlag.MULTIPLE_RECENT_FAILURES)

        return self._result(
            score,
            flags,
            {
                "account_age_days": round(account_age_days, 2),
                "identity_status": profile.identity_status,
                "kyc_risk_score": profile.kyc_risk_score,
                "recent_failures": recent_failures,
            },
        )
