"""Withdrawal risk assessment: checks -> aggregate -> verdict -> audit log.

The six category checks run sequentially against the injected data source.
Their scores are summed (uncapped) and their flags concatenated after any
manual flags an administrator has put on the account. The verdict is a pure
function of the total and the flags:

- review when score >= 50, amount > $1,000, or ``critical_risk`` is present
- allow when score < 100 and neither ``blocked_user`` nor
  ``account_compromised`` is present

Any unexpected error while scoring yields the fail-secure assessment (score
100, ``assessment_error``, review, deny). Every assessment is appended to the
security log.

The assessment and the caller's withdrawal insert are not atomic: concurrent
requests from one user can each pass the rate-limit check on a stale count.
"""

from datetime import UTC, datetime

import structlog

from .checks import RiskCheck, default_checks
from .config import VerdictThresholds, WithdrawalRiskConfig, default_config
from .models import (
    RiskFlag,
    SecurityAssessment,
    SecurityEventType,
    SecurityLogEntry,
    WithdrawalContext,
)
from .network import NetworkReputationChecker
from .repository import WithdrawalDataSource

logger = structlog.get_logger()

FAIL_SECURE_REASON = "Security assessment failed - manual review required"
DEFAULT_BLOCK_REASON = "Withdrawal blocked due to security concerns"

# First matching flag wins
_BLOCK_REASONS: tuple[tuple[str, str], ...] = (
    (RiskFlag.BLOCKED_USER, "Account has been blocked due to security concerns"),
    (RiskFlag.ACCOUNT_COMPROMISED, "Account appears to be compromised - please contact support"),
    (RiskFlag.IDENTITY_NOT_VERIFIED, "Identity verification required for withdrawals"),
    (RiskFlag.HOURLY_RATE_LIMIT_EXCEEDED, "Too many withdrawal attempts this hour"),
    (RiskFlag.DAILY_RATE_LIMIT_EXCEEDED, "Daily withdrawal attempt limit reached"),
)


def needs_review(
    risk_score: int, amount_cents: int, flags: list[str], verdict: VerdictThresholds
) -> bool:
    return (
        risk_score >= verdict.review_score
        or amount_cents > verdict.max_amount_without_review_cents
        or RiskFlag.CRITICAL_RISK in flags
    )


def is_allowed(risk_score: int, flags: list[str], verdict: VerdictThresholds) -> bool:
    return (
        risk_score < verdict.block_score
        and RiskFlag.BLOCKED_USER not in flags
        and RiskFlag.ACCOUNT_COMPROMISED not in flags
    )


def block_reason(flags: list[str]) -> str:
    for flag, reason in _BLOCK_REASONS:
        if flag in flags:
            return reason
    return DEFAULT_BLOCK_REASON


def fail_secure_assessment(
    config: WithdrawalRiskConfig | None = None, assessed_at: datetime | None = None
) -> SecurityAssessment:
    cfg = config or default_config
    return SecurityAssessment(
        risk_score=cfg.verdict.fail_secure_score,
        risk_flags=[RiskFlag.ASSESSMENT_ERROR],
        requires_review=True,
        allow_withdrawal=False,
        reason=FAIL_SECURE_REASON,
        assessed_at=assessed_at,
    )


class WithdrawalRiskAssessor:
    """Scores one withdrawal attempt. Holds no per-request state."""

    def __init__(
        self,
        data_source: WithdrawalDataSource,
        config: WithdrawalRiskConfig | None = None,
        network_checker: NetworkReputationChecker | None = None,
        checks: list[RiskCheck] | None = None,
    ) -> None:
        self._data_source = data_source
        self._config = config or default_config
        self._checks = checks if checks is not None else default_checks(network_checker)

    async def assess(self, context: WithdrawalContext) -> SecurityAssessment:
        """Assess a withdrawal request. Never raises."""
        now = context.requested_at or datetime.now(UTC)

        try:
            assessment = await self._score(context, now)
        except Exception:
            logger.exception(
                "withdrawal_assessment_failed",
                user_id=context.user_id,
                payout_method_id=context.payout_method_id,
            )
            assessment = fail_secure_assessment(self._config, assessed_at=now)

        await self._log_assessment(context, assessment)

        logger.info(
            "withdrawal_assessed",
            user_id=context.user_id,
            amount_cents=context.amount_cents,
            risk_score=assessment.risk_score,
            flags=assessment.risk_flags,
            requires_review=assessment.requires_review,
            allow_withdrawal=assessment.allow_withdrawal,
        )
        return assessment

    async def _score(self, context: WithdrawalContext, now: datetime) -> SecurityAssessment:
        cfg = self._config
        manual_flags = await self._load_manual_flags(context.user_id)

        results = []
        for check in self._checks:
            results.append(await check.evaluate(context, self._data_source, cfg, now))

        risk_score = sum(r.score for r in results)
        flags = list(manual_flags)
        for r in results:
            flags.extend(r.flags)

        requires_review = needs_review(risk_score, context.amount_cents, flags, cfg.verdict)
        allow = is_allowed(risk_score, flags, cfg.verdict)

        return SecurityAssessment(
            risk_score=risk_score,
            risk_flags=flags,
            requires_review=requires_review,
            allow_withdrawal=allow,
            reason=None if allow else block_reason(flags),
            check_results=results,
            assessed_at=now,
        )

    async def _load_manual_flags(self, user_id: str) -> list[str]:
        # A failed lookup must not read as "blocked"; score without manual flags.
        try:
            return await self._data_source.get_manual_flags(user_id)
        except Exception:
            logger.warning("manual_flag_lookup_failed", user_id=user_id, exc_info=True)
            return []

    async def _log_assessment(
        self, context: WithdrawalContext, assessment: SecurityAssessment
    ) -> None:
        entry = SecurityLogEntry(
            user_id=context.user_id,
            event_type=(
                SecurityEventType.SUCCESS
                if assessment.allow_withdrawal
                else SecurityEventType.FAILURE
            ),
            ip_address=context.ip_address,
            user_agent=context.user_agent,
            risk_score=assessment.risk_score,
            flags=assessment.risk_flags,
            metadata={
                "action": "security_assessment",
                "amount_cents": context.amount_cents,
                "currency": context.currency,
                "payout_method_id": context.payout_method_id,
                "urgency": context.urgency.value,
                "requires_review": assessment.requires_review,
                "block_reason": assessment.reason,
                "category_scores": assessment.category_scores(),
            },
        )
        await self._append(entry)

    async def record_outcome(
        self,
        context: WithdrawalContext,
        assessment: SecurityAssessment,
        event_type: SecurityEventType,
        withdrawal_id: str | None = None,
        extra: dict | None = None,
    ) -> None:
        """Append the caller's outcome event for a request already assessed."""
        metadata = {
            "action": "withdrawal_request",
            "amount_cents": context.amount_cents,
            "currency": context.currency,
            "requires_review": assessment.requires_review,
        }
        if extra:
            metadata.update(extra)
        await self._append(
            SecurityLogEntry(
                user_id=context.user_id,
                withdrawal_id=withdrawal_id,
                event_type=event_type,
                ip_address=context.ip_address,
                user_agent=context.user_agent,
                risk_score=assessment.risk_score,
                flags=assessment.risk_flags,
                metadata=metadata,
            )
        )

    async def _append(self, entry: SecurityLogEntry) -> None:
        try:
            await self._data_source.append_security_log(entry)
        except Exception:
            logger.warning(
                "security_log_write_failed",
                user_id=entry.user_id,
                event_type=entry.event_type,
                exc_info=True,
            )
