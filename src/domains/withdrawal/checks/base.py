"""Abstract base class for withdrawal risk checks."""

from abc import ABC, abstractmethod
from datetime import datetime

import structlog

from ..config import WithdrawalRiskConfig
from ..models import CheckResult, WithdrawalContext
from ..repository import DataSourceError, WithdrawalDataSource

logger = structlog.get_logger()


class RiskCheck(ABC):
    """Base class for the six risk categories.

    ``evaluate`` wraps ``_assess``: a ``DataSourceError`` raised while looking
    up history degrades the check to its fixed fallback penalty. Anything else
    propagates to the assessor.
    """

    check_id: str
    category: str  # account | amount | behavior | payout_method | network | rate_limit
    error_flag: str

    async def evaluate(
        self,
        context: WithdrawalContext,
        data_source: WithdrawalDataSource,
        config: WithdrawalRiskConfig,
        now: datetime,
    ) -> CheckResult:
        try:
            return await self._assess(context, data_source, config, now)
        except DataSourceError:
            logger.warning(
                "risk_check_degraded",
                check_id=self.check_id,
                user_id=context.user_id,
                exc_info=True,
            )
            return self._degraded(self._error_score(config))

    @abstractmethod
    async def _assess(
        self,
        context: WithdrawalContext,
        data_source: WithdrawalDataSource,
        config: WithdrawalRiskConfig,
        now: datetime,
    ) -> CheckResult: ...

    @abstractmethod
    def _error_score(self, config: WithdrawalRiskConfig) -> int: ...

    def _result(
        self,
        score: int = 0,
        flags: list[str] | None = None,
        details: dict | None = None,
    ) -> CheckResult:
        return CheckResult(
            check_id=self.check_id,
            category=self.category,
            score=score,
            flags=flags or [],
            details=details or {},
        )

    def _degraded(self, score: int) -> CheckResult:
        return CheckResult(
            check_id=self.check_id,
            category=self.category,
            score=score,
            flags=[self.error_flag],
            degraded=True,
        )
