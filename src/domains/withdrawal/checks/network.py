"""Network and device signals taken from the request itself."""

from datetime import datetime

import structlog

from ..config import WithdrawalRiskConfig
from ..models import CheckResult, RiskFlag, WithdrawalContext
from ..network import (
    NetworkReputationChecker,
    NoopNetworkReputationChecker,
    ReputationLookupError,
    is_automation_user_agent,
    is_private_or_loopback,
)
from ..repository import WithdrawalDataSource
from .base import RiskCheck

logger = structlog.get_logger()


class NetworkSecurityCheck(RiskCheck):
    check_id = "network_security"
    category = "network"
    error_flag = RiskFlag.NETWORK_CHECK_ERROR

    def __init__(self, reputation: NetworkReputationChecker | None = None) -> None:
        self._reputation = reputation or NoopNetworkReputationChecker()

    def _error_score(self, config: WithdrawalRiskConfig) -> int:
        return config.network.error_score

    async def _assess(
        self,
        context: WithdrawalContext,
        data_source: WithdrawalDataSource,
        config: WithdrawalRiskConfig,
        now: datetime,
    ) -> CheckResult:
        cfg = config.network
        score = 0
        flags: list[str] = []

        if is_private_or_loopback(context.ip_address):
            score += cfg.suspicious_ip_score
            flags.append(RiskFlag.SUSPICIOUS_IP)

        if is_automation_user_agent(context.user_agent, cfg.suspicious_user_agent_markers):
            score += cfg.suspicious_user_agent_score
            flags.append(RiskFlag.SUSPICIOUS_USER_AGENT)

        try:
            is_vpn = await self._reputation.is_vpn_or_proxy(context.ip_address)
        except ReputationLookupError:
            logger.warning(
                "network_reputation_lookup_failed",
                user_id=context.user_id,
                exc_info=True,
            )
            # Request-only signals above still count
            result = self._result(score + cfg.error_score, [*flags, self.error_flag])
            result.degraded = True
            return result

        if is_vpn:
            score += cfg.potential_vpn_score
            flags.append(RiskFlag.POTENTIAL_VPN)

        return self._result(score, flags)
