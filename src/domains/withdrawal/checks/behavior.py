"""Behavioral anomalies against the user's recent security-log history."""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from ..config import BehaviorThresholds, WithdrawalRiskConfig
from ..models import CheckResult, RiskFlag, WithdrawalContext
from ..repository import WithdrawalDataSource
from .base import RiskCheck


def _local_hour(now: datetime, cfg: BehaviorThresholds) -> int:
    if cfg.timing_timezone:
        return now.astimezone(ZoneInfo(cfg.timing_timezone)).hour
    return now.astimezone().hour


class BehavioralCheck(RiskCheck):
    check_id = "behavioral"
    category = "behavior"
    error_flag = RiskFlag.BEHAVIOR_CHECK_ERROR

    def _error_score(self, config: WithdrawalRiskConfig) -> int:
        return config.behavior.error_score

    async def _assess(
        self,
        context: WithdrawalContext,
        data_source: WithdrawalDataSource,
        config: WithdrawalRiskConfig,
        now: datetime,
    ) -> CheckResult:
        cfg = config.behavior
        logs = await data_source.list_security_logs(
            context.user_id,
            now - timedelta(days=cfg.history_window_days),
            cfg.history_limit,
        )
        # No history, nothing to compare against
        if not logs:
            return self._result(details={"history_count": 0})

        score = 0
        flags: list[str] = []

        distinct_ips = {log.ip_address for log in logs}
        if len(distinct_ips) > cfg.max_distinct_ips:
            score += cfg.multiple_ips_score
            flags.append(RiskFlag.MULTIPLE_IP_ADDRESSES)

        distinct_agents = {log.user_agent for log in logs}
        if len(distinct_agents) > cfg.max_distinct_user_agents:
            score += cfg.multiple_devices_score
            flags.append(RiskFlag.MULTIPLE_DEVICES)

        if context.ip_address not in distinct_ips:
            score += cfg.new_ip_score
            flags.append(RiskFlag.NEW_IP_ADDRESS)

        hour = _local_hour(now, cfg)
        if hour < cfg.earliest_normal_hour or hour > cfg.latest_normal_hour:
            score += cfg.unusual_timing_score
            flags.append(RiskFlag.UNUSUAL_TIMING)

        return self._result(
            score,
            flags,
            {
                "history_count": len(logs),
                "distinct_ips": len(distinct_ips),
                "distinct_user_agents": len(distinct_agents),
                "hour": hour,
            },
        )
