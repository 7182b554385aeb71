"""Withdrawal risk assessment domain."""

from .assessor import WithdrawalRiskAssessor, fail_secure_assessment
from .checks import default_checks
from .config import WithdrawalRiskConfig
from .models import (
    CheckResult,
    RiskFlag,
    SecurityAssessment,
    SecurityEventType,
    WithdrawalContext,
)
from .network import NetworkReputationChecker, NoopNetworkReputationChecker
from .repository import DataSourceError, SqlAlchemyWithdrawalDataSource, WithdrawalDataSource

__all__ = [
    "CheckResult",
    "DataSourceError",
    "NetworkReputationChecker",
    "NoopNetworkReputationChecker",
    "RiskFlag",
    "SecurityAssessment",
    "SecurityEventType",
    "SqlAlchemyWithdrawalDataSource",
    "WithdrawalContext",
    "WithdrawalDataSource",
    "WithdrawalRiskAssessor",
    "WithdrawalRiskConfig",
    "default_checks",
    "fail_secure_assessment",
]
