"""Withdrawal risk checks package.

``default_checks`` builds the six category checks in evaluation order.
"""

from ..network import NetworkReputationChecker
from .account import AccountSecurityCheck
from .amount import AmountPatternCheck
from .base import RiskCheck
from .behavior import BehavioralCheck
from .network import NetworkSecurityCheck
from .payout_method import PayoutMethodCheck
from .rate_limit import RateLimitCheck


def default_checks(reputation: NetworkReputationChecker | None = None) -> list[RiskCheck]:
    return [
        AccountSecurityCheck(),
        AmountPatternCheck(),
        BehavioralCheck(),
        PayoutMethodCheck(),
        NetworkSecurityCheck(reputation),
        RateLimitCheck(),
    ]


__all__ = [
    "AccountSecurityCheck",
    "AmountPatternCheck",
    "BehavioralCheck",
    "NetworkSecurityCheck",
    "PayoutMethodCheck",
    "RateLimitCheck",
    "RiskCheck",
    "default_checks",
]
