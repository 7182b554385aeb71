"""Withdrawal risk assessment configuration with sensible defaults.

Scores are integer points; a category contributes the sum of the points of
the signals it finds. Each category also has a fixed fallback penalty that
replaces its score when its data lookup fails.
"""

import os
from dataclasses import dataclass, field


@dataclass
class AccountThresholds:
    min_account_age_days: int = 7
    new_account_score: int = 30
    identity_not_verified_score: int = 50
    high_kyc_risk_min: float = 70.0  # strictly greater than
    high_kyc_risk_score: int = 25
    failure_window_hours: int = 24
    max_failed_attempts: int = 5
    multiple_failures_score: int = 40
    profile_not_found_score: int = 50
    error_score: int = 30


@dataclass
class AmountThresholds:
    high_amount_cents: int = 500_000  # $5,000
    high_amount_score: int = 30
    medium_amount_cents: int = 100_000  # $1,000
    medium_amount_score: int = 15
    history_window_days: int = 7
    unusual_multiplier: float = 3.0
    unusual_pattern_score: int = 20
    rapid_min_count: int = 3
    rapid_statuses: tuple[str, ...] = ("paid", "processing")
    rapid_pattern_score: int = 25
    error_score: int = 15


@dataclass
class BehaviorThresholds:
    history_window_days: int = 30
    history_limit: int = 50
    max_distinct_ips: int = 5  # strictly greater than
    multiple_ips_score: int = 20
    max_distinct_user_agents: int = 3  # strictly greater than
    multiple_devices_score: int = 15
    new_ip_score: int = 10
    # Unusual when hour < earliest or hour > latest
    earliest_normal_hour: int = 6
    latest_normal_hour: int = 23
    unusual_timing_score: int = 5
    # IANA zone for the timing check; None means server local time
    timing_timezone: str | None = None
    error_score: int = 10


@dataclass
class PayoutMethodThresholds:
    min_method_age_hours: int = 72
    new_method_score: int = 35
    unverified_score: int = 40
    debit_card_score: int = 10
    invalid_method_score: int = 50
    error_score: int = 25


@dataclass
class NetworkThresholds:
    suspicious_ip_score: int = 30
    suspicious_user_agent_score: int = 20
    suspicious_user_agent_markers: tuple[str, ...] = (
        "bot",
        "crawler",
        "spider",
        "scraper",
        "curl",
        "wget",
        "python",
        "postman",
    )
    potential_vpn_score: int = 15
    error_score: int = 10


@dataclass
class RateLimitThresholds:
    max_hourly_attempts: int = 3
    hourly_limit_score: int = 50
    max_daily_attempts: int = 10
    daily_limit_score: int = 40
    error_score: int = 20


@dataclass
class VerdictThresholds:
    review_score: int = 50
    block_score: int = 100
    max_amount_without_review_cents: int = 100_000  # $1,000
    fail_secure_score: int = 100


@dataclass
class WithdrawalRiskConfig:
    account: AccountThresholds = field(default_factory=AccountThresholds)
    amount: AmountThresholds = field(default_factory=AmountThresholds)
    behavior: BehaviorThresholds = field(default_factory=BehaviorThresholds)
    payout_method: PayoutMethodThresholds = field(default_factory=PayoutMethodThresholds)
    network: NetworkThresholds = field(default_factory=NetworkThresholds)
    rate_limit: RateLimitThresholds = field(default_factory=RateLimitThresholds)
    verdict: VerdictThresholds = field(default_factory=VerdictThresholds)

    @classmethod
    def from_env(cls) -> "WithdrawalRiskConfig":
        """Load config with env var overrides. Env vars use WITHDRAWAL_ prefix."""
        config = cls()

        # Account overrides
        if v := os.getenv("WITHDRAWAL_MIN_ACCOUNT_AGE_DAYS"):
            config.account.min_account_age_days = int(v)
        if v := os.getenv("WITHDRAWAL_MAX_FAILED_ATTEMPTS"):
            config.account.max_failed_attempts = int(v)

        # Amount overrides
        if v := os.getenv("WITHDRAWAL_HIGH_AMOUNT_CENTS"):
            config.amount.high_amount_cents = int(v)
        if v := os.getenv("WITHDRAWAL_MEDIUM_AMOUNT_CENTS"):
            config.amount.medium_amount_cents = int(v)

        # Behavior overrides
        if v := os.getenv("WITHDRAWAL_TIMING_TIMEZONE"):
            config.behavior.timing_timezone = v

        # Payout method overrides
        if v := os.getenv("WITHDRAWAL_MIN_PAYOUT_METHOD_AGE_HOURS"):
            config.payout_method.min_method_age_hours = int(v)

        # Rate limit overrides
        if v := os.getenv("WITHDRAWAL_MAX_HOURLY_ATTEMPTS"):
            config.rate_limit.max_hourly_attempts = int(v)
        if v := os.getenv("WITHDRAWAL_MAX_DAILY_ATTEMPTS"):
            config.rate_limit.max_daily_attempts = int(v)

        # Verdict overrides
        if v := os.getenv("WITHDRAWAL_REVIEW_SCORE"):
            config.verdict.review_score = int(v)
        if v := os.getenv("WITHDRAWAL_BLOCK_SCORE"):
            config.verdict.block_score = int(v)
        if v := os.getenv("WITHDRAWAL_MAX_AMOUNT_WITHOUT_REVIEW_CENTS"):
            config.verdict.max_amount_without_review_cents = int(v)

        return config


# Module-level default instance
default_config = WithdrawalRiskConfig()
