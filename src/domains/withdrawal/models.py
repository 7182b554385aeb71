"""Pydantic models for the withdrawal risk domain."""

from datetime import datetime
from enum import StrEnum

from pydantic import AwareDatetime, BaseModel, Field


class RiskFlag(StrEnum):
    # Account
    NEW_ACCOUNT = "new_account"
    IDENTITY_NOT_VERIFIED = "identity_not_verified"
    HIGH_KYC_RISK = "high_kyc_risk"
    MULTIPLE_RECENT_FAILURES = "multiple_recent_failures"
    PROFILE_NOT_FOUND = "profile_not_found"
    ACCOUNT_CHECK_ERROR = "account_check_error"
    # Amount and pattern
    HIGH_AMOUNT = "high_amount"
    MEDIUM_AMOUNT = "medium_amount"
    UNUSUAL_AMOUNT_PATTERN = "unusual_amount_pattern"
    RAPID_WITHDRAWAL_PATTERN = "rapid_withdrawal_pattern"
    AMOUNT_CHECK_ERROR = "amount_check_error"
    # Behavior
    MULTIPLE_IP_ADDRESSES = "multiple_ip_addresses"
    MULTIPLE_DEVICES = "multiple_devices"
    NEW_IP_ADDRESS = "new_ip_address"
    UNUSUAL_TIMING = "unusual_timing"
    BEHAVIOR_CHECK_ERROR = "behavior_check_error"
    # Payout method
    INVALID_PAYOUT_METHOD = "invalid_payout_method"
    NEW_PAYOUT_METHOD = "new_payout_method"
    UNVERIFIED_PAYOUT_METHOD = "unverified_payout_method"
    DEBIT_CARD_PAYOUT = "debit_card_payout"
    PAYOUT_METHOD_CHECK_ERROR = "payout_method_check_error"
    # Network
    SUSPICIOUS_IP = "suspicious_ip"
    SUSPICIOUS_USER_AGENT = "suspicious_user_agent"
    POTENTIAL_VPN = "potential_vpn"
    NETWORK_CHECK_ERROR = "network_check_error"
    # Rate limit
    HOURLY_RATE_LIMIT_EXCEEDED = "hourly_rate_limit_exceeded"
    DAILY_RATE_LIMIT_EXCEEDED = "daily_rate_limit_exceeded"
    RATE_LIMIT_CHECK_ERROR = "rate_limit_check_error"
    # Set only through the manual flag list, never by a check
    CRITICAL_RISK = "critical_risk"
    BLOCKED_USER = "blocked_user"
    ACCOUNT_COMPROMISED = "account_compromised"
    # Fail-secure
    ASSESSMENT_ERROR = "assessment_error"


MANUAL_FLAGS: frozenset[str] = frozenset(
    {RiskFlag.CRITICAL_RISK, RiskFlag.BLOCKED_USER, RiskFlag.ACCOUNT_COMPROMISED}
)


class IdentityStatus(StrEnum):
    UNVERIFIED = "unverified"
    UNSTARTED = "unstarted"
    PENDING = "pending"
    REQUIRES_INPUT = "requires_input"
    VERIFIED = "verified"
    FAILED = "failed"


class PayoutMethodType(StrEnum):
    BANK_ACCOUNT = "bank_account"
    DEBIT_CARD = "debit_card"
    PAYPAL = "paypal"
    WIRE_TRANSFER = "wire_transfer"


class SecurityEventType(StrEnum):
    ATTEMPT = "attempt"
    SUCCESS = "success"
    FAILURE = "failure"
    REVIEW_FLAGGED = "review_flagged"


class Urgency(StrEnum):
    STANDARD = "standard"
    EXPRESS = "express"


# --- Read-only snapshots handed out by the data source ---


class ProfileSnapshot(BaseModel):
    user_id: str
    created_at: datetime
    identity_status: str = IdentityStatus.UNVERIFIED
    kyc_risk_score: float | None = None
    last_kyc_check_at: datetime | None = None
    subscription_tier: str = "free"


class PayoutMethodSnapshot(BaseModel):
    payout_method_id: str
    user_id: str
    method_type: str
    is_verified: bool = False
    verification_status: str | None = None
    added_at: datetime


class WithdrawalSnapshot(BaseModel):
    withdrawal_id: str
    amount_cents: int
    status: str
    created_at: datetime
    payout_method_id: str | None = None


class SecurityLogSnapshot(BaseModel):
    event_type: str
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime
    metadata: dict = Field(default_factory=dict)


class SecurityLogEntry(BaseModel):
    """One append-only row for ``withdrawal_security_logs``."""

    user_id: str
    event_type: str
    ip_address: str | None = None
    user_agent: str | None = None
    risk_score: int = 0
    flags: list[str] = []
    metadata: dict = Field(default_factory=dict)
    withdrawal_id: str | None = None


# --- Assessment input and output ---


class WithdrawalContext(BaseModel):
    user_id: str
    amount_cents: int = Field(gt=0)
    currency: str = "USD"
    payout_method_id: str
    ip_address: str
    user_agent: str
    urgency: Urgency = Urgency.STANDARD
    requested_at: AwareDatetime | None = None


class CheckResult(BaseModel):
    check_id: str
    category: str
    score: int = Field(default=0, ge=0)
    flags: list[str] = []
    details: dict = Field(default_factory=dict)
    degraded: bool = False


class SecurityAssessment(BaseModel):
    risk_score: int
    risk_flags: list[str] = []
    requires_review: bool
    allow_withdrawal: bool
    reason: str | None = None
    check_results: list[CheckResult] = []
    assessed_at: datetime | None = None

    def category_scores(self) -> dict[str, int]:
        return {r.category: r.score for r in self.check_results}

    def summary(self) -> dict:
        """Compact form for API responses and outcome logs."""
        return {
            "score": self.risk_score,
            "flags": self.risk_flags,
            "requires_review": self.requires_review,
            "allow_withdrawal": self.allow_withdrawal,
            "reason": self.reason,
            "category_scores": self.category_scores(),
        }


class WithdrawalAssessRequest(BaseModel):
    user_id: str
    amount_cents: int = Field(gt=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    payout_method_id: str
    urgency: Urgency = Urgency.STANDARD
