"""Withdrawal risk screening endpoints."""

from dataclasses import asdict

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.database import get_session
from src.domains.withdrawal import (
    SecurityEventType,
    SqlAlchemyWithdrawalDataSource,
    WithdrawalContext,
    WithdrawalRiskAssessor,
    WithdrawalRiskConfig,
)
from src.domains.withdrawal.models import WithdrawalAssessRequest

logger = structlog.get_logger()
router = APIRouter(prefix="/api/v1/withdrawals", tags=["withdrawals"])

_config = WithdrawalRiskConfig.from_env()


def get_assessor(
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> WithdrawalRiskAssessor:
    return WithdrawalRiskAssessor(SqlAlchemyWithdrawalDataSource(session), config=_config)


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client:
        return request.client.host
    return "unknown"


@router.post("/assess")
async def assess_withdrawal(
    body: WithdrawalAssessRequest,
    request: Request,
    assessor: WithdrawalRiskAssessor = Depends(get_assessor),  # noqa: B008
):
    context = WithdrawalContext(
        user_id=body.user_id,
        amount_cents=body.amount_cents,
        currency=body.currency.upper(),
        payout_method_id=body.payout_method_id,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent", "unknown"),
        urgency=body.urgency,
    )

    assessment = await assessor.assess(context)

    if not assessment.allow_withdrawal:
        logger.warning(
            "withdrawal_denied",
            user_id=context.user_id,
            risk_score=assessment.risk_score,
            reason=assessment.reason,
        )
        return JSONResponse(
            status_code=403,
            content={
                "error": "withdrawal_denied",
                "reason": assessment.reason,
                "risk_assessment": assessment.summary(),
            },
        )

    if assessment.requires_review:
        await assessor.record_outcome(context, assessment, SecurityEventType.REVIEW_FLAGGED)

    return {
        "status": "requires_review" if assessment.requires_review else "approved",
        "risk_assessment": assessment.summary(),
    }


@router.get("/risk-config")
async def risk_config() -> dict:
    """Current thresholds, scores and fallback penalties per category."""
    return {
        "account": asdict(_config.account),
        "amount": asdict(_config.amount),
        "behavior": asdict(_config.behavior),
        "payout_method": asdict(_config.payout_method),
        "network": asdict(_config.network),
        "rate_limit": asdict(_config.rate_limit),
        "verdict": asdict(_config.verdict),
    }
