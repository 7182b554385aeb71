"""Escrow funding fee endpoints."""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.database import get_session
from src.db.models import Profile
from src.domains.escrow import (
    EscrowFeeCalculator,
    SubscriptionTier,
    build_checkout_line_items,
    build_checkout_metadata,
)
from src.domains.escrow.config import EscrowFeeConfig
from src.domains.escrow.models import EscrowFeeRequest

logger = structlog.get_logger()
router = APIRouter(prefix="/api/v1/escrow", tags=["escrow"])

_calculator = EscrowFeeCalculator(config=EscrowFeeConfig.from_env())


async def _payer_tier(session: AsyncSession, payer_id: str) -> str:
    stmt = select(Profile.subscription_tier).where(Profile.id == payer_id)
    result = await session.execute(stmt)
    tier = result.scalar_one_or_none()
    if tier is None:
        raise LookupError(f"Profile {payer_id} not found")
    return tier


@router.post("/fees")
async def quote_fees(
    request: EscrowFeeRequest,
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    tier = request.subscription_tier
    if tier is None and request.payer_id:
        tier = await _payer_tier(session, request.payer_id)

    breakdown = _calculator.calculate(request.contract_amount, tier)

    logger.info(
        "escrow_fees_quoted",
        contract_id=request.contract_id,
        subscription_tier=breakdown.subscription_tier.value,
        total_charge=breakdown.total_charge,
    )

    return {
        "currency": request.currency.upper(),
        "subscription_tier": breakdown.subscription_tier.value,
        "platform_fee_percentage": breakdown.platform_fee_percentage,
        "amounts": breakdown.display(),
        "amounts_minor": breakdown.minor_units(),
        "line_items": build_checkout_line_items(
            breakdown,
            request.currency,
            contract_title=request.contract_title,
            contract_number=request.contract_number,
        ),
        "metadata": build_checkout_metadata(
            breakdown, contract_id=request.contract_id, user_id=request.payer_id
        ),
    }


@router.get("/fee-tiers")
async def fee_tiers() -> dict:
    config = _calculator.config
    return {
        "tiers": _calculator.tier_table(),
        "default_tier": SubscriptionTier.FREE.value,
        "processor": {"rate": config.processor.rate, "fixed": config.processor.fixed},
    }
