"""Data access for withdrawal risk checks.

Checks depend on the ``WithdrawalDataSource`` protocol, never on a session
directly, so any backing store (or an in-memory fake) can be plugged in.
"""

from datetime import datetime
from typing import Protocol

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models import PayoutMethod, Profile, SecurityFlag, Withdrawal, WithdrawalSecurityLog

from .models import (
    MANUAL_FLAGS,
    PayoutMethodSnapshot,
    ProfileSnapshot,
    SecurityLogEntry,
    SecurityLogSnapshot,
    WithdrawalSnapshot,
)

logger = structlog.get_logger()


class DataSourceError(Exception):
    """A lookup against the backing store failed."""


class WithdrawalDataSource(Protocol):
    async def get_profile(self, user_id: str) -> ProfileSnapshot | None: ...

    async def count_security_events(
        self, user_id: str, event_type: str, since: datetime
    ) -> int: ...

    async def list_security_logs(
        self, user_id: str, since: datetime, limit: int
    ) -> list[SecurityLogSnapshot]: ...

    async def list_withdrawals(self, user_id: str, since: datetime) -> list[WithdrawalSnapshot]: ...

    async def count_withdrawals(self, user_id: str, since: datetime) -> int: ...

    async def get_payout_method(
        self, payout_method_id: str, user_id: str
    ) -> PayoutMethodSnapshot | None: ...

    async def get_manual_flags(self, user_id: str) -> list[str]: ...

    async def append_security_log(self, entry: SecurityLogEntry) -> None: ...


class SqlAlchemyWithdrawalDataSource:
    """``WithdrawalDataSource`` backed by the platform's Postgres tables."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _execute(self, stmt, operation: str):
        try:
            return await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            # An aborted transaction rejects every later statement until rolled back
            await self._session.rollback()
            raise DataSourceError(f"{operation} failed") from exc

    async def get_profile(self, user_id: str) -> ProfileSnapshot | None:
        stmt = select(Profile).where(Profile.id == user_id)
        result = await self._execute(stmt, "get_profile")
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return ProfileSnapshot(
            user_id=row.id,
            created_at=row.created_at,
            identity_status=row.identity_status,
            kyc_risk_score=row.kyc_risk_score,
            last_kyc_check_at=row.last_kyc_check_at,
            subscription_tier=row.subscription_tier,
        )

    async def count_security_events(self, user_id: str, event_type: str, since: datetime) -> int:
        stmt = select(func.count()).where(
            WithdrawalSecurityLog.user_id == user_id,
            WithdrawalSecurityLog.event_type == event_type,
            WithdrawalSecurityLog.created_at >= since,
        )
        result = await self._execute(stmt, "count_security_events")
        return result.scalar_one()

    async def list_security_logs(
        self, user_id: str, since: datetime, limit: int
    ) -> list[SecurityLogSnapshot]:
        stmt = (
            select(WithdrawalSecurityLog)
            .where(
                WithdrawalSecurityLog.user_id == user_id,
                WithdrawalSecurityLog.created_at >= since,
            )
            .order_by(WithdrawalSecurityLog.created_at.desc())
            .limit(limit)
        )
        result = await self._execute(stmt, "list_security_logs")
        return [
            SecurityLogSnapshot(
                event_type=row.event_type,
                ip_address=row.ip_address,
                user_agent=row.user_agent,
                created_at=row.created_at,
                metadata=row.details or {},
            )
            for row in result.scalars().all()
        ]

    async def list_withdrawals(self, user_id: str, since: datetime) -> list[WithdrawalSnapshot]:
        stmt = (
            select(Withdrawal)
            .where(Withdrawal.user_id == user_id, Withdrawal.created_at >= since)
            .order_by(Withdrawal.created_at.desc())
        )
        result = await self._execute(stmt, "list_withdrawals")
        return [
            WithdrawalSnapshot(
                withdrawal_id=row.id,
                amount_cents=row.amount_cents,
                status=row.status,
                created_at=row.created_at,
                payout_method_id=row.payout_method_id,
            )
            for row in result.scalars().all()
        ]

    async def count_withdrawals(self, user_id: str, since: datetime) -> int:
        stmt = select(func.count()).where(
            Withdrawal.user_id == user_id,
            Withdrawal.created_at >= since,
        )
        result = await self._execute(stmt, "count_withdrawals")
        return result.scalar_one()

    async def get_payout_method(
        self, payout_method_id: str, user_id: str
    ) -> PayoutMethodSnapshot | None:
        stmt = select(PayoutMethod).where(
            PayoutMethod.id == payout_method_id,
            PayoutMethod.user_id == user_id,
        )
        result = await self._execute(stmt, "get_payout_method")
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return PayoutMethodSnapshot(
            payout_method_id=row.id,
            user_id=row.user_id,
            method_type=row.method_type,
            is_verified=row.is_verified,
            verification_status=row.verification_status,
            added_at=row.added_at,
        )

    async def get_manual_flags(self, user_id: str) -> list[str]:
        stmt = (
            select(SecurityFlag.flag)
            .where(SecurityFlag.user_id == user_id, SecurityFlag.revoked_at.is_(None))
            .order_by(SecurityFlag.created_at)
        )
        result = await self._execute(stmt, "get_manual_flags")
        flags: list[str] = []
        for flag in result.scalars().all():
            if flag in MANUAL_FLAGS and flag not in flags:
                flags.append(flag)
        return flags

    async def append_security_log(self, entry: SecurityLogEntry) -> None:
        self._session.add(
            WithdrawalSecurityLog(
                user_id=entry.user_id,
                withdrawal_id=entry.withdrawal_id,
                event_type=entry.event_type,
                ip_address=entry.ip_address,
                user_agent=entry.user_agent,
                risk_score=entry.risk_score,
                flags=list(entry.flags),
                details=entry.metadata,
            )
        )
        try:
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise DataSourceError("append_security_log failed") from exc
        logger.debug(
            "security_log_appended",
            user_id=entry.user_id,
            event_type=entry.event_type,
            risk_score=entry.risk_score,
        )
