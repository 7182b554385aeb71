"""Integration tests for the withdrawal risk endpoints."""

from datetime import UTC, datetime

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.routes.withdrawals import get_assessor
from src.domains.withdrawal import RiskFlag, SecurityEventType, WithdrawalRiskAssessor
from src.main import app
from tests.domains.withdrawal.fakes import (
    BROWSER_UA,
    CLEAN_IP,
    METHOD_ID,
    USER_ID,
    InMemoryWithdrawalDataSource,
    utc_config,
)

pytestmark = pytest.mark.integration

HEADERS = {"User-Agent": BROWSER_UA, "X-Forwarded-For": f"{CLEAN_IP}, 10.0.0.1"}


def _clean_data_source() -> InMemoryWithdrawalDataSource:
    # Requests are assessed at the wall clock, so seed relative to it
    ds = InMemoryWithdrawalDataSource()
    ds.seed_clean_user(now=datetime.now(UTC))
    return ds


async def _assess(ds, payload=None, headers=None):
    assessor = WithdrawalRiskAssessor(ds, config=utc_config())
    app.dependency_overrides[get_assessor] = lambda: assessor
    body = {"user_id": USER_ID, "amount_cents": 50_000, "payout_method_id": METHOD_ID}
    body.update(payload or {})
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            return await client.post(
                "/api/v1/withdrawals/assess",
                json=body,
                headers=headers if headers is not None else HEADERS,
            )
    finally:
        app.dependency_overrides.clear()


class TestAssessWithdrawalEndpoint:
    @pytest.mark.asyncio
    async def test_clean_withdrawal_approved(self):
        ds = _clean_data_source()
        response = await _assess(ds)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "approved"
        assert data["risk_assessment"]["allow_withdrawal"] is True
        assert data["risk_assessment"]["requires_review"] is False
        assert set(data["risk_assessment"]["category_scores"]) == {
            "account",
            "amount",
            "behavior",
            "payout_method",
            "network",
            "rate_limit",
        }
        assert len(ds.appended) == 1

    @pytest.mark.asyncio
    async def test_first_forwarded_hop_used_as_client_ip(self):
        ds = _clean_data_source()
        await _assess(ds)
        assert ds.appended[0].ip_address == CLEAN_IP
        assert ds.appended[0].user_agent == BROWSER_UA

    @pytest.mark.asyncio
    async def test_review_records_outcome(self):
        ds = _clean_data_source()
        response = await _assess(ds, {"amount_cents": 150_000})

        assert response.status_code == 200
        assert response.json()["status"] == "requires_review"
        assert [e.event_type for e in ds.appended] == [
            SecurityEventType.SUCCESS,
            SecurityEventType.REVIEW_FLAGGED,
        ]
        assert ds.appended[1].metadata["action"] == "withdrawal_request"

    @pytest.mark.asyncio
    async def test_blocked_user_is_403(self):
        ds = _clean_data_source()
        ds.manual_flags[USER_ID] = [RiskFlag.BLOCKED_USER]
        response = await _assess(ds)

        assert response.status_code == 403
        data = response.json()
        assert data["error"] == "withdrawal_denied"
        assert data["reason"] == "Account has been blocked due to security concerns"
        assert data["risk_assessment"]["flags"][0] == "blocked_user"
        assert ds.appended[0].event_type == SecurityEventType.FAILURE

    @pytest.mark.asyncio
    async def test_automation_client_from_private_network_scored(self):
        ds = _clean_data_source()
        response = await _assess(
            ds, headers={"User-Agent": "curl/8.4.0", "X-Real-IP": "192.168.1.5"}
        )
        flags = response.json()["risk_assessment"]["flags"]
        assert "suspicious_ip" in flags
        assert "suspicious_user_agent" in flags
        assert ds.appended[0].ip_address == "192.168.1.5"

    @pytest.mark.asyncio
    async def test_non_positive_amount_rejected(self):
        response = await _assess(_clean_data_source(), {"amount_cents": 0})
        assert response.status_code == 422


class TestRiskConfigEndpoint:
    @pytest.mark.asyncio
    async def test_risk_config(self):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/api/v1/withdrawals/risk-config")
        assert response.status_code == 200
        data = response.json()
        assert data["verdict"]["review_score"] == 50
        assert data["verdict"]["block_score"] == 100
        assert data["payout_method"]["error_score"] == 25
        assert "curl" in data["network"]["suspicious_user_agent_markers"]
