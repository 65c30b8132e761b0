"""Tests for the usage API endpoints."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.modules.entitlements.api.v1.usage import (
    RecordUsageRequest,
    check_usage_limit,
    get_usage_summary,
    record_usage,
)
from src.modules.entitlements.enums.usage_type import UsageType
from src.modules.entitlements.exceptions import UsageLimitExceededError
from src.modules.entitlements.models.entitlement import UsageAllowance, UsageLimitResult


@pytest.mark.asyncio
async def test_check_usage_limit():
    service = MagicMock()
    service.check_usage_limit = AsyncMock(return_value=UsageLimitResult(allowed=True, remaining=2))

    response = await check_usage_limit(usage_type=UsageType.PHOTO_UPLOADS, user_id="user_123", service=service)

    assert (response.allowed, response.remaining) == (True, 2)
    assert response.usage_type == UsageType.PHOTO_UPLOADS


@pytest.mark.asyncio
async def test_check_usage_limit_unlimited():
    service = MagicMock()
    service.check_usage_limit = AsyncMock(return_value=UsageLimitResult.unlimited())

    response = await check_usage_limit(usage_type=UsageType.PHOTO_UPLOADS, user_id="user_123", service=service)

    assert response.remaining is None


@pytest.mark.asyncio
async def test_record_usage():
    service = MagicMock()
    service.consume_usage = AsyncMock(return_value=UsageLimitResult(allowed=True, remaining=1))

    response = await record_usage(
        usage_type=UsageType.AI_RECOMMENDATIONS,
        req=RecordUsageRequest(amount=2),
        user_id="user_123",
        service=service,
    )

    assert response.remaining == 1
    service.consume_usage.assert_awaited_once_with("user_123", UsageType.AI_RECOMMENDATIONS, 2)


@pytest.mark.asyncio
async def test_record_usage_limit_reached_propagates():
    service = MagicMock()
    service.consume_usage = AsyncMock(
        side_effect=UsageLimitExceededError("limit", usage_type="ai_recommendations")
    )

    with pytest.raises(UsageLimitExceededError):
        await record_usage(
            usage_type=UsageType.AI_RECOMMENDATIONS,
            req=RecordUsageRequest(),
            user_id="user_123",
            service=service,
        )


def test_record_usage_request_rejects_zero():
    with pytest.raises(ValueError):
        RecordUsageRequest(amount=0)


@pytest.mark.asyncio
async def test_get_usage_summary():
    summary = {
        UsageType.AI_RECOMMENDATIONS: UsageAllowance.from_usage(2, 5),
        UsageType.PHOTO_UPLOADS: UsageAllowance.from_usage(3, 3),
        UsageType.OUTFIT_GENERATIONS: UsageAllowance.from_usage(0, -1),
    }
    service = MagicMock()
    service.get_usage_summary = AsyncMock(return_value=summary)

    response = await get_usage_summary(user_id="user_123", service=service)

    assert response[UsageType.AI_RECOMMENDATIONS].remaining == 3
    assert response[UsageType.PHOTO_UPLOADS].remaining == 0
    assert response[UsageType.OUTFIT_GENERATIONS].limit is None
    service.get_usage_summary.assert_awaited_once_with("user_123")
