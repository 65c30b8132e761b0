import time
from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock

import pytest

from src.modules.entitlements.enums.usage_type import UsageType
from src.modules.entitlements.exceptions import (
    EntitlementRepositoryError,
    InvalidEntitlementRequestError,
    UsageLimitExceededError,
)
from src.modules.entitlements.models.entitlement import UsageLimitResult
from src.modules.entitlements.services.usage_recording_service import UsageRecordingService


@pytest.fixture
def entitlement_service():
    service = Mock()
    service.check_usage_limit = AsyncMock(return_value=UsageLimitResult(allowed=True, remaining=3))
    return service


@pytest.fixture
def service(mock_usage_repo, entitlement_service, clock):
    return UsageRecordingService(
        usage_repository=mock_usage_repo,
        entitlement_service=entitlement_service,
        store_timeout=1.0,
        clock=clock,
    )


class TestRecordUsage:
    @pytest.mark.asyncio
    async def test_increments_current_month(self, service, mock_usage_repo):
        mock_usage_repo.increment.return_value = 4

        total = await service.record_usage("user_123", UsageType.PHOTO_UPLOADS, 2)

        assert total == 4
        user_id, usage_type, start, end, amount = mock_usage_repo.increment.call_args[0]
        assert (user_id, usage_type, amount) == ("user_123", UsageType.PHOTO_UPLOADS, 2)
        assert start == datetime(2024, 3, 1, tzinfo=timezone.utc)
        assert end.month == 3 and end.day == 31

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [0, -1, 1.5, True])
    async def test_rejects_non_positive_amounts(self, service, mock_usage_repo, amount):
        with pytest.raises(ValueError):
            await service.record_usage("user_123", UsageType.PHOTO_UPLOADS, amount)
        mock_usage_repo.increment.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejects_missing_user(self, service, mock_usage_repo):
        with pytest.raises(InvalidEntitlementRequestError):
            await service.record_usage("", UsageType.PHOTO_UPLOADS)
        mock_usage_repo.increment.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejects_unknown_usage_type(self, service):
        with pytest.raises(InvalidEntitlementRequestError):
            await service.record_usage("user_123", "video_uploads")

    @pytest.mark.asyncio
    async def test_store_errors_propagate(self, service, mock_usage_repo):
        mock_usage_repo.increment.side_effect = EntitlementRepositoryError("write failed")

        with pytest.raises(EntitlementRepositoryError):
            await service.record_usage("user_123", UsageType.AI_RECOMMENDATIONS)

    @pytest.mark.asyncio
    async def test_timeout_surfaces_as_repository_error(self, mock_usage_repo, entitlement_service, clock):
        def slow_increment(*args):
            time.sleep(0.3)
            return 1

        mock_usage_repo.increment.side_effect = slow_increment
        service = UsageRecordingService(mock_usage_repo, entitlement_service, store_timeout=0.05, clock=clock)

        with pytest.raises(EntitlementRepositoryError):
            await service.record_usage("user_123", UsageType.AI_RECOMMENDATIONS)


class TestConsumeUsage:
    @pytest.mark.asyncio
    async def test_records_when_allowed(self, service, mock_usage_repo):
        result = await service.consume_usage("user_123", UsageType.OUTFIT_GENERATIONS)

        assert result.allowed is True
        assert result.remaining == 2
        mock_usage_repo.increment.assert_called_once()

    @pytest.mark.asyncio
    async def test_last_unit_leaves_nothing(self, service, entitlement_service):
        entitlement_service.check_usage_limit.return_value = UsageLimitResult(allowed=True, remaining=1)

        result = await service.consume_usage("user_123", UsageType.OUTFIT_GENERATIONS)

        assert (result.allowed, result.remaining) == (False, 0)

    @pytest.mark.asyncio
    async def test_raises_when_limit_reached(self, service, entitlement_service, mock_usage_repo):
        entitlement_service.check_usage_limit.return_value = UsageLimitResult.denied()

        with pytest.raises(UsageLimitExceededError) as exc_info:
            await service.consume_usage("user_123", UsageType.AI_RECOMMENDATIONS)

        assert exc_info.value.usage_type == "ai_recommendations"
        assert exc_info.value.remaining == 0
        mock_usage_repo.increment.assert_not_called()

    @pytest.mark.asyncio
    async def test_raises_when_amount_exceeds_remaining(self, service, mock_usage_repo):
        with pytest.raises(UsageLimitExceededError) as exc_info:
            await service.consume_usage("user_123", UsageType.PHOTO_UPLOADS, amount=5)

        assert exc_info.value.remaining == 3
        mock_usage_repo.increment.assert_not_called()

    @pytest.mark.asyncio
    async def test_unlimited_allowance_stays_unlimited(self, service, entitlement_service, mock_usage_repo):
        entitlement_service.check_usage_limit.return_value = UsageLimitResult.unlimited()

        result = await service.consume_usage("user_123", UsageType.PHOTO_UPLOADS, amount=50)

        assert result.is_unlimited
        mock_usage_repo.increment.assert_called_once()
