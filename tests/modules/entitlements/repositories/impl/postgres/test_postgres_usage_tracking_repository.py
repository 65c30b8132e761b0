from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from src.modules.entitlements.enums.usage_type import UsageType
from src.modules.entitlements.exceptions import EntitlementRepositoryError
from src.modules.entitlements.helpers import BillingPeriod
from src.modules.entitlements.repositories.impl.postgres.usage_tracking_repository import (
    PostgresUsageTrackingRepository,
)

PERIOD = BillingPeriod.for_month_of(datetime(2024, 3, 15, tzinfo=timezone.utc))


@pytest.fixture
def repository():
    return PostgresUsageTrackingRepository(MagicMock())


def test_sum_usage(repository):
    with patch.object(repository, "_execute_query", return_value={"total": 4}) as mock_exec:
        total = repository.sum_usage("user_123", UsageType.OUTFIT_GENERATIONS, PERIOD.start, PERIOD.end)

    assert total == 4
    params = mock_exec.call_args[0][1]
    # overlap: row starts before the window ends and ends after it starts
    assert params == ("user_123", "outfit_generations", PERIOD.end, PERIOD.start)


def test_sum_usage_wraps_errors(repository):
    with patch.object(repository, "_execute_query", side_effect=Exception("db down")):
        with pytest.raises(EntitlementRepositoryError):
            repository.sum_usage("user_123", UsageType.OUTFIT_GENERATIONS, PERIOD.start, PERIOD.end)


def test_increment_returns_new_count(repository):
    with patch.object(repository, "_execute_query", return_value={"usage_count": 3}) as mock_exec:
        total = repository.increment("user_123", UsageType.PHOTO_UPLOADS, PERIOD.start, PERIOD.end, 1)

    assert total == 3
    args, kwargs = mock_exec.call_args
    assert args[1] == ("user_123", "photo_uploads", 1, PERIOD.start, PERIOD.end)
    assert kwargs == {"fetch_one": True, "commit": True}


def test_increment_wraps_errors(repository):
    with patch.object(repository, "_execute_query", side_effect=Exception("db down")):
        with pytest.raises(EntitlementRepositoryError):
            repository.increment("user_123", UsageType.PHOTO_UPLOADS, PERIOD.start, PERIOD.end, 1)
