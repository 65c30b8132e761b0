from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from src.modules.entitlements.enums.premium_feature import PremiumFeature
from src.modules.entitlements.models.subscriber import Subscriber
from src.modules.entitlements.models.subscription_tier import UNLIMITED, SubscriptionTier

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


def make_subscriber(**overrides) -> Subscriber:
    data = {
        "id": "sub-row-1",
        "user_id": "user_123",
        "email": "user@example.com",
        "stripe_customer_id": "cus_123",
        "subscribed": True,
        "subscription_tier": "premium",
        "subscription_end": NOW + timedelta(days=20),
        "first_subscribed_at": NOW - timedelta(days=40),
    }
    data.update(overrides)
    return Subscriber(**data)


def make_tier(**overrides) -> SubscriptionTier:
    data = {
        "id": "tier-1",
        "tier_name": "premium",
        "price_monthly": 6.0,
        "price_yearly": 60.0,
        "features": [
            PremiumFeature.AI_OUTFIT_SUGGESTIONS,
            PremiumFeature.WEATHER_INTEGRATION,
            PremiumFeature.MARKETPLACE_ACCESS,
        ],
        "limits": {
            "ai_recommendations_per_month": 50,
            "photo_uploads_per_month": 100,
            "outfit_generations_per_month": 20,
        },
        "is_active": True,
    }
    data.update(overrides)
    return SubscriptionTier(**data)


@pytest.fixture
def pro_tier():
    return make_tier(
        id="tier-pro",
        tier_name="pro",
        price_monthly=4.99,
        price_yearly=49.99,
        features=[PremiumFeature.AI_OUTFIT_SUGGESTIONS, PremiumFeature.SOCIAL_SHARING],
        limits={
            "ai_recommendations_per_month": 30,
            "photo_uploads_per_month": 30,
            "outfit_generations_per_month": 10,
        },
    )


@pytest.fixture
def premium_tier():
    return make_tier()


@pytest.fixture
def enterprise_tier():
    return make_tier(
        id="tier-ent",
        tier_name="enterprise",
        price_monthly=29.99,
        price_yearly=299.99,
        features=list(PremiumFeature),
        limits={
            "ai_recommendations_per_month": UNLIMITED,
            "photo_uploads_per_month": UNLIMITED,
            "outfit_generations_per_month": UNLIMITED,
        },
    )


@pytest.fixture
def mock_subscriber_repo():
    repo = Mock()
    repo.find_by_user.return_value = None
    repo.has_ever_subscribed.return_value = False
    return repo


@pytest.fixture
def mock_tier_repo():
    repo = Mock()
    repo.find_active_by_name.return_value = None
    repo.list_active.return_value = []
    return repo


@pytest.fixture
def mock_usage_repo():
    repo = Mock()
    repo.sum_usage.return_value = 0
    repo.increment.return_value = 1
    return repo


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def subscriber_factory():
    return make_subscriber


@pytest.fixture
def tier_factory():
    return make_tier
