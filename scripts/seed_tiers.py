import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.core.di.container import Container
from src.core.utils import get_logger
from src.modules.entitlements.enums.premium_feature import PremiumFeature
from src.modules.entitlements.models.subscription_tier import UNLIMITED, SubscriptionTierBase

logger = get_logger(__name__)

PRO_FEATURES = [
    PremiumFeature.AI_OUTFIT_SUGGESTIONS,
    PremiumFeature.SOCIAL_SHARING,
]

PREMIUM_FEATURES = PRO_FEATURES + [
    PremiumFeature.WEATHER_INTEGRATION,
    PremiumFeature.MARKETPLACE_ACCESS,
    PremiumFeature.ADVANCED_ANALYTICS,
    PremiumFeature.UNLIMITED_WARDROBE,
    PremiumFeature.SUSTAINABILITY_TRACKING,
    PremiumFeature.RENTAL_MARKETPLACE,
]

ENTERPRISE_FEATURES = PREMIUM_FEATURES + [
    PremiumFeature.PERSONAL_STYLIST,
    PremiumFeature.TEAM_COLLABORATION,
]

TIERS = [
    SubscriptionTierBase(
        tier_name="free",
        price_monthly=0,
        price_yearly=0,
        features=[],
        limits={
            "ai_recommendations_per_month": 5,
            "photo_uploads_per_month": 3,
            "outfit_generations_per_month": 3,
        },
    ),
    SubscriptionTierBase(
        tier_name="pro",
        price_monthly=4.99,
        price_yearly=49.99,
        features=PRO_FEATURES,
        limits={
            "ai_recommendations_per_month": 50,
            "photo_uploads_per_month": 100,
            "outfit_generations_per_month": 50,
        },
    ),
    SubscriptionTierBase(
        tier_name="premium",
        price_monthly=6.00,
        price_yearly=60.00,
        features=PREMIUM_FEATURES,
        limits={
            "ai_recommendations_per_month": 200,
            "photo_uploads_per_month": UNLIMITED,
            "outfit_generations_per_month": 200,
        },
    ),
    SubscriptionTierBase(
        tier_name="enterprise",
        price_monthly=29.99,
        price_yearly=299.99,
        features=ENTERPRISE_FEATURES,
        limits={
            "ai_recommendations_per_month": UNLIMITED,
            "photo_uploads_per_month": UNLIMITED,
            "outfit_generations_per_month": UNLIMITED,
        },
    ),
]


def seed_tiers():
    """Seed the subscription tier catalog."""
    container = Container()
    repository = container.subscription_tier_repository()

    for tier in TIERS:
        saved = repository.upsert(tier)
        logger.info("tier_seeded", tier_name=saved.tier_name, features=len(saved.features))


if __name__ == "__main__":
    seed_tiers()
