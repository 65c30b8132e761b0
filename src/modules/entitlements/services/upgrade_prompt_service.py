import asyncio
from typing import List, Optional, Union

from src.core.utils import get_logger
from src.modules.entitlements.enums.premium_feature import PremiumFeature
from src.modules.entitlements.models.entitlement import UpgradeModalData
from src.modules.entitlements.models.subscription_tier import SubscriptionTier
from src.modules.entitlements.repositories.interfaces import (
    ISubscriberRepository,
    ISubscriptionTierRepository,
)
from src.modules.entitlements.services.feature_catalog import FeatureCatalogService, parse_feature
from src.modules.entitlements.services.store_reads import TimedStoreReads

logger = get_logger(__name__)

FREE_TIER = "free"


class UpgradePromptService(TimedStoreReads):
    """
    Builds the data behind an upgrade call-to-action for a denied feature.
    """

    def __init__(
        self,
        subscriber_repository: ISubscriberRepository,
        tier_repository: ISubscriptionTierRepository,
        catalog_service: FeatureCatalogService,
        store_timeout: Optional[float] = None,
    ):
        super().__init__(store_timeout)
        self.subscriber_repo = subscriber_repository
        self.tier_repo = tier_repository
        self.catalog_service = catalog_service

    @staticmethod
    def recommend_tier(
        tiers: List[SubscriptionTier], feature: PremiumFeature
    ) -> Optional[SubscriptionTier]:
        """Cheapest active tier that grants ``feature``."""
        for tier in sorted(tiers, key=lambda t: t.price_monthly):
            if tier.is_active and tier.has_feature(feature):
                return tier
        return None

    async def get_upgrade_prompt_data(
        self, user_id: str, feature: Union[PremiumFeature, str]
    ) -> UpgradeModalData:
        feature = parse_feature(feature)
        metadata = self.catalog_service.get_metadata(feature)

        # The three reads are independent of each other
        subscriber, tiers, has_history = await asyncio.gather(
            self._read(self.subscriber_repo.find_by_user, user_id),
            self._read(self.tier_repo.list_active),
            self._read(self.subscriber_repo.has_ever_subscribed, user_id),
            return_exceptions=True,
        )

        if isinstance(subscriber, Exception):
            self._log_read_failure("subscriber", user_id, feature, subscriber)
            subscriber = None
        current_tier = (subscriber.subscription_tier if subscriber else None) or FREE_TIER

        if isinstance(tiers, Exception):
            self._log_read_failure("tier_catalog", user_id, feature, tiers)
            tiers = []
        recommended_tier = self.recommend_tier(tiers, feature)
        if recommended_tier is None:
            logger.warning("no_active_tier_grants_feature", feature=feature.value)

        if isinstance(has_history, Exception):
            self._log_read_failure("subscription_history", user_id, feature, has_history)
            # Without history we cannot prove eligibility
            trial_available = False
        else:
            trial_available = not has_history

        return UpgradeModalData(
            feature=feature,
            feature_name=metadata.name,
            benefits=list(metadata.benefits),
            current_tier=current_tier,
            recommended_tier=recommended_tier,
            trial_available=trial_available,
        )

    def get_feature_benefits(self, feature: Union[PremiumFeature, str]) -> List[str]:
        return self.catalog_service.get_feature_benefits(feature)

    @staticmethod
    def _log_read_failure(
        source: str, user_id: str, feature: PremiumFeature, error: Exception
    ) -> None:
        logger.error(
            "upgrade_prompt_read_failed",
            source=source,
            user_id=user_id,
            feature=feature.value,
            error=str(error),
            error_type=type(error).__name__,
        )
