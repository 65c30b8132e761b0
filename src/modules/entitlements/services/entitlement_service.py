from datetime import datetime
from typing import Callable, Dict, Optional, Union

from src.core.config import settings
from src.core.utils import get_logger
from src.modules.entitlements.enums.premium_feature import PremiumFeature
from src.modules.entitlements.enums.usage_type import UsageType
from src.modules.entitlements.helpers import BillingPeriod, utcnow
from src.modules.entitlements.models.entitlement import UsageAllowance, UsageLimitResult
from src.modules.entitlements.models.subscription_tier import UNLIMITED
from src.modules.entitlements.repositories.interfaces import (
    ISubscriberRepository,
    ISubscriptionTierRepository,
    IUsageTrackingRepository,
)
from src.modules.entitlements.services.feature_catalog import parse_feature, parse_usage_type
from src.modules.entitlements.services.store_reads import TimedStoreReads

logger = get_logger(__name__)


def default_free_limits() -> Dict[UsageType, int]:
    return {
        UsageType.AI_RECOMMENDATIONS: settings.entitlements.free_ai_recommendations_per_month,
        UsageType.PHOTO_UPLOADS: settings.entitlements.free_default_per_month,
        UsageType.OUTFIT_GENERATIONS: settings.entitlements.free_default_per_month,
    }


class EntitlementService(TimedStoreReads):
    """
    Decides whether a user may use a premium feature or one more unit of a
    metered action.

    Every call re-reads the subscription record, the tier catalog and the
    usage ledger; nothing is cached between calls. Store failures and
    timeouts deny access and are logged, they never reach the caller.
    """

    def __init__(
        self,
        subscriber_repository: ISubscriberRepository,
        tier_repository: ISubscriptionTierRepository,
        usage_repository: IUsageTrackingRepository,
        free_limits: Optional[Dict[UsageType, int]] = None,
        store_timeout: Optional[float] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        super().__init__(store_timeout)
        self.subscriber_repo = subscriber_repository
        self.tier_repo = tier_repository
        self.usage_repo = usage_repository
        self.free_limits = free_limits if free_limits is not None else default_free_limits()
        self.clock = clock

    def free_limit(self, usage_type: UsageType) -> int:
        return self.free_limits.get(usage_type, settings.entitlements.free_default_per_month)

    async def check_feature_access(
        self, user_id: str, feature: Union[PremiumFeature, str]
    ) -> bool:
        """
        True only for a subscribed, unexpired user whose tier row is active
        and lists ``feature``.
        """
        feature = parse_feature(feature)
        if not user_id:
            return False

        try:
            subscriber = await self._read(self.subscriber_repo.find_by_user, user_id)
            if subscriber is None or not subscriber.subscribed:
                return False

            if subscriber.is_expired(self.clock()):
                logger.info(
                    "subscription_expired",
                    user_id=user_id,
                    feature=feature.value,
                    subscription_end=str(subscriber.subscription_end),
                )
                return False

            if not subscriber.subscription_tier:
                return False

            tier = await self._read(self.tier_repo.find_active_by_name, subscriber.subscription_tier)
            if tier is None:
                logger.warning(
                    "subscription_tier_inactive_or_missing",
                    user_id=user_id,
                    tier_name=subscriber.subscription_tier,
                )
                return False

            return tier.has_feature(feature)
        except Exception as e:
            logger.error(
                "feature_access_check_failed",
                user_id=user_id,
                feature=feature.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    async def check_usage_limit(
        self, user_id: str, usage_type: Union[UsageType, str]
    ) -> UsageLimitResult:
        """
        Remaining allowance for ``usage_type`` in the current calendar month.

        ``remaining`` is None when the user's tier is unlimited (-1).
        """
        usage_type = parse_usage_type(usage_type)
        if not user_id:
            return UsageLimitResult.denied()

        try:
            now = self.clock()
            period = BillingPeriod.for_month_of(now)

            subscriber = await self._read(self.subscriber_repo.find_by_user, user_id)

            if subscriber is None or not subscriber.is_entitled(now):
                limit = self.free_limit(usage_type)
                usage = await self._current_usage(user_id, usage_type, period)
                return UsageLimitResult.from_usage(usage, limit)

            if not subscriber.subscription_tier:
                logger.warning("subscribed_without_tier", user_id=user_id)
                return UsageLimitResult.denied()

            tier = await self._read(self.tier_repo.find_active_by_name, subscriber.subscription_tier)
            if tier is None:
                logger.warning(
                    "subscription_tier_inactive_or_missing",
                    user_id=user_id,
                    tier_name=subscriber.subscription_tier,
                )
                return UsageLimitResult.denied()

            limit = tier.monthly_limit(usage_type)
            if limit is None:
                logger.warning(
                    "tier_limit_missing",
                    tier_name=tier.tier_name,
                    limit_key=usage_type.limit_key,
                )
                return UsageLimitResult.denied()

            if limit == UNLIMITED:
                return UsageLimitResult.unlimited()

            usage = await self._current_usage(user_id, usage_type, period)
            return UsageLimitResult.from_usage(usage, limit)
        except Exception as e:
            logger.error(
                "usage_limit_check_failed",
                user_id=user_id,
                usage_type=usage_type.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            return UsageLimitResult.denied()

    async def get_usage_summary(self, user_id: str) -> Dict[UsageType, UsageAllowance]:
        """
        Month-to-date usage of every usage type with its cap.

        Follows the same rules as ``check_usage_limit``; any failure reports
        every type as used up.
        """
        denied = {usage_type: UsageAllowance.denied() for usage_type in UsageType}
        if not user_id:
            return denied

        try:
            now = self.clock()
            period = BillingPeriod.for_month_of(now)

            subscriber = await self._read(self.subscriber_repo.find_by_user, user_id)

            tier = None
            if subscriber is not None and subscriber.is_entitled(now):
                if not subscriber.subscription_tier:
                    logger.warning("subscribed_without_tier", user_id=user_id)
                    return denied

                tier = await self._read(self.tier_repo.find_active_by_name, subscriber.subscription_tier)
                if tier is None:
                    logger.warning(
                        "subscription_tier_inactive_or_missing",
                        user_id=user_id,
                        tier_name=subscriber.subscription_tier,
                    )
                    return denied

            summary = {}
            for usage_type in UsageType:
                used = await self._current_usage(user_id, usage_type, period)
                limit = self.free_limit(usage_type) if tier is None else tier.monthly_limit(usage_type)
                if limit is None:
                    logger.warning(
                        "tier_limit_missing",
                        tier_name=tier.tier_name,
                        limit_key=usage_type.limit_key,
                    )
                    summary[usage_type] = UsageAllowance.denied(used)
                else:
                    summary[usage_type] = UsageAllowance.from_usage(used, limit)
            return summary
        except Exception as e:
            logger.error(
                "usage_summary_failed",
                user_id=user_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return denied

    async def _current_usage(
        self, user_id: str, usage_type: UsageType, period: BillingPeriod
    ) -> int:
        return await self._read(
            self.usage_repo.sum_usage, user_id, usage_type, period.start, period.end
        )
