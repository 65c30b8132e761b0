from abc import abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from src.core.database.interface import IRepository
from src.modules.entitlements.enums.usage_type import UsageType
from src.modules.entitlements.models.subscriber import Subscriber
from src.modules.entitlements.models.subscription_tier import SubscriptionTier, SubscriptionTierBase
from src.modules.entitlements.models.usage_record import UsageRecord


class ISubscriberRepository(IRepository[Subscriber]):
    @abstractmethod
    def find_by_user(self, user_id: str) -> Optional[Subscriber]:
        pass

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[Subscriber]:
        pass

    @abstractmethod
    def find_by_stripe_customer_id(self, stripe_customer_id: str) -> Optional[Subscriber]:
        pass

    @abstractmethod
    def has_ever_subscribed(self, user_id: str) -> bool:
        pass

    @abstractmethod
    def upsert(self, data: Dict[str, Any]) -> Subscriber:
        """
        Create or update the record keyed by ``user_id``.

        ``first_subscribed_at`` is stamped the first time the record is written
        with ``subscribed=True`` and is never cleared afterwards.
        """
        pass


class ISubscriptionTierRepository(IRepository[SubscriptionTier]):
    @abstractmethod
    def find_active_by_name(self, tier_name: str) -> Optional[SubscriptionTier]:
        pass

    @abstractmethod
    def list_active(self) -> List[SubscriptionTier]:
        """Active tiers ordered by ``price_monthly`` ascending."""
        pass

    @abstractmethod
    def upsert(self, tier: SubscriptionTierBase) -> SubscriptionTier:
        """Create or replace the catalog row keyed by ``tier_name``."""
        pass


class IUsageTrackingRepository(IRepository[UsageRecord]):
    @abstractmethod
    def sum_usage(
        self,
        user_id: str,
        usage_type: UsageType,
        period_start: datetime,
        period_end: datetime,
    ) -> int:
        """Sum of ``usage_count`` over rows whose billing period overlaps the window."""
        pass

    @abstractmethod
    def increment(
        self,
        user_id: str,
        usage_type: UsageType,
        period_start: datetime,
        period_end: datetime,
        amount: int,
    ) -> int:
        """Atomically add ``amount`` to the period counter and return the new value."""
        pass
