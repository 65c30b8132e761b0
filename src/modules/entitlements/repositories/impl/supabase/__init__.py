from .subscriber_repository import SupabaseSubscriberRepository
from .subscription_tier_repository import SupabaseSubscriptionTierRepository
from .usage_tracking_repository import SupabaseUsageTrackingRepository

__all__ = [
    "SupabaseSubscriberRepository",
    "SupabaseSubscriptionTierRepository",
    "SupabaseUsageTrackingRepository",
]
