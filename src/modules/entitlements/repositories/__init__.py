from .interfaces import (
    ISubscriberRepository,
    ISubscriptionTierRepository,
    IUsageTrackingRepository,
)

__all__ = [
    "ISubscriberRepository",
    "ISubscriptionTierRepository",
    "IUsageTrackingRepository",
]
