from .entitlement import UpgradeModalData, UsageAllowance, UsageLimitResult
from .subscriber import Subscriber, SubscriberUpsert
from .subscription_tier import UNLIMITED, SubscriptionTier
from .usage_record import UsageRecord
