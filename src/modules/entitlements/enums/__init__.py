from .billing_interval import BillingInterval
from .premium_feature import PremiumFeature
from .usage_type import UsageType

__all__ = ["BillingInterval", "PremiumFeature", "UsageType"]
