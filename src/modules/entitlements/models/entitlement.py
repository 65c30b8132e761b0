from typing import List, Optional

from pydantic import BaseModel

from src.modules.entitlements.enums.premium_feature import PremiumFeature
from src.modules.entitlements.models.subscription_tier import UNLIMITED, SubscriptionTier


class UsageLimitResult(BaseModel):
    """
    Outcome of a usage-limit check.

    ``remaining`` is None when the tier is unlimited; it is never None for a
    capped allowance, even when nothing is left.
    """
    allowed: bool
    remaining: Optional[int] = None

    @property
    def is_unlimited(self) -> bool:
        return self.allowed and self.remaining is None

    @classmethod
    def denied(cls) -> "UsageLimitResult":
        return cls(allowed=False, remaining=0)

    @classmethod
    def unlimited(cls) -> "UsageLimitResult":
        return cls(allowed=True, remaining=None)

    @classmethod
    def from_usage(cls, usage: int, limit: int) -> "UsageLimitResult":
        return cls(allowed=usage < limit, remaining=max(0, limit - usage))


class UsageAllowance(BaseModel):
    """
    Month-to-date usage of one usage type against its cap.

    ``limit`` and ``remaining`` are None for an unlimited tier.
    """
    used: int = 0
    limit: Optional[int] = 0
    remaining: Optional[int] = 0

    @classmethod
    def denied(cls, used: int = 0) -> "UsageAllowance":
        return cls(used=used, limit=0, remaining=0)

    @classmethod
    def from_usage(cls, used: int, limit: int) -> "UsageAllowance":
        if limit == UNLIMITED:
            return cls(used=used, limit=None, remaining=None)
        return cls(used=used, limit=limit, remaining=max(0, limit - used))


class UpgradeModalData(BaseModel):
    feature: PremiumFeature
    feature_name: str
    benefits: List[str]
    current_tier: str
    recommended_tier: Optional[SubscriptionTier] = None
    trial_available: bool
