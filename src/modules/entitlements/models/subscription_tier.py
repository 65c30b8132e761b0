from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.modules.entitlements.enums.premium_feature import PremiumFeature
from src.modules.entitlements.enums.usage_type import UsageType

UNLIMITED = -1


class SubscriptionTierBase(BaseModel):
    tier_name: str = Field(..., min_length=1, max_length=100)
    price_monthly: float = Field(0, ge=0)
    price_yearly: float = Field(0, ge=0)
    features: List[PremiumFeature] = Field(default_factory=list)
    limits: Dict[str, int] = Field(default_factory=dict)
    is_active: bool = True

    @field_validator("features")
    @classmethod
    def dedupe_features(cls, v: List[PremiumFeature]) -> List[PremiumFeature]:
        return list(dict.fromkeys(v))

    @field_validator("limits")
    @classmethod
    def validate_limits(cls, v: Dict[str, int]) -> Dict[str, int]:
        for key, value in v.items():
            if value < UNLIMITED:
                raise ValueError(f"limit '{key}' must be -1 (unlimited) or a non-negative integer")
        return v


class SubscriptionTier(SubscriptionTierBase):
    """
    Tier catalog entry.

    ``limits`` maps keys such as ``photo_uploads_per_month`` to a monthly cap,
    where -1 means unlimited.
    """
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    def has_feature(self, feature: PremiumFeature) -> bool:
        return feature in self.features

    def monthly_limit(self, usage_type: UsageType) -> Optional[int]:
        """Monthly cap for ``usage_type``; None when the tier does not define one."""
        return self.limits.get(usage_type.limit_key)

    def is_unlimited(self, usage_type: UsageType) -> bool:
        return self.monthly_limit(usage_type) == UNLIMITED

    def __repr__(self) -> str:
        return f"SubscriptionTier(name={self.tier_name}, monthly={self.price_monthly}, active={self.is_active})"
