from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.modules.entitlements.helpers import ensure_aware, utcnow


class SubscriberBase(BaseModel):
    user_id: str = Field(..., min_length=1)
    email: Optional[str] = None
    stripe_customer_id: Optional[str] = None
    subscribed: bool = False
    subscription_tier: Optional[str] = None
    subscription_end: Optional[datetime] = None
    first_subscribed_at: Optional[datetime] = None

    @field_validator("subscription_end", "first_subscribed_at")
    @classmethod
    def normalize_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_aware(v)


class SubscriberUpsert(SubscriberBase):
    pass


class Subscriber(SubscriberBase):
    """
    Subscription record of a single user.

    Rows are soft state: cancellation flips ``subscribed`` to false, the row
    itself is never deleted.
    """
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.subscription_end is None:
            return False
        return self.subscription_end < (now or utcnow())

    def is_entitled(self, now: Optional[datetime] = None) -> bool:
        """Subscribed and not past ``subscription_end``."""
        return self.subscribed and not self.is_expired(now)

    def __repr__(self) -> str:
        return f"Subscriber(user_id={self.user_id}, subscribed={self.subscribed}, tier={self.subscription_tier})"
