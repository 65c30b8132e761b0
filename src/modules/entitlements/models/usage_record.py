from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.modules.entitlements.enums.usage_type import UsageType


class UsageRecordBase(BaseModel):
    user_id: str
    usage_type: UsageType
    usage_count: int = Field(0, ge=0)
    billing_period_start: datetime
    billing_period_end: datetime


class UsageRecord(UsageRecordBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
