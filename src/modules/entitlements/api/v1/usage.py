from typing import Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from dependency_injector.wiring import inject, Provide

from src.core.di.container import Container
from src.core.security import get_current_user_id
from src.modules.entitlements.enums.usage_type import UsageType
from src.modules.entitlements.models.entitlement import UsageAllowance
from src.modules.entitlements.services.entitlement_service import EntitlementService
from src.modules.entitlements.services.usage_recording_service import UsageRecordingService

router = APIRouter(prefix="/usage", tags=["Entitlements Usage"])


class UsageLimitResponse(BaseModel):
    usage_type: UsageType
    allowed: bool
    remaining: Optional[int] = None


class RecordUsageRequest(BaseModel):
    amount: int = Field(default=1, ge=1)


@router.get("/", response_model=Dict[UsageType, UsageAllowance])
@inject
async def get_usage_summary(
    user_id: str = Depends(get_current_user_id),
    service: EntitlementService = Depends(Provide[Container.entitlement_service]),
):
    """Month-to-date usage and caps for every usage type."""
    return await service.get_usage_summary(user_id)


@router.get("/{usage_type}/limit", response_model=UsageLimitResponse)
@inject
async def check_usage_limit(
    usage_type: UsageType,
    user_id: str = Depends(get_current_user_id),
    service: EntitlementService = Depends(Provide[Container.entitlement_service]),
):
    result = await service.check_usage_limit(user_id, usage_type)
    return UsageLimitResponse(usage_type=usage_type, allowed=result.allowed, remaining=result.remaining)


@router.post("/{usage_type}", response_model=UsageLimitResponse)
@inject
async def record_usage(
    usage_type: UsageType,
    req: RecordUsageRequest = RecordUsageRequest(),
    user_id: str = Depends(get_current_user_id),
    service: UsageRecordingService = Depends(Provide[Container.usage_recording_service]),
):
    """Consume allowance; 429 once the monthly limit is used up."""
    result = await service.consume_usage(user_id, usage_type, req.amount)
    return UsageLimitResponse(usage_type=usage_type, allowed=result.allowed, remaining=result.remaining)
