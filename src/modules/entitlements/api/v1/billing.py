from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from dependency_injector.wiring import inject, Provide

from src.core.di.container import Container
from src.core.security import get_current_user_email, get_current_user_id
from src.modules.entitlements.enums.billing_interval import BillingInterval
from src.modules.entitlements.services.subscription_sync_service import SubscriptionSyncService

router = APIRouter(prefix="/billing", tags=["Entitlements Billing"])


class CheckoutRequest(BaseModel):
    tier_name: str
    origin: str
    interval: BillingInterval = BillingInterval.MONTH


class PortalRequest(BaseModel):
    origin: str


class SessionUrlResponse(BaseModel):
    url: str


class SubscriptionStatusResponse(BaseModel):
    subscribed: bool
    subscription_tier: Optional[str] = None
    subscription_end: Optional[datetime] = None


@router.post("/checkout", response_model=SessionUrlResponse)
@inject
def create_checkout(
    req: CheckoutRequest,
    user_id: str = Depends(get_current_user_id),
    email: str = Depends(get_current_user_email),
    service: SubscriptionSyncService = Depends(Provide[Container.subscription_sync_service]),
):
    try:
        url = service.start_checkout(user_id, email, req.tier_name, req.origin, req.interval)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SessionUrlResponse(url=url)


@router.post("/portal", response_model=SessionUrlResponse)
@inject
def open_customer_portal(
    req: PortalRequest,
    email: str = Depends(get_current_user_email),
    service: SubscriptionSyncService = Depends(Provide[Container.subscription_sync_service]),
):
    try:
        url = service.open_customer_portal(email, req.origin)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SessionUrlResponse(url=url)


@router.post("/check-subscription", response_model=SubscriptionStatusResponse)
@inject
def check_subscription(
    user_id: str = Depends(get_current_user_id),
    email: str = Depends(get_current_user_email),
    service: SubscriptionSyncService = Depends(Provide[Container.subscription_sync_service]),
):
    subscriber = service.check_subscription(user_id, email)
    return SubscriptionStatusResponse(
        subscribed=subscriber.subscribed,
        subscription_tier=subscriber.subscription_tier,
        subscription_end=subscriber.subscription_end,
    )
