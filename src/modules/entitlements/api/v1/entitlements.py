from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from dependency_injector.wiring import inject, Provide

from src.core.di.container import Container
from src.core.security import get_current_user_id
from src.modules.entitlements.enums.premium_feature import PremiumFeature
from src.modules.entitlements.models.entitlement import UpgradeModalData
from src.modules.entitlements.models.subscription_tier import SubscriptionTier
from src.modules.entitlements.repositories.interfaces import ISubscriptionTierRepository
from src.modules.entitlements.services.entitlement_service import EntitlementService
from src.modules.entitlements.services.upgrade_prompt_service import UpgradePromptService

router = APIRouter(tags=["Entitlements"])


class FeatureAccessResponse(BaseModel):
    feature: PremiumFeature
    allowed: bool


class FeatureBenefitsResponse(BaseModel):
    feature: PremiumFeature
    benefits: List[str]


@router.get("/features/{feature}/access", response_model=FeatureAccessResponse)
@inject
async def check_feature_access(
    feature: PremiumFeature,
    user_id: str = Depends(get_current_user_id),
    service: EntitlementService = Depends(Provide[Container.entitlement_service]),
):
    allowed = await service.check_feature_access(user_id, feature)
    return FeatureAccessResponse(feature=feature, allowed=allowed)


@router.get("/features/{feature}/upgrade-prompt", response_model=UpgradeModalData)
@inject
async def get_upgrade_prompt(
    feature: PremiumFeature,
    user_id: str = Depends(get_current_user_id),
    service: UpgradePromptService = Depends(Provide[Container.upgrade_prompt_service]),
):
    return await service.get_upgrade_prompt_data(user_id, feature)


@router.get("/features/{feature}/benefits", response_model=FeatureBenefitsResponse)
@inject
def get_feature_benefits(
    feature: PremiumFeature,
    service: UpgradePromptService = Depends(Provide[Container.upgrade_prompt_service]),
):
    return FeatureBenefitsResponse(feature=feature, benefits=service.get_feature_benefits(feature))


@router.get("/tiers", response_model=List[SubscriptionTier])
@inject
def list_tiers(
    repository: ISubscriptionTierRepository = Depends(Provide[Container.subscription_tier_repository]),
):
    return repository.list_active()
