"""Tests for the entitlements API endpoints."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.modules.entitlements.api.v1.entitlements import (
    check_feature_access,
    get_feature_benefits,
    get_upgrade_prompt,
    list_tiers,
)
from src.modules.entitlements.enums.premium_feature import PremiumFeature
from src.modules.entitlements.models.entitlement import UpgradeModalData


class TestEntitlementsAPI:
    @pytest.fixture
    def mock_entitlement_service(self):
        service = MagicMock()
        service.check_feature_access = AsyncMock(return_value=True)
        return service

    @pytest.fixture
    def mock_prompt_service(self):
        service = MagicMock()
        service.get_upgrade_prompt_data = AsyncMock()
        return service

    @pytest.mark.asyncio
    async def test_check_feature_access(self, mock_entitlement_service):
        response = await check_feature_access(
            feature=PremiumFeature.SOCIAL_SHARING,
            user_id="user_123",
            service=mock_entitlement_service,
        )

        assert response.allowed is True
        assert response.feature == PremiumFeature.SOCIAL_SHARING
        mock_entitlement_service.check_feature_access.assert_awaited_once_with(
            "user_123", PremiumFeature.SOCIAL_SHARING
        )

    @pytest.mark.asyncio
    async def test_get_upgrade_prompt(self, mock_prompt_service, pro_tier):
        data = UpgradeModalData(
            feature=PremiumFeature.SOCIAL_SHARING,
            feature_name="Social Sharing",
            benefits=["Share your outfits with the community"],
            current_tier="free",
            recommended_tier=pro_tier,
            trial_available=True,
        )
        mock_prompt_service.get_upgrade_prompt_data.return_value = data

        response = await get_upgrade_prompt(
            feature=PremiumFeature.SOCIAL_SHARING,
            user_id="user_123",
            service=mock_prompt_service,
        )

        assert response == data

    def test_get_feature_benefits(self, mock_prompt_service):
        mock_prompt_service.get_feature_benefits.return_value = ["a", "b"]

        response = get_feature_benefits(feature=PremiumFeature.WEATHER_INTEGRATION, service=mock_prompt_service)

        assert response.benefits == ["a", "b"]

    def test_list_tiers(self, pro_tier, premium_tier):
        repository = MagicMock()
        repository.list_active.return_value = [pro_tier, premium_tier]

        assert list_tiers(repository=repository) == [pro_tier, premium_tier]
