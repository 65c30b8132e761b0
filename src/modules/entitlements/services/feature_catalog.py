"""
Static metadata for every premium feature.

This is configuration, not data: display names, benefit copy and the minimum
tier a feature is marketed under. Which tiers actually grant a feature is
decided by the tier catalog rows.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Union

from src.modules.entitlements.enums.premium_feature import PremiumFeature
from src.modules.entitlements.enums.usage_type import UsageType
from src.modules.entitlements.exceptions import InvalidEntitlementRequestError


@dataclass(frozen=True)
class FeatureMetadata:
    name: str
    benefits: List[str] = field(default_factory=list)
    required_tier: str = "pro"


FEATURE_METADATA: Dict[PremiumFeature, FeatureMetadata] = {
    PremiumFeature.AI_OUTFIT_SUGGESTIONS: FeatureMetadata(
        name="AI Outfit Suggestions",
        benefits=[
            "Get personalized outfit recommendations powered by AI",
            "Smart suggestions based on weather and occasion",
            "Learn your style preferences over time",
        ],
        required_tier="pro",
    ),
    PremiumFeature.WEATHER_INTEGRATION: FeatureMetadata(
        name="Weather Integration",
        benefits=[
            "See weather forecasts for your outfits",
            "Get suggestions based on temperature",
            "Plan outfits for upcoming trips",
        ],
        required_tier="premium",
    ),
    PremiumFeature.SOCIAL_SHARING: FeatureMetadata(
        name="Social Sharing",
        benefits=[
            "Share your outfits with the community",
            "Get feedback and likes from other users",
            "Discover trending styles",
        ],
        required_tier="pro",
    ),
    PremiumFeature.MARKETPLACE_ACCESS: FeatureMetadata(
        name="Marketplace Access",
        benefits=[
            "Buy and sell clothing items",
            "Access sustainable fashion marketplace",
            "Find unique pieces from other users",
        ],
        required_tier="premium",
    ),
    PremiumFeature.ADVANCED_ANALYTICS: FeatureMetadata(
        name="Advanced Analytics",
        benefits=[
            "Track your wardrobe usage patterns",
            "See cost-per-wear analytics",
            "Identify underutilized items",
            "Get personalized insights",
        ],
        required_tier="premium",
    ),
    PremiumFeature.PERSONAL_STYLIST: FeatureMetadata(
        name="Personal Stylist",
        benefits=[
            "Schedule 1-on-1 consultations with professional stylists",
            "Get personalized style advice",
            "Wardrobe audit and recommendations",
        ],
        required_tier="enterprise",
    ),
    PremiumFeature.UNLIMITED_WARDROBE: FeatureMetadata(
        name="Unlimited Wardrobe Items",
        benefits=[
            "Add unlimited items to your wardrobe",
            "No storage limits",
            "Perfect for fashion enthusiasts",
        ],
        required_tier="premium",
    ),
    PremiumFeature.SUSTAINABILITY_TRACKING: FeatureMetadata(
        name="Sustainability Tracking",
        benefits=[
            "Track the carbon footprint of your wardrobe",
            "Get sustainability scores",
            "Make eco-conscious fashion choices",
        ],
        required_tier="premium",
    ),
    PremiumFeature.RENTAL_MARKETPLACE: FeatureMetadata(
        name="Rental Marketplace",
        benefits=[
            "Rent designer pieces for special occasions",
            "List your items for rent",
            "Earn money from your wardrobe",
        ],
        required_tier="premium",
    ),
    PremiumFeature.TEAM_COLLABORATION: FeatureMetadata(
        name="Team Collaboration",
        benefits=[
            "Share wardrobes with team members",
            "Collaborative outfit planning",
            "Perfect for stylists and fashion teams",
        ],
        required_tier="enterprise",
    ),
}


def parse_feature(feature: Union[PremiumFeature, str]) -> PremiumFeature:
    """Resolve a feature identifier, rejecting anything outside the closed set."""
    try:
        return PremiumFeature(feature)
    except ValueError:
        raise InvalidEntitlementRequestError(f"Unknown premium feature: {feature!r}")


def parse_usage_type(usage_type: Union[UsageType, str]) -> UsageType:
    """Resolve a usage type identifier, rejecting anything outside the closed set."""
    try:
        return UsageType(usage_type)
    except ValueError:
        raise InvalidEntitlementRequestError(f"Unknown usage type: {usage_type!r}")


class FeatureCatalogService:
    """
    Read access to the static feature metadata.
    """

    def __init__(self, metadata: Dict[PremiumFeature, FeatureMetadata] = None):
        self.metadata = metadata if metadata is not None else FEATURE_METADATA

    def get_metadata(self, feature: Union[PremiumFeature, str]) -> FeatureMetadata:
        feature = parse_feature(feature)
        entry = self.metadata.get(feature)
        if entry is None:
            # Enum member without copy: fall back to a readable name
            return FeatureMetadata(name=feature.value.replace("_", " ").title())
        return entry

    def get_feature_benefits(self, feature: Union[PremiumFeature, str]) -> List[str]:
        return list(self.get_metadata(feature).benefits)
