from enum import Enum


class PremiumFeature(str, Enum):
    """
    Closed set of gated capabilities.

    A tier grants a feature when the feature identifier is listed in the
    tier's ``features`` column.
    """

    AI_OUTFIT_SUGGESTIONS = "ai_outfit_suggestions"
    WEATHER_INTEGRATION = "weather_integration"
    SOCIAL_SHARING = "social_sharing"
    MARKETPLACE_ACCESS = "marketplace_access"
    ADVANCED_ANALYTICS = "advanced_analytics"
    PERSONAL_STYLIST = "personal_stylist"
    UNLIMITED_WARDROBE = "unlimited_wardrobe"
    SUSTAINABILITY_TRACKING = "sustainability_tracking"
    RENTAL_MARKETPLACE = "rental_marketplace"
    TEAM_COLLABORATION = "team_collaboration"

    def __repr__(self) -> str:
        return f"PremiumFeature.{self.name}"
