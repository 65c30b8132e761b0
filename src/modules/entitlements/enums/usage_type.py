from enum import Enum


class UsageType(str, Enum):
    """Countable, rate-limited actions tracked in the usage ledger."""

    AI_RECOMMENDATIONS = "ai_recommendations"
    PHOTO_UPLOADS = "photo_uploads"
    OUTFIT_GENERATIONS = "outfit_generations"

    @property
    def limit_key(self) -> str:
        """Key of the monthly cap inside a tier's ``limits`` mapping."""
        return f"{self.value}_per_month"

    def __repr__(self) -> str:
        return f"UsageType.{self.name}"
