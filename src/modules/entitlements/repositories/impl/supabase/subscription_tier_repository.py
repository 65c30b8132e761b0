from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from src.core.database.supabase_repository import SupabaseRepository
from src.core.utils import get_logger
from src.modules.entitlements.exceptions import EntitlementRepositoryError, InvalidTierRowError
from src.modules.entitlements.models.subscription_tier import SubscriptionTier, SubscriptionTierBase
from src.modules.entitlements.repositories.interfaces import ISubscriptionTierRepository

logger = get_logger(__name__)


class SupabaseSubscriptionTierRepository(
    SupabaseRepository[SubscriptionTier], ISubscriptionTierRepository
):
    def __init__(self, client):
        super().__init__(client, "subscription_tiers", SubscriptionTier)

    def _parse(self, row: Dict[str, Any]) -> SubscriptionTier:
        try:
            return self.model_class(**row)
        except ValidationError as e:
            logger.error("invalid_tier_row", tier_name=row.get("tier_name"), error=str(e))
            raise InvalidTierRowError(
                f"Tier row '{row.get('tier_name')}' is malformed", original_error=e
            )

    def find_active_by_name(self, tier_name: str) -> Optional[SubscriptionTier]:
        try:
            result = (
                self.client.table(self.table_name)
                .select("*")
                .eq("tier_name", tier_name)
                .eq("is_active", True)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error("find_active_tier_failed", tier_name=tier_name, error=str(e))
            raise EntitlementRepositoryError(f"Failed to find tier {tier_name}", original_error=e)

        if result.data:
            return self._parse(result.data[0])
        return None

    def list_active(self) -> List[SubscriptionTier]:
        try:
            result = (
                self.client.table(self.table_name)
                .select("*")
                .eq("is_active", True)
                .order("price_monthly", desc=False)
                .execute()
            )
        except Exception as e:
            logger.error("list_active_tiers_failed", error=str(e))
            raise EntitlementRepositoryError("Failed to list active tiers", original_error=e)

        tiers = []
        for row in result.data:
            try:
                tiers.append(self._parse(row))
            except InvalidTierRowError:
                # Malformed rows are left out of the catalog rather than failing it
                continue
        return sorted(tiers, key=lambda tier: tier.price_monthly)

    def upsert(self, tier: SubscriptionTierBase) -> SubscriptionTier:
        payload = tier.model_dump(mode="json")
        try:
            result = (
                self.client.table(self.table_name)
                .upsert(payload, on_conflict="tier_name")
                .execute()
            )
        except Exception as e:
            logger.error("upsert_tier_failed", tier_name=tier.tier_name, error=str(e))
            raise EntitlementRepositoryError(f"Failed to upsert tier {tier.tier_name}", original_error=e)
        return self._parse(result.data[0])
