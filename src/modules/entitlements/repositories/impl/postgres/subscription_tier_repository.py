from typing import Any, Dict, List, Optional

from psycopg2 import sql
from psycopg2.extras import Json
from pydantic import ValidationError

from src.core.database.postgres_repository import PostgresRepository
from src.core.database.postgres_session import PostgresDatabase
from src.core.utils import get_logger
from src.modules.entitlements.exceptions import EntitlementRepositoryError, InvalidTierRowError
from src.modules.entitlements.models.subscription_tier import SubscriptionTier, SubscriptionTierBase
from src.modules.entitlements.repositories.interfaces import ISubscriptionTierRepository

logger = get_logger(__name__)


class PostgresSubscriptionTierRepository(
    PostgresRepository[SubscriptionTier], ISubscriptionTierRepository
):
    def __init__(self, db: PostgresDatabase):
        super().__init__(db, "subscription_tiers", SubscriptionTier)

    def _parse(self, row: Dict[str, Any]) -> SubscriptionTier:
        try:
            return self.model_class(**row)
        except ValidationError as e:
            logger.error("invalid_tier_row", tier_name=row.get("tier_name"), error=str(e))
            raise InvalidTierRowError(
                f"Tier row '{row.get('tier_name')}' is malformed", original_error=e
            )

    def find_active_by_name(self, tier_name: str) -> Optional[SubscriptionTier]:
        query = sql.SQL(
            "SELECT * FROM {} WHERE tier_name = %s AND is_active IS TRUE LIMIT 1"
        ).format(self.table_identifier)
        try:
            row = self._execute_query(query, (tier_name,), fetch_one=True)
        except Exception as e:
            raise EntitlementRepositoryError(f"Failed to find tier {tier_name}", original_error=e)
        return self._parse(row) if row else None

    def list_active(self) -> List[SubscriptionTier]:
        query = sql.SQL(
            "SELECT * FROM {} WHERE is_active IS TRUE ORDER BY price_monthly ASC"
        ).format(self.table_identifier)
        try:
            rows = self._execute_query(query, fetch_all=True)
        except Exception as e:
            raise EntitlementRepositoryError("Failed to list active tiers", original_error=e)

        tiers = []
        for row in rows:
            try:
                tiers.append(self._parse(row))
            except InvalidTierRowError:
                continue
        return tiers

    def upsert(self, tier: SubscriptionTierBase) -> SubscriptionTier:
        query = sql.SQL(
            "INSERT INTO {} (tier_name, price_monthly, price_yearly, features, limits, is_active) "
            "VALUES (%s, %s, %s, %s, %s, %s) "
            "ON CONFLICT (tier_name) DO UPDATE SET "
            "price_monthly = EXCLUDED.price_monthly, price_yearly = EXCLUDED.price_yearly, "
            "features = EXCLUDED.features, limits = EXCLUDED.limits, "
            "is_active = EXCLUDED.is_active, updated_at = now() "
            "RETURNING *"
        ).format(self.table_identifier)
        data = tier.model_dump(mode="json")
        params = (
            data["tier_name"],
            data["price_monthly"],
            data["price_yearly"],
            Json(data["features"]),
            Json(data["limits"]),
            data["is_active"],
        )
        try:
            row = self._execute_query(query, params, fetch_one=True, commit=True)
        except Exception as e:
            logger.error("upsert_tier_failed", tier_name=tier.tier_name, error=str(e))
            raise EntitlementRepositoryError(f"Failed to upsert tier {tier.tier_name}", original_error=e)
        return self._parse(row)
