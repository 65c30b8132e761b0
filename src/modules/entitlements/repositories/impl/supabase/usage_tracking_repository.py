from datetime import datetime

from src.core.database.supabase_repository import SupabaseRepository
from src.core.utils import get_logger
from src.modules.entitlements.enums.usage_type import UsageType
from src.modules.entitlements.exceptions import EntitlementRepositoryError
from src.modules.entitlements.models.usage_record import UsageRecord
from src.modules.entitlements.repositories.interfaces import IUsageTrackingRepository

logger = get_logger(__name__)


class SupabaseUsageTrackingRepository(SupabaseRepository[UsageRecord], IUsageTrackingRepository):
    def __init__(self, client):
        super().__init__(client, "usage_tracking", UsageRecord)

    def sum_usage(
        self,
        user_id: str,
        usage_type: UsageType,
        period_start: datetime,
        period_end: datetime,
    ) -> int:
        try:
            result = (
                self.client.table(self.table_name)
                .select("usage_count")
                .eq("user_id", user_id)
                .eq("usage_type", usage_type.value)
                .lte("billing_period_start", period_end.isoformat())
                .gte("billing_period_end", period_start.isoformat())
                .execute()
            )
            return sum(int(row.get("usage_count") or 0) for row in result.data or [])
        except Exception as e:
            logger.error("sum_usage_failed", user_id=user_id, usage_type=usage_type.value, error=str(e))
            raise EntitlementRepositoryError(
                f"Failed to aggregate {usage_type.value} usage for user {user_id}", original_error=e
            )

    def increment(
        self,
        user_id: str,
        usage_type: UsageType,
        period_start: datetime,
        period_end: datetime,
        amount: int,
    ) -> int:
        # PostgREST has no atomic "col = col + n", the increment_usage function
        # runs a single INSERT ... ON CONFLICT DO UPDATE
        try:
            result = self.client.rpc(
                "increment_usage",
                {
                    "p_user_id": user_id,
                    "p_usage_type": usage_type.value,
                    "p_period_start": period_start.isoformat(),
                    "p_period_end": period_end.isoformat(),
                    "p_amount": amount,
                },
            ).execute()
            return int(result.data)
        except Exception as e:
            logger.error("increment_usage_failed", user_id=user_id, usage_type=usage_type.value, error=str(e))
            raise EntitlementRepositoryError(
                f"Failed to increment {usage_type.value} usage for user {user_id}", original_error=e
            )
