from datetime import datetime

from psycopg2 import sql

from src.core.database.postgres_repository import PostgresRepository
from src.core.database.postgres_session import PostgresDatabase
from src.core.utils import get_logger
from src.modules.entitlements.enums.usage_type import UsageType
from src.modules.entitlements.exceptions import EntitlementRepositoryError
from src.modules.entitlements.models.usage_record import UsageRecord
from src.modules.entitlements.repositories.interfaces import IUsageTrackingRepository

logger = get_logger(__name__)


class PostgresUsageTrackingRepository(PostgresRepository[UsageRecord], IUsageTrackingRepository):
    def __init__(self, db: PostgresDatabase):
        super().__init__(db, "usage_tracking", UsageRecord)

    def sum_usage(
        self,
        user_id: str,
        usage_type: UsageType,
        period_start: datetime,
        period_end: datetime,
    ) -> int:
        query = sql.SQL(
            "SELECT COALESCE(SUM(usage_count), 0) AS total FROM {} "
            "WHERE user_id = %s AND usage_type = %s "
            "AND billing_period_start <= %s AND billing_period_end >= %s"
        ).format(self.table_identifier)
        try:
            row = self._execute_query(
                query, (user_id, usage_type.value, period_end, period_start), fetch_one=True
            )
        except Exception as e:
            raise EntitlementRepositoryError(
                f"Failed to aggregate {usage_type.value} usage for user {user_id}", original_error=e
            )
        return int(row["total"]) if row else 0

    def increment(
        self,
        user_id: str,
        usage_type: UsageType,
        period_start: datetime,
        period_end: datetime,
        amount: int,
    ) -> int:
        query = sql.SQL(
            "INSERT INTO {table} (user_id, usage_type, usage_count, billing_period_start, billing_period_end) "
            "VALUES (%s, %s, %s, %s, %s) "
            "ON CONFLICT (user_id, usage_type, billing_period_start, billing_period_end) "
            "DO UPDATE SET usage_count = {table}.usage_count + EXCLUDED.usage_count, updated_at = now() "
            "RETURNING usage_count"
        ).format(table=self.table_identifier)
        try:
            row = self._execute_query(
                query,
                (user_id, usage_type.value, amount, period_start, period_end),
                fetch_one=True,
                commit=True,
            )
        except Exception as e:
            logger.error("increment_usage_failed", user_id=user_id, usage_type=usage_type.value, error=str(e))
            raise EntitlementRepositoryError(
                f"Failed to increment {usage_type.value} usage for user {user_id}", original_error=e
            )
        return int(row["usage_count"])
