from typing import Any, Dict, Optional

from psycopg2 import sql

from src.core.database.postgres_repository import PostgresRepository
from src.core.database.postgres_session import PostgresDatabase
from src.core.utils import get_logger
from src.modules.entitlements.exceptions import EntitlementRepositoryError
from src.modules.entitlements.helpers import utcnow
from src.modules.entitlements.models.subscriber import Subscriber, SubscriberUpsert
from src.modules.entitlements.repositories.interfaces import ISubscriberRepository

logger = get_logger(__name__)


class PostgresSubscriberRepository(PostgresRepository[Subscriber], ISubscriberRepository):
    def __init__(self, db: PostgresDatabase):
        super().__init__(db, "subscribers", Subscriber)

    def _find_one(self, column: str, value: str) -> Optional[Subscriber]:
        query = sql.SQL("SELECT * FROM {} WHERE {} = %s LIMIT 1").format(
            self.table_identifier, sql.Identifier(column)
        )
        row = self._execute_query(query, (value,), fetch_one=True)
        return self.model_class(**row) if row else None

    def find_by_user(self, user_id: str) -> Optional[Subscriber]:
        try:
            return self._find_one("user_id", user_id)
        except Exception as e:
            raise EntitlementRepositoryError(f"Failed to find subscriber for user {user_id}", original_error=e)

    def find_by_email(self, email: str) -> Optional[Subscriber]:
        try:
            return self._find_one("email", email)
        except Exception as e:
            raise EntitlementRepositoryError("Failed to find subscriber by email", original_error=e)

    def find_by_stripe_customer_id(self, stripe_customer_id: str) -> Optional[Subscriber]:
        try:
            return self._find_one("stripe_customer_id", stripe_customer_id)
        except Exception as e:
            raise EntitlementRepositoryError(
                f"Failed to find subscriber for customer {stripe_customer_id}", original_error=e
            )

    def has_ever_subscribed(self, user_id: str) -> bool:
        query = sql.SQL(
            "SELECT 1 FROM {} WHERE user_id = %s "
            "AND (subscribed IS TRUE OR first_subscribed_at IS NOT NULL) LIMIT 1"
        ).format(self.table_identifier)
        try:
            return self._execute_query(query, (user_id,), fetch_one=True) is not None
        except Exception as e:
            raise EntitlementRepositoryError(
                f"Failed to read subscription history for user {user_id}", original_error=e
            )

    def upsert(self, data: Dict[str, Any]) -> Subscriber:
        record = SubscriberUpsert(**data)
        values = record.model_dump(exclude_unset=True)
        values.pop("first_subscribed_at", None)
        values["user_id"] = record.user_id

        now = utcnow()
        values["updated_at"] = now
        values["first_subscribed_at"] = now if record.subscribed else None

        columns = list(values.keys())
        updates = [
            sql.SQL("{} = EXCLUDED.{}").format(sql.Identifier(c), sql.Identifier(c))
            for c in columns
            if c not in ("user_id", "first_subscribed_at")
        ]
        # Once stamped, first_subscribed_at never changes
        updates.append(
            sql.SQL("first_subscribed_at = COALESCE({}.first_subscribed_at, EXCLUDED.first_subscribed_at)").format(
                self.table_identifier
            )
        )

        query = sql.SQL(
            "INSERT INTO {} ({}) VALUES ({}) ON CONFLICT (user_id) DO UPDATE SET {} RETURNING *"
        ).format(
            self.table_identifier,
            sql.SQL(", ").join(map(sql.Identifier, columns)),
            sql.SQL(", ").join(sql.Placeholder() * len(columns)),
            sql.SQL(", ").join(updates),
        )

        try:
            row = self._execute_query(query, tuple(values.values()), fetch_one=True, commit=True)
        except Exception as e:
            logger.error("upsert_subscriber_failed", user_id=record.user_id, error=str(e))
            raise EntitlementRepositoryError(
                f"Failed to upsert subscriber {record.user_id}", original_error=e
            )
        return self.model_class(**row)
