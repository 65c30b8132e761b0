from typing import Any, Dict, Optional

from src.core.database.supabase_repository import SupabaseRepository
from src.core.utils import get_logger
from src.modules.entitlements.exceptions import EntitlementRepositoryError
from src.modules.entitlements.helpers import utcnow
from src.modules.entitlements.models.subscriber import Subscriber, SubscriberUpsert
from src.modules.entitlements.repositories.interfaces import ISubscriberRepository

logger = get_logger(__name__)


class SupabaseSubscriberRepository(SupabaseRepository[Subscriber], ISubscriberRepository):
    def __init__(self, client):
        super().__init__(client, "subscribers", Subscriber)

    def _find_one(self, column: str, value: str) -> Optional[Subscriber]:
        result = (
            self.client.table(self.table_name)
            .select("*")
            .eq(column, value)
            .limit(1)
            .execute()
        )
        if result.data:
            return self.model_class(**result.data[0])
        return None

    def find_by_user(self, user_id: str) -> Optional[Subscriber]:
        try:
            return self._find_one("user_id", user_id)
        except Exception as e:
            logger.error("find_subscriber_by_user_failed", user_id=user_id, error=str(e))
            raise EntitlementRepositoryError(f"Failed to find subscriber for user {user_id}", original_error=e)

    def find_by_email(self, email: str) -> Optional[Subscriber]:
        try:
            return self._find_one("email", email)
        except Exception as e:
            logger.error("find_subscriber_by_email_failed", email=email, error=str(e))
            raise EntitlementRepositoryError("Failed to find subscriber by email", original_error=e)

    def find_by_stripe_customer_id(self, stripe_customer_id: str) -> Optional[Subscriber]:
        try:
            return self._find_one("stripe_customer_id", stripe_customer_id)
        except Exception as e:
            logger.error(
                "find_subscriber_by_customer_failed",
                stripe_customer_id=stripe_customer_id,
                error=str(e),
            )
            raise EntitlementRepositoryError(
                f"Failed to find subscriber for customer {stripe_customer_id}", original_error=e
            )

    def has_ever_subscribed(self, user_id: str) -> bool:
        try:
            result = (
                self.client.table(self.table_name)
                .select("id")
                .eq("user_id", user_id)
                .or_("subscribed.eq.true,first_subscribed_at.not.is.null")
                .limit(1)
                .execute()
            )
            return bool(result.data)
        except Exception as e:
            logger.error("has_ever_subscribed_failed", user_id=user_id, error=str(e))
            raise EntitlementRepositoryError(
                f"Failed to read subscription history for user {user_id}", original_error=e
            )

    def upsert(self, data: Dict[str, Any]) -> Subscriber:
        record = SubscriberUpsert(**data)
        payload = record.model_dump(mode="json", exclude_unset=True)
        payload["user_id"] = record.user_id
        payload["updated_at"] = utcnow().isoformat()
        # first_subscribed_at is owned by the repository
        payload.pop("first_subscribed_at", None)

        try:
            result = (
                self.client.table(self.table_name)
                .upsert(payload, on_conflict="user_id")
                .execute()
            )
            if not result.data:
                raise ValueError("Upsert returned no rows")
            subscriber = self.model_class(**result.data[0])

            if subscriber.subscribed and subscriber.first_subscribed_at is None:
                return self._stamp_first_subscription(subscriber)
            return subscriber
        except Exception as e:
            logger.error("upsert_subscriber_failed", user_id=record.user_id, error=str(e))
            raise EntitlementRepositoryError(
                f"Failed to upsert subscriber {record.user_id}", original_error=e
            )

    def _stamp_first_subscription(self, subscriber: Subscriber) -> Subscriber:
        # Conditional UPDATE: a concurrent activation that stamped first wins
        result = (
            self.client.table(self.table_name)
            .update({"first_subscribed_at": utcnow().isoformat()})
            .eq("user_id", subscriber.user_id)
            .is_("first_subscribed_at", "null")
            .execute()
        )
        if result.data:
            return self.model_class(**result.data[0])
        return self._find_one("user_id", subscriber.user_id) or subscriber
