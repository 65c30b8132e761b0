from typing import Any, Dict

from src.core.utils import get_logger
from src.modules.entitlements.services.subscription_sync_service import SubscriptionSyncService

logger = get_logger(__name__)


class WebhookHandlerService:
    """
    Handles Stripe webhooks and updates local subscriber state.
    """

    def __init__(self, subscription_sync_service: SubscriptionSyncService):
        self.sync_service = subscription_sync_service

    async def handle_event(self, event: Dict[str, Any]):
        """
        Dispatch Stripe event to appropriate handler.
        """
        event_type = event.get("type")
        data = event.get("data", {}).get("object", {})

        logger.info("stripe_event_received", event_type=event_type, event_id=event.get("id"))

        try:
            if event_type in ("customer.subscription.created", "customer.subscription.updated"):
                await self._handle_subscription_changed(data)
            elif event_type == "customer.subscription.deleted":
                await self._handle_subscription_deleted(data)
            elif event_type == "checkout.session.completed":
                await self._handle_checkout_session_completed(data)
            else:
                logger.info("stripe_event_ignored", event_type=event_type)
        except Exception as e:
            logger.error("stripe_event_failed", event_type=event_type, error=str(e), exc_info=True)
            raise

    async def _handle_subscription_changed(self, subscription: Dict[str, Any]):
        self.sync_service.apply_stripe_subscription(subscription)

    async def _handle_subscription_deleted(self, subscription: Dict[str, Any]):
        self.sync_service.apply_stripe_subscription(subscription, deleted=True)

    async def _handle_checkout_session_completed(self, session: Dict[str, Any]):
        """
        Link the Stripe customer created at checkout to our user.
        """
        user_id = session.get("client_reference_id")
        if not user_id:
            logger.warning("checkout_session_without_user", session_id=session.get("id"))
            return

        email = session.get("customer_email") or (session.get("customer_details") or {}).get("email")
        self.sync_service.link_customer(user_id, session.get("customer"), email)
