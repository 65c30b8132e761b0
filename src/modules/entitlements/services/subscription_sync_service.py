from typing import Any, Dict, Optional, Union

from src.core.utils import get_logger
from src.modules.entitlements.enums.billing_interval import BillingInterval
from src.modules.entitlements.models.subscriber import Subscriber
from src.modules.entitlements.repositories.interfaces import (
    ISubscriberRepository,
    ISubscriptionTierRepository,
)
from src.modules.entitlements.services.stripe_service import StripeService, summarize_subscription

logger = get_logger(__name__)


class SubscriptionSyncService:
    """
    Keeps the subscriber records in step with Stripe.

    Stripe is the source of truth for payment state; the local record only
    mirrors whether the user is subscribed, to which tier and until when.
    """

    def __init__(
        self,
        subscriber_repository: ISubscriberRepository,
        tier_repository: ISubscriptionTierRepository,
        stripe_service: StripeService,
    ):
        self.subscriber_repo = subscriber_repository
        self.tier_repo = tier_repository
        self.stripe_service = stripe_service

    def resolve_tier_name(
        self,
        amount_cents: Optional[int],
        interval: Union[BillingInterval, str, None] = BillingInterval.MONTH,
    ) -> Optional[str]:
        """
        Map a Stripe price amount to a tier name.

        An exact price match wins; otherwise the most expensive active tier
        priced at or below the amount.
        """
        if amount_cents is None:
            return None

        yearly = interval == BillingInterval.YEAR or interval == BillingInterval.YEAR.value
        candidates = []
        for tier in self.tier_repo.list_active():
            price = tier.price_yearly if yearly else tier.price_monthly
            cents = int(round(price * 100))
            if cents == amount_cents:
                return tier.tier_name
            if cents <= amount_cents:
                candidates.append((cents, tier.tier_name))

        if not candidates:
            logger.warning("no_tier_for_price", amount_cents=amount_cents, interval=str(interval))
            return None
        return max(candidates)[1]

    def subscription_fields(self, summary: Dict[str, Any]) -> Dict[str, Any]:
        """Subscriber columns derived from a flattened Stripe subscription."""
        if summary.get("status") != "active":
            return {"subscribed": False, "subscription_tier": None, "subscription_end": None}

        amount = summary.get("unit_amount")
        if amount is None and summary.get("price_id"):
            # Price left unexpanded on the item, only its id is known
            amount = self.stripe_service.retrieve_price_amount(summary["price_id"])

        return {
            "subscribed": True,
            "subscription_tier": self.resolve_tier_name(amount, summary.get("interval")),
            "subscription_end": summary.get("current_period_end"),
        }

    def check_subscription(self, user_id: str, email: str) -> Subscriber:
        """Pull the user's current Stripe state into their subscriber record."""
        customer_id = self.stripe_service.find_customer_id(email)
        if not customer_id:
            logger.info("no_stripe_customer", user_id=user_id)
            return self.subscriber_repo.upsert({
                "user_id": user_id,
                "email": email,
                "stripe_customer_id": None,
                "subscribed": False,
                "subscription_tier": None,
                "subscription_end": None,
            })

        subscriptions = self.stripe_service.list_active_subscriptions(customer_id)
        if subscriptions:
            fields = self.subscription_fields(subscriptions[0])
        else:
            fields = {"subscribed": False, "subscription_tier": None, "subscription_end": None}

        subscriber = self.subscriber_repo.upsert({
            "user_id": user_id,
            "email": email,
            "stripe_customer_id": customer_id,
            **fields,
        })
        logger.info(
            "subscription_checked",
            user_id=user_id,
            subscribed=subscriber.subscribed,
            tier_name=subscriber.subscription_tier,
        )
        return subscriber

    def start_checkout(
        self,
        user_id: str,
        email: str,
        tier_name: str,
        origin: str,
        interval: BillingInterval = BillingInterval.MONTH,
    ) -> str:
        tier = self.tier_repo.find_active_by_name(tier_name)
        if tier is None:
            raise ValueError(f"Tier {tier_name} is not available")
        return self.stripe_service.create_checkout_session(user_id, email, tier, origin, interval)

    def open_customer_portal(self, email: str, origin: str) -> str:
        return self.stripe_service.create_portal_session(email, origin)

    def link_customer(self, user_id: str, customer_id: Optional[str], email: Optional[str] = None) -> Subscriber:
        data: Dict[str, Any] = {"user_id": user_id}
        if customer_id:
            data["stripe_customer_id"] = customer_id
        if email:
            data["email"] = email
        subscriber = self.subscriber_repo.upsert(data)
        logger.info("stripe_customer_linked", user_id=user_id, stripe_customer_id=customer_id)
        return subscriber

    def find_subscriber_for_customer(self, customer_id: str) -> Optional[Subscriber]:
        subscriber = self.subscriber_repo.find_by_stripe_customer_id(customer_id)
        if subscriber is not None:
            return subscriber

        email = self.stripe_service.retrieve_customer_email(customer_id)
        if not email:
            return None
        return self.subscriber_repo.find_by_email(email)

    def apply_stripe_subscription(
        self, subscription: Dict[str, Any], deleted: bool = False
    ) -> Optional[Subscriber]:
        """
        Mirror a Stripe subscription onto the subscriber record of its customer.

        Returns None when no local user can be matched to the customer.
        """
        summary = summarize_subscription(subscription)
        customer_id = summary.get("customer")
        if not customer_id:
            logger.warning("subscription_without_customer", subscription_id=summary.get("id"))
            return None

        subscriber = self.find_subscriber_for_customer(customer_id)
        if subscriber is None:
            logger.warning("subscriber_not_found_for_customer", stripe_customer_id=customer_id)
            return None

        if deleted:
            fields = {"subscribed": False, "subscription_tier": None, "subscription_end": None}
        else:
            fields = self.subscription_fields(summary)

        updated = self.subscriber_repo.upsert({
            "user_id": subscriber.user_id,
            "stripe_customer_id": customer_id,
            **fields,
        })
        logger.info(
            "subscription_synced",
            user_id=subscriber.user_id,
            stripe_subscription_id=summary.get("id"),
            status=summary.get("status"),
            subscribed=updated.subscribed,
        )
        return updated
