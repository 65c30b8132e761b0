from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import stripe

from src.core.config import settings
from src.core.utils import get_logger
from src.modules.entitlements.enums.billing_interval import BillingInterval
from src.modules.entitlements.exceptions import StripeCustomerNotFoundError
from src.modules.entitlements.models.subscription_tier import SubscriptionTier

logger = get_logger(__name__)


def _field(obj: Any, key: str) -> Any:
    """Read a key from a plain dict or a StripeObject."""
    if obj is None:
        return None
    try:
        return obj[key]
    except (KeyError, TypeError, AttributeError):
        return None


def _timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


def summarize_subscription(subscription: Any) -> Dict[str, Any]:
    """
    Flatten a Stripe subscription (API object or webhook payload) into the
    fields the subscriber record needs.
    """
    items = _field(_field(subscription, "items"), "data") or []
    first_item = items[0] if items else None
    price = _field(first_item, "price")
    recurring = _field(price, "recurring")

    # Newer API versions carry the period on the item
    period_end = _field(subscription, "current_period_end")
    if period_end is None:
        period_end = _field(first_item, "current_period_end")

    return {
        "id": _field(subscription, "id"),
        "customer": _field(subscription, "customer"),
        "status": _field(subscription, "status"),
        "price_id": price if isinstance(price, str) else _field(price, "id"),
        "unit_amount": _field(price, "unit_amount"),
        "interval": _field(recurring, "interval"),
        "current_period_end": _timestamp(period_end),
    }


class StripeService:
    """
    Thin wrapper over the Stripe SDK.
    """

    def __init__(self, api_key: Optional[str] = None, webhook_secret: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.stripe.api_key
        self.webhook_secret = (
            webhook_secret if webhook_secret is not None else settings.stripe.webhook_secret
        )
        self.currency = settings.stripe.currency
        self.product_name = settings.stripe.product_name

        if self.api_key:
            stripe.api_key = self.api_key

    def _require_api_key(self) -> None:
        if not self.api_key:
            raise ValueError("Stripe API Key not configured")

    def find_customer_id(self, email: str) -> Optional[str]:
        self._require_api_key()
        customers = stripe.Customer.list(email=email, limit=1)
        if not customers.data:
            return None
        return customers.data[0].id

    def retrieve_customer_email(self, customer_id: str) -> Optional[str]:
        self._require_api_key()
        customer = stripe.Customer.retrieve(customer_id)
        return _field(customer, "email")

    def list_active_subscriptions(self, customer_id: str) -> List[Dict[str, Any]]:
        self._require_api_key()
        subscriptions = stripe.Subscription.list(customer=customer_id, status="active", limit=1)
        return [summarize_subscription(sub) for sub in subscriptions.data]

    def retrieve_price_amount(self, price_id: str) -> Optional[int]:
        self._require_api_key()
        price = stripe.Price.retrieve(price_id)
        return _field(price, "unit_amount")

    def create_checkout_session(
        self,
        user_id: str,
        email: str,
        tier: SubscriptionTier,
        origin: str,
        interval: BillingInterval = BillingInterval.MONTH,
    ) -> str:
        """
        Start a subscription checkout for ``tier``.

        Returns:
            The hosted checkout URL.
        """
        self._require_api_key()
        interval = BillingInterval(interval)
        price = tier.price_yearly if interval == BillingInterval.YEAR else tier.price_monthly

        params: Dict[str, Any] = {
            "mode": "subscription",
            "client_reference_id": user_id,
            "line_items": [
                {
                    "price_data": {
                        "currency": self.currency,
                        "product_data": {"name": f"{self.product_name} {tier.tier_name}"},
                        "unit_amount": int(round(price * 100)),
                        "recurring": {"interval": interval.value},
                    },
                    "quantity": 1,
                }
            ],
            "metadata": {"user_id": user_id, "tier_name": tier.tier_name},
            "success_url": f"{origin}/subscription?success=true",
            "cancel_url": f"{origin}/subscription?canceled=true",
        }

        customer_id = self.find_customer_id(email)
        if customer_id:
            params["customer"] = customer_id
        else:
            params["customer_email"] = email

        session = stripe.checkout.Session.create(**params)
        logger.info(
            "checkout_session_created",
            user_id=user_id,
            tier_name=tier.tier_name,
            interval=interval.value,
            session_id=session.id,
        )
        return session.url

    def create_portal_session(self, email: str, origin: str) -> str:
        self._require_api_key()
        customer_id = self.find_customer_id(email)
        if not customer_id:
            raise StripeCustomerNotFoundError("No Stripe customer found for this user")

        session = stripe.billing_portal.Session.create(
            customer=customer_id,
            return_url=f"{origin}/subscription",
        )
        return session.url

    def construct_event(self, payload: bytes, sig_header: str) -> Any:
        if not self.webhook_secret:
            raise ValueError("Stripe Webhook Secret not configured")

        return stripe.Webhook.construct_event(payload, sig_header, self.webhook_secret)
