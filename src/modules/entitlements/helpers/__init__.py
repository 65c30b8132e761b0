from .billing_period import BillingPeriod, ensure_aware, utcnow

__all__ = ["BillingPeriod", "ensure_aware", "utcnow"]
