from enum import Enum


class BillingInterval(str, Enum):
    """Stripe recurring interval used when opening a checkout session."""

    MONTH = "month"
    YEAR = "year"

    def __repr__(self) -> str:
        return f"BillingInterval.{self.name}"
