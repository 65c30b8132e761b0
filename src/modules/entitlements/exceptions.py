from src.core.utils.exceptions import AppError


class EntitlementError(AppError):
    """Base exception for entitlements module errors."""
    pass


class EntitlementRepositoryError(EntitlementError):
    """Raised when a repository operation fails due to infrastructure issues."""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error


class InvalidTierRowError(EntitlementRepositoryError):
    """Raised when a subscription tier row does not pass validation."""
    pass


class InvalidEntitlementRequestError(EntitlementError, ValueError):
    """Raised for a feature or usage type outside the closed set, or a request without a user."""
    pass


class UsageLimitExceededError(EntitlementError):
    """Raised when usage is recorded past the monthly allowance."""
    def __init__(self, message: str, usage_type: str, remaining: int = 0):
        super().__init__(message)
        self.usage_type = usage_type
        self.remaining = remaining


class StripeCustomerNotFoundError(EntitlementError):
    """Raised when no Stripe customer matches the user's email."""
    pass
