from src.modules.entitlements.models.entitlement import UsageAllowance, UsageLimitResult
from src.modules.entitlements.models.subscription_tier import UNLIMITED


def test_from_usage_under_limit():
    result = UsageLimitResult.from_usage(2, 5)

    assert (result.allowed, result.remaining) == (True, 3)


def test_from_usage_at_and_over_limit():
    assert UsageLimitResult.from_usage(5, 5) == UsageLimitResult(allowed=False, remaining=0)
    assert UsageLimitResult.from_usage(8, 5) == UsageLimitResult(allowed=False, remaining=0)


def test_zero_limit_denies():
    assert UsageLimitResult.from_usage(0, 0).allowed is False


def test_unlimited_and_denied():
    assert UsageLimitResult.unlimited().is_unlimited
    denied = UsageLimitResult.denied()
    assert not denied.is_unlimited
    assert denied.remaining == 0


def test_allowance_over_cap_keeps_actual_usage():
    allowance = UsageAllowance.from_usage(7, 5)

    assert (allowance.used, allowance.limit, allowance.remaining) == (7, 5, 0)


def test_allowance_unlimited():
    allowance = UsageAllowance.from_usage(40, UNLIMITED)

    assert (allowance.limit, allowance.remaining) == (None, None)


def test_allowance_denied():
    assert UsageAllowance.denied(2) == UsageAllowance(used=2, limit=0, remaining=0)
