from datetime import datetime, timedelta, timezone

from src.modules.entitlements.models.subscriber import Subscriber

NOW = datetime(2024, 3, 15, tzinfo=timezone.utc)


def _subscriber(**overrides):
    data = {"id": "1", "user_id": "user_123", "subscribed": True, "subscription_tier": "pro"}
    data.update(overrides)
    return Subscriber(**data)


def test_naive_end_date_treated_as_utc():
    subscriber = _subscriber(subscription_end=datetime(2024, 3, 20))

    assert subscriber.subscription_end.tzinfo == timezone.utc


def test_iso_strings_are_parsed():
    subscriber = _subscriber(subscription_end="2024-03-20T00:00:00+00:00")

    assert subscriber.is_entitled(NOW)


def test_expired():
    subscriber = _subscriber(subscription_end=NOW - timedelta(seconds=1))

    assert subscriber.is_expired(NOW)
    assert not subscriber.is_entitled(NOW)


def test_no_end_date_never_expires():
    assert _subscriber(subscription_end=None).is_entitled(NOW)


def test_unsubscribed_is_not_entitled():
    assert not _subscriber(subscribed=False, subscription_end=None).is_entitled(NOW)
