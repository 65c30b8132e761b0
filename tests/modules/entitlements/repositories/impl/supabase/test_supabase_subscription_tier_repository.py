from unittest.mock import MagicMock

import pytest

from src.modules.entitlements.exceptions import EntitlementRepositoryError, InvalidTierRowError
from src.modules.entitlements.models.subscription_tier import SubscriptionTierBase
from src.modules.entitlements.repositories.impl.supabase.subscription_tier_repository import (
    SupabaseSubscriptionTierRepository,
)


@pytest.fixture
def mock_client():
    return MagicMock()


@pytest.fixture
def mock_query(mock_client):
    query = MagicMock()
    mock_client.table.return_value = query
    for method in ("select", "eq", "order", "limit", "upsert"):
        getattr(query, method).return_value = query
    return query


@pytest.fixture
def repository(mock_client):
    return SupabaseSubscriptionTierRepository(mock_client)


def _row(name, price, features=None, limits=None):
    return {
        "id": f"tier-{name}",
        "tier_name": name,
        "price_monthly": price,
        "price_yearly": price * 10,
        "features": features if features is not None else ["social_sharing"],
        "limits": limits if limits is not None else {"photo_uploads_per_month": 10},
        "is_active": True,
    }


def test_find_active_by_name(repository, mock_query):
    mock_query.execute.return_value = MagicMock(data=[_row("pro", 4.99)])

    tier = repository.find_active_by_name("pro")

    assert tier.tier_name == "pro"
    mock_query.eq.assert_any_call("tier_name", "pro")
    mock_query.eq.assert_any_call("is_active", True)


def test_find_active_by_name_rejects_malformed_row(repository, mock_query):
    mock_query.execute.return_value = MagicMock(data=[_row("pro", 4.99, limits={"photo_uploads_per_month": "many"})])

    with pytest.raises(InvalidTierRowError):
        repository.find_active_by_name("pro")


def test_list_active_skips_malformed_rows_and_sorts(repository, mock_query):
    mock_query.execute.return_value = MagicMock(data=[
        _row("enterprise", 29.99),
        _row("broken", 1.0, features=["not_a_feature"]),
        _row("pro", 4.99),
    ])

    tiers = repository.list_active()

    assert [t.tier_name for t in tiers] == ["pro", "enterprise"]
    mock_query.order.assert_called_once_with("price_monthly", desc=False)


def test_list_active_wraps_errors(repository, mock_query):
    mock_query.execute.side_effect = Exception("timeout")

    with pytest.raises(EntitlementRepositoryError):
        repository.list_active()


def test_upsert_by_tier_name(repository, mock_query):
    mock_query.execute.return_value = MagicMock(data=[_row("pro", 4.99)])

    tier = repository.upsert(SubscriptionTierBase(tier_name="pro", price_monthly=4.99, features=["social_sharing"]))

    assert tier.tier_name == "pro"
    payload = mock_query.upsert.call_args[0][0]
    assert payload["features"] == ["social_sharing"]
    assert mock_query.upsert.call_args.kwargs == {"on_conflict": "tier_name"}
