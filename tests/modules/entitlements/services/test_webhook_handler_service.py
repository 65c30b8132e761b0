import pytest
from unittest.mock import Mock

from src.modules.entitlements.exceptions import EntitlementRepositoryError
from src.modules.entitlements.services.webhook_handler_service import WebhookHandlerService


@pytest.fixture
def mock_sync_service():
    return Mock()


@pytest.fixture
def webhook_handler(mock_sync_service):
    return WebhookHandlerService(mock_sync_service)


def _event(event_type, obj):
    return {"id": "evt_1", "type": event_type, "data": {"object": obj}}


@pytest.mark.asyncio
@pytest.mark.parametrize("event_type", ["customer.subscription.created", "customer.subscription.updated"])
async def test_subscription_changes_are_applied(webhook_handler, mock_sync_service, event_type):
    subscription = {"id": "sub_1", "customer": "cus_1", "status": "active"}

    await webhook_handler.handle_event(_event(event_type, subscription))

    mock_sync_service.apply_stripe_subscription.assert_called_once_with(subscription)


@pytest.mark.asyncio
async def test_subscription_deleted(webhook_handler, mock_sync_service):
    subscription = {"id": "sub_1", "customer": "cus_1", "status": "canceled"}

    await webhook_handler.handle_event(_event("customer.subscription.deleted", subscription))

    mock_sync_service.apply_stripe_subscription.assert_called_once_with(subscription, deleted=True)


@pytest.mark.asyncio
async def test_checkout_completed_links_customer(webhook_handler, mock_sync_service):
    session = {
        "id": "cs_1",
        "client_reference_id": "user_123",
        "customer": "cus_1",
        "customer_details": {"email": "user@example.com"},
    }

    await webhook_handler.handle_event(_event("checkout.session.completed", session))

    mock_sync_service.link_customer.assert_called_once_with("user_123", "cus_1", "user@example.com")


@pytest.mark.asyncio
async def test_checkout_without_user_is_ignored(webhook_handler, mock_sync_service):
    await webhook_handler.handle_event(_event("checkout.session.completed", {"id": "cs_1", "customer": "cus_1"}))

    mock_sync_service.link_customer.assert_not_called()


@pytest.mark.asyncio
async def test_unhandled_event_is_ignored(webhook_handler, mock_sync_service):
    await webhook_handler.handle_event(_event("invoice.created", {"id": "in_1"}))

    mock_sync_service.apply_stripe_subscription.assert_not_called()
    mock_sync_service.link_customer.assert_not_called()


@pytest.mark.asyncio
async def test_errors_are_reraised(webhook_handler, mock_sync_service):
    mock_sync_service.apply_stripe_subscription.side_effect = EntitlementRepositoryError("db down")

    with pytest.raises(EntitlementRepositoryError):
        await webhook_handler.handle_event(_event("customer.subscription.updated", {"id": "sub_1"}))
