from .entitlement_service import EntitlementService
from .feature_catalog import FEATURE_METADATA, FeatureCatalogService, FeatureMetadata
from .stripe_service import StripeService
from .subscription_sync_service import SubscriptionSyncService
from .upgrade_prompt_service import UpgradePromptService
from .usage_recording_service import UsageRecordingService
from .webhook_handler_service import WebhookHandlerService

__all__ = [
    "EntitlementService",
    "FEATURE_METADATA",
    "FeatureCatalogService",
    "FeatureMetadata",
    "StripeService",
    "SubscriptionSyncService",
    "UpgradePromptService",
    "UsageRecordingService",
    "WebhookHandlerService",
]
