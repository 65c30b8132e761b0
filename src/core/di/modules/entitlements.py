from dependency_injector import containers, providers

from src.modules.entitlements.repositories.impl.supabase.subscriber_repository import SupabaseSubscriberRepository
from src.modules.entitlements.repositories.impl.supabase.subscription_tier_repository import SupabaseSubscriptionTierRepository
from src.modules.entitlements.repositories.impl.supabase.usage_tracking_repository import SupabaseUsageTrackingRepository

from src.modules.entitlements.repositories.impl.postgres.subscriber_repository import PostgresSubscriberRepository
from src.modules.entitlements.repositories.impl.postgres.subscription_tier_repository import PostgresSubscriptionTierRepository
from src.modules.entitlements.repositories.impl.postgres.usage_tracking_repository import PostgresUsageTrackingRepository

from src.modules.entitlements.services.entitlement_service import EntitlementService
from src.modules.entitlements.services.feature_catalog import FeatureCatalogService
from src.modules.entitlements.services.stripe_service import StripeService
from src.modules.entitlements.services.subscription_sync_service import SubscriptionSyncService
from src.modules.entitlements.services.upgrade_prompt_service import UpgradePromptService
from src.modules.entitlements.services.usage_recording_service import UsageRecordingService
from src.modules.entitlements.services.webhook_handler_service import WebhookHandlerService


class EntitlementsContainer(containers.DeclarativeContainer):
    """
    Entitlements Module Container.
    """

    core = providers.DependenciesContainer()

    # Repositories
    subscriber_repository = providers.Selector(
        core.db_backend,
        supabase=providers.Factory(SupabaseSubscriberRepository, client=core.supabase_client),
        postgres=providers.Factory(PostgresSubscriberRepository, db=core.postgres_db),
    )

    subscription_tier_repository = providers.Selector(
        core.db_backend,
        supabase=providers.Factory(SupabaseSubscriptionTierRepository, client=core.supabase_client),
        postgres=providers.Factory(PostgresSubscriptionTierRepository, db=core.postgres_db),
    )

    usage_tracking_repository = providers.Selector(
        core.db_backend,
        supabase=providers.Factory(SupabaseUsageTrackingRepository, client=core.supabase_client),
        postgres=providers.Factory(PostgresUsageTrackingRepository, db=core.postgres_db),
    )

    # Services
    feature_catalog_service = providers.Singleton(FeatureCatalogService)

    entitlement_service = providers.Factory(
        EntitlementService,
        subscriber_repository=subscriber_repository,
        tier_repository=subscription_tier_repository,
        usage_repository=usage_tracking_repository,
    )

    upgrade_prompt_service = providers.Factory(
        UpgradePromptService,
        subscriber_repository=subscriber_repository,
        tier_repository=subscription_tier_repository,
        catalog_service=feature_catalog_service,
    )

    usage_recording_service = providers.Factory(
        UsageRecordingService,
        usage_repository=usage_tracking_repository,
        entitlement_service=entitlement_service,
    )

    stripe_service = providers.Singleton(StripeService)

    subscription_sync_service = providers.Factory(
        SubscriptionSyncService,
        subscriber_repository=subscriber_repository,
        tier_repository=subscription_tier_repository,
        stripe_service=stripe_service,
    )

    webhook_handler_service = providers.Factory(
        WebhookHandlerService,
        subscription_sync_service=subscription_sync_service,
    )
