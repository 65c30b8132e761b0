"""
Dependency Injection Container.
"""

from dependency_injector import containers, providers

from src.core.di.modules.core import CoreContainer
from src.core.di.modules.entitlements import EntitlementsContainer


class Container(containers.DeclarativeContainer):
    """
    Dependency Injection Container.

    Composes the infrastructure container with the entitlements module and
    exposes the services the API layer depends on.
    """

    wiring_config = containers.WiringConfiguration(
        modules=[
            "src.modules.entitlements.api.v1.entitlements",
            "src.modules.entitlements.api.v1.usage",
            "src.modules.entitlements.api.v1.billing",
            "src.modules.entitlements.api.v1.webhooks",
        ]
    )

    core = providers.Container(CoreContainer)

    entitlements = providers.Container(EntitlementsContainer, core=core)

    # Aliases used by the API layer
    entitlement_service = entitlements.entitlement_service
    upgrade_prompt_service = entitlements.upgrade_prompt_service
    usage_recording_service = entitlements.usage_recording_service
    subscription_tier_repository = entitlements.subscription_tier_repository
    subscription_sync_service = entitlements.subscription_sync_service
    stripe_service = entitlements.stripe_service
    webhook_handler_service = entitlements.webhook_handler_service
