from fastapi import APIRouter

from src.modules.entitlements.api.v1 import entitlements, usage, billing, webhooks

router = APIRouter()

router.include_router(entitlements.router)
router.include_router(usage.router)
router.include_router(billing.router)
router.include_router(webhooks.router)
