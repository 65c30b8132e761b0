import json

from fastapi import APIRouter, Header, Request, HTTPException, Depends
from dependency_injector.wiring import inject, Provide

from src.core.di.container import Container
from src.core.utils import get_logger
from src.modules.entitlements.services.stripe_service import StripeService
from src.modules.entitlements.services.webhook_handler_service import WebhookHandlerService

logger = get_logger(__name__)

router = APIRouter(prefix="/webhooks", tags=["Entitlements Webhooks"])

@router.post("/stripe")
@inject
async def stripe_webhook(
    request: Request,
    stripe_signature: str = Header(None),
    stripe_service: StripeService = Depends(Provide[Container.stripe_service]),
    webhook_handler: WebhookHandlerService = Depends(Provide[Container.webhook_handler_service])
):
    if not stripe_signature:
        raise HTTPException(status_code=400, detail="Missing Stripe-Signature header")

    payload = await request.body()

    try:
        stripe_service.construct_event(payload, stripe_signature)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid payload")
    except Exception as e:
        # stripe.SignatureVerificationError
        logger.error("webhook_signature_invalid", error=str(e))
        raise HTTPException(status_code=400, detail="Invalid signature")

    # Verified; the handler works on the plain JSON body
    await webhook_handler.handle_event(json.loads(payload))

    return {"status": "success"}
