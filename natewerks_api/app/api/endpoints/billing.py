"""
Subscription endpoint.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header

from natewerks_api.app.api.deps import get_billing_service
from natewerks_api.app.schemas.billing import SubscribeRequest, SubscribeResponse
from natewerks_api.app.services.billing_service import BillingService


router = APIRouter()


@router.post("/subscribe", response_model=SubscribeResponse)
def subscribe(
    body: Optional[SubscribeRequest] = None,
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key"),
    service: BillingService = Depends(get_billing_service),
) -> SubscribeResponse:
    """Subscribe a user to the configured Stripe price.

    Creates the user's Stripe customer on first use.  An optional
    ``Idempotency-Key`` header is forwarded to Stripe's subscription
    call.  Responds 404 ``User not found`` for an unknown ``userId``.
    """
    body = body or SubscribeRequest()
    subscription = service.subscribe(body.user_id, body.payment_method_id, idempotency_key=idempotency_key)
    return SubscribeResponse(message="Subscription successful", subscription=subscription)
