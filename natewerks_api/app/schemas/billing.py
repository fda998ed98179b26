"""
Pydantic models for subscription requests.

The subscription returned by Stripe is passed through as a plain dict;
its shape is owned by Stripe.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from .common import RequestBody


class SubscribeRequest(RequestBody):
    user_id: Optional[str] = Field(None, alias="userId")
    payment_method_id: Optional[str] = Field(None, alias="paymentMethodId", examples=["pm_card_visa"])


class SubscribeResponse(BaseModel):
    message: str
    subscription: Dict[str, Any]
